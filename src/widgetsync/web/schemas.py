"""Pydantic schemas for control API responses."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel


class APIResponse(BaseModel):
    """Standard API response wrapper."""

    success: bool
    message: str = ""
    data: dict[str, Any] | None = None


class RefreshResult(BaseModel):
    """Outcome of one refresh pass."""

    today: date
    snapshot_present: bool
    applied: list[str]
    failed: list[str]
    finished_at: datetime | None = None


class StatusResponse(BaseModel):
    """Daemon status response."""

    refresh_count: int
    last_refresh: RefreshResult | None
    next_boundary: datetime | None
    alarm_clock_running: bool
    watcher_running: bool
    watcher_pending: bool
    snapshot_path: str
    uptime: float


class RefreshResponse(APIResponse):
    """Result of a foreground-resume refresh."""

    refresh: RefreshResult
    next_boundary: datetime | None = None


class DisplayInfo(BaseModel):
    """One configured widget instance."""

    id: str
    kind: str
    image_url: str
    applied_at: datetime | None = None
    view: dict[str, Any] | None = None


class DisplaysListResponse(BaseModel):
    """Configured widget instances."""

    displays: list[DisplayInfo]
