"""Control API routes.

Provides health and status checks, the current snapshot, the rendered
displays and the foreground-resume refresh trigger.
"""

import logging
import time

from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import FileResponse

from ...sync.dispatcher import RefreshReport
from ...widgets.views import view_to_dict
from ..schemas import (
    APIResponse,
    DisplayInfo,
    DisplaysListResponse,
    RefreshResponse,
    RefreshResult,
    StatusResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


def get_system(request: Request):
    """Get the running WidgetSyncSystem from app state."""
    return request.app.state.system


def _refresh_result(report: RefreshReport) -> RefreshResult:
    return RefreshResult(
        today=report.today,
        snapshot_present=report.snapshot_present,
        applied=[kind.value for kind in report.applied],
        failed=[kind.value for kind in report.failed],
        finished_at=report.finished_at,
    )


@router.get("/health")
async def health_check() -> APIResponse:
    """Health check endpoint."""
    return APIResponse(success=True, message="OK")


@router.get("/status")
async def get_status(request: Request) -> StatusResponse:
    """Get daemon status."""
    system = get_system(request)
    report = system.dispatcher.last_report
    wake = system.boundary.pending_wake if system.boundary else None

    return StatusResponse(
        refresh_count=system.dispatcher.refresh_count,
        last_refresh=_refresh_result(report) if report else None,
        next_boundary=wake.at if wake else None,
        alarm_clock_running=system.alarm_clock.is_running,
        watcher_running=system.watcher.is_running if system.watcher else False,
        watcher_pending=system.watcher.pending if system.watcher else False,
        snapshot_path=str(system.store.path),
        uptime=time.time() - system.started_at,
    )


@router.get("/snapshot")
async def get_snapshot(request: Request) -> Response:
    """Current snapshot as stored, 404 when absent or unreadable."""
    snapshot = get_system(request).store.read()
    if snapshot is None:
        raise HTTPException(status_code=404, detail="No snapshot available")
    return Response(content=snapshot.to_json(), media_type="application/json")


@router.post("/refresh")
def refresh(request: Request) -> RefreshResponse:
    """Foreground resume: refresh every display and re-arm the daily boundary."""
    report, wake = get_system(request).foreground_resume()
    logger.info("Refresh requested via API")

    return RefreshResponse(
        success=report.ok,
        message="Displays refreshed" if report.ok else "Some displays failed to refresh",
        refresh=_refresh_result(report),
        next_boundary=wake.at if wake else None,
    )


@router.get("/displays")
async def list_displays(request: Request) -> DisplaysListResponse:
    """Configured instances with their last applied view."""
    registry = get_system(request).registry
    displays = []

    for instance_id, kind in registry.all_instances():
        applied = registry.last_view(instance_id)
        displays.append(
            DisplayInfo(
                id=instance_id,
                kind=kind.value,
                image_url=f"/api/displays/{instance_id}/image",
                applied_at=applied.applied_at if applied else None,
                view=view_to_dict(applied.view) if applied else None,
            )
        )

    return DisplaysListResponse(displays=displays)


@router.get("/displays/{instance_id}/image")
async def get_display_image(instance_id: str, request: Request) -> FileResponse:
    """Last rendered PNG of one instance."""
    registry = get_system(request).registry
    if instance_id not in dict(registry.all_instances()):
        raise HTTPException(status_code=404, detail=f"Display not found: {instance_id}")

    path = registry.image_path(instance_id)
    if not path.exists():
        raise HTTPException(status_code=404, detail=f"Display not rendered yet: {instance_id}")

    return FileResponse(path, media_type="image/png")
