"""Custom exception hierarchy for the widget sync daemon.

Provides structured error handling with severity levels and context.
"""

from enum import Enum
from typing import Any


class ErrorSeverity(Enum):
    """Error severity levels for monitoring and logging."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class WidgetSyncError(Exception):
    """Base exception for all widget sync errors.

    Attributes:
        message: Human-readable error message
        details: Additional context as key-value pairs
        severity: Error severity level
    """

    severity: ErrorSeverity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "severity": self.severity.value,
            "details": self.details,
        }


class ConfigurationError(WidgetSyncError):
    """Configuration validation or loading error.

    Raised when:
    - Config file cannot be written
    - Values fail validation
    """

    pass


class SnapshotError(WidgetSyncError):
    """Snapshot document could not be read or parsed.

    Raised when:
    - The snapshot file is not valid JSON
    - The top-level JSON value is not an object
    - The snapshot file cannot be written

    Readers treat an unparseable snapshot as absent.
    """

    severity = ErrorSeverity.WARNING


class DisplayError(WidgetSyncError):
    """Display apply/render errors.

    Raised when:
    - A view model is applied to an unknown display instance
    - Rendering or writing a display image fails
    """

    pass


class SchedulingError(WidgetSyncError):
    """Wake timer could not be armed.

    Raised when the alarm clock is not running. Callers log it and wait
    for the next natural re-arm.
    """

    severity = ErrorSeverity.WARNING
