"""Core infrastructure module.

Provides foundational components:
- Configuration management with validation
- Custom exception hierarchy
- Structured logging
- Thread-safe primitives
"""

from .config import Config, ConfigManager, get_config
from .errors import (
    WidgetSyncError,
    ConfigurationError,
    SnapshotError,
    DisplayError,
    SchedulingError,
)
from .logging import setup_logging, get_logger
from .threading import AtomicCounter, LockedValue, ThreadSafeDict, StoppableThread

__all__ = [
    # Config
    "Config",
    "ConfigManager",
    "get_config",
    # Errors
    "WidgetSyncError",
    "ConfigurationError",
    "SnapshotError",
    "DisplayError",
    "SchedulingError",
    # Logging
    "setup_logging",
    "get_logger",
    # Threading
    "AtomicCounter",
    "LockedValue",
    "ThreadSafeDict",
    "StoppableThread",
]
