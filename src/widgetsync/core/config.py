"""Configuration management with Pydantic validation.

Provides type-safe configuration with:
- Pydantic models for validation
- YAML file persistence
- Thread-safe access
- Defaults that run a complete daemon out of the box
"""

import logging
import re
import threading
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from ..widgets.base import DisplayKind
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/widgetsync.yaml")

# =============================================================================
# Configuration Models
# =============================================================================


class SnapshotConfig(BaseModel):
    """Location of the snapshot document written by the journal app."""

    path: Path = Field(Path("data/widget-data.json"), description="Snapshot JSON file")


class WatcherConfig(BaseModel):
    """Change watcher settings."""

    enabled: bool = Field(True, description="Refresh when the snapshot file changes")
    quiet_interval: float = Field(
        0.1, ge=0.01, le=5.0, description="Debounce quiet window in seconds"
    )


class BoundaryConfig(BaseModel):
    """Daily boundary refresh settings."""

    enabled: bool = Field(True, description="Refresh shortly after local midnight")
    offset_seconds: int = Field(5, ge=0, le=3599, description="Seconds after midnight")
    timer_id: str = Field("daily-widget-refresh", min_length=1, description="Stable timer identity")
    poll_interval: float = Field(1.0, ge=0.05, le=60.0, description="Alarm clock poll interval")


class DisplayInstanceConfig(BaseModel):
    """One installed widget."""

    id: str = Field(..., min_length=1, max_length=64, description="Stable instance identity")
    kind: DisplayKind = Field(..., description="Widget kind")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Instance ids become file names, keep them filesystem safe."""
        if not re.match(r"^[\w\-\.]+$", v):
            raise ValueError("Instance id contains invalid characters")
        return v


def _default_instances() -> list[DisplayInstanceConfig]:
    return [
        DisplayInstanceConfig(id="habits", kind="habit_progress"),
        DisplayInstanceConfig(id="stats", kind="stats"),
        DisplayInstanceConfig(id="today", kind="snippet"),
        DisplayInstanceConfig(id="calendar", kind="calendar"),
    ]


class DisplaysConfig(BaseModel):
    """Widget instances and rendering settings."""

    output_dir: Path = Field(Path("data/widgets"), description="Rendered widget images")
    width: int = Field(320, ge=64, le=2048, description="Widget image width")
    height: int = Field(160, ge=64, le=2048, description="Widget image height")
    cell_size: int = Field(28, ge=8, le=128, description="Calendar cell size in pixels")
    instances: list[DisplayInstanceConfig] = Field(default_factory=_default_instances)

    @field_validator("instances")
    @classmethod
    def validate_unique_ids(cls, v: list[DisplayInstanceConfig]) -> list[DisplayInstanceConfig]:
        ids = [instance.id for instance in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Display instance ids must be unique")
        return v


class WebConfig(BaseModel):
    """Control API server configuration."""

    enabled: bool = Field(True, description="Serve the control API")
    host: str = Field("127.0.0.1", description="Server bind address")
    port: int = Field(8765, ge=1, le=65535, description="Server port")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Log level")
    format: str = Field("simple", description="Format: simple, structured")
    file: str | None = Field(None, description="Log file path")
    max_size_mb: int = Field(10, ge=1, description="Max log file size")
    backup_count: int = Field(3, ge=0, description="Number of backup files")


class Config(BaseModel):
    """Root configuration model."""

    snapshot: SnapshotConfig = Field(default_factory=SnapshotConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)
    boundary: BoundaryConfig = Field(default_factory=BoundaryConfig)
    displays: DisplaysConfig = Field(default_factory=DisplaysConfig)
    web: WebConfig = Field(default_factory=WebConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Manager
# =============================================================================


class ConfigManager:
    """Thread-safe configuration manager with file persistence.

    Usage:
        config_manager = ConfigManager("/path/to/widgetsync.yaml")
        config = config_manager.get()
    """

    _instance: "ConfigManager | None" = None
    _instance_lock: threading.Lock = threading.Lock()

    def __init__(self, config_path: str | Path) -> None:
        self._config_path = Path(config_path)
        self._config: Config
        self._lock = threading.RLock()
        self._load()

    @property
    def path(self) -> Path:
        """Path of the backing YAML file."""
        return self._config_path

    @classmethod
    def get_instance(cls, config_path: str | Path | None = None) -> "ConfigManager":
        """Get singleton instance.

        Args:
            config_path: Path to config file (only used on first call)

        Returns:
            ConfigManager singleton instance
        """
        with cls._instance_lock:
            if cls._instance is None:
                if config_path is None:
                    config_path = DEFAULT_CONFIG_PATH
                cls._instance = cls(config_path)
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset singleton instance (for testing)."""
        with cls._instance_lock:
            cls._instance = None

    def _load(self) -> None:
        """Load and validate configuration from file."""
        if self._config_path.exists():
            try:
                with open(self._config_path) as f:
                    data = yaml.safe_load(f) or {}
                self._config = Config.model_validate(data)
                logger.info("Loaded config from %s", self._config_path)
            except Exception as e:
                logger.warning("Failed to load config, using defaults: %s", e)
                self._config = Config()
        else:
            logger.info("Config file not found, using defaults")
            self._config = Config()
            self._save()

    def _save(self) -> None:
        """Persist configuration to file.

        Raises:
            ConfigurationError: If the file cannot be written
        """
        try:
            self._config_path.parent.mkdir(parents=True, exist_ok=True)

            data = self._config.model_dump(mode="json")

            # Write atomically via temp file
            temp_path = self._config_path.with_suffix(".tmp")
            with open(temp_path, "w") as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
            temp_path.replace(self._config_path)

            logger.debug("Saved config to %s", self._config_path)
        except OSError as e:
            logger.error("Failed to save config: %s", e)
            raise ConfigurationError(
                "Failed to save config", details={"path": str(self._config_path)}, cause=e
            ) from e

    def get(self) -> Config:
        """Get current configuration (thread-safe copy).

        Returns:
            Deep copy of current configuration
        """
        with self._lock:
            return self._config.model_copy(deep=True)


# =============================================================================
# Convenience Functions
# =============================================================================


def get_config() -> Config:
    """Get current configuration from singleton manager."""
    return ConfigManager.get_instance().get()
