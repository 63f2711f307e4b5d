"""Journal Widget Sync entry point.

Usage:
    python -m widgetsync [options]

Options:
    --config PATH     Path to config file (default: config/widgetsync.yaml)
    --refresh-once    Refresh every display once and exit
    --no-web          Do not serve the control API
    --debug           Enable debug logging
"""

import argparse
import asyncio
import signal
import sys
import threading
import time
from pathlib import Path

from . import __version__
from .core.config import DEFAULT_CONFIG_PATH, Config, ConfigManager, get_config
from .core.logging import setup_logging, get_logger
from .display.registry import ImageDisplayRegistry
from .snapshot.store import JsonFileSnapshotStore
from .sync.alarms import AlarmClock, ScheduledWake
from .sync.boundary import DailyBoundaryScheduler
from .sync.dispatcher import RefreshDispatcher, RefreshReport
from .sync.watcher import DebouncedChangeWatcher

logger = get_logger(__name__)


class WidgetSyncSystem:
    """Main application coordinator.

    Wires the snapshot store, display registry and dispatcher to the three
    refresh triggers and manages their lifecycle.
    """

    def __init__(self, config: Config) -> None:
        """Build all components from configuration.

        Args:
            config: Validated configuration
        """
        self._config = config
        self._running = False
        self._shutdown_event = threading.Event()
        self.started_at = time.time()

        self.store = JsonFileSnapshotStore(config.snapshot.path)
        self.registry = ImageDisplayRegistry(
            [(instance.id, instance.kind) for instance in config.displays.instances],
            config.displays.output_dir,
            width=config.displays.width,
            height=config.displays.height,
            cell_size=config.displays.cell_size,
        )
        self.dispatcher = RefreshDispatcher(self.store, self.registry)
        self.alarm_clock = AlarmClock(poll_interval=config.boundary.poll_interval)

        self.boundary: DailyBoundaryScheduler | None = None
        if config.boundary.enabled:
            self.boundary = DailyBoundaryScheduler(
                self.alarm_clock,
                self.dispatcher.refresh_all,
                offset_seconds=config.boundary.offset_seconds,
                timer_id=config.boundary.timer_id,
            )

        self.watcher: DebouncedChangeWatcher | None = None
        if config.watcher.enabled:
            self.watcher = DebouncedChangeWatcher(
                config.snapshot.path,
                self.dispatcher.refresh_all,
                quiet_interval=config.watcher.quiet_interval,
            )

        self._web_server = None

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self, serve_web: bool = True) -> None:
        """Start all system components."""
        logger.info("Starting widget sync")
        self._running = True

        try:
            self.alarm_clock.start()

            if self.watcher:
                self.watcher.start()

            # Boot counts as a resume: bring displays current and arm the boundary
            self.foreground_resume()

            if serve_web and self._config.web.enabled:
                self._start_web_server()

            logger.info("Widget sync started")

        except Exception as e:
            logger.exception("Failed to start system: %s", e)
            self.stop()
            raise

    def foreground_resume(self) -> tuple[RefreshReport, ScheduledWake | None]:
        """Refresh every display and re-arm the daily boundary."""
        report = self.dispatcher.refresh_all()
        wake = self.boundary.schedule_next_boundary() if self.boundary else None
        return report, wake

    def _start_web_server(self) -> None:
        """Start the control API in a background thread."""
        import uvicorn
        from .web import create_app

        config = self._config.web
        server_config = uvicorn.Config(
            create_app(self),
            host=config.host,
            port=config.port,
            log_level="warning",
        )

        self._web_server = uvicorn.Server(server_config)

        def run_server():
            asyncio.run(self._web_server.serve())

        thread = threading.Thread(target=run_server, name="WebServer", daemon=True)
        thread.start()

        logger.info("Control API started on http://%s:%d", config.host, config.port)

    def stop(self) -> None:
        """Stop all system components."""
        if not self._running:
            return

        logger.info("Stopping widget sync")
        self._running = False

        # Stop components in reverse order
        if self._web_server:
            self._web_server.should_exit = True

        if self.watcher:
            self.watcher.stop()

        self.alarm_clock.stop()

        self._shutdown_event.set()
        logger.info("Widget sync stopped")

    def wait_for_shutdown(self) -> None:
        """Wait for shutdown signal."""
        self._shutdown_event.wait()


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Journal home-screen widget sync daemon",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Path to config file",
    )
    parser.add_argument(
        "--refresh-once",
        action="store_true",
        help="Refresh every display once and exit",
    )
    parser.add_argument(
        "--no-web",
        action="store_true",
        help="Do not serve the control API",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    # Setup initial logging
    setup_logging(level="DEBUG" if args.debug else "INFO")

    logger.info("Journal Widget Sync v%s", __version__)

    try:
        ConfigManager.get_instance(args.config)
        config = get_config()
    except Exception as e:
        logger.exception("Could not load configuration: %s", e)
        return 1

    setup_logging(
        level="DEBUG" if args.debug else config.logging.level,
        log_format=config.logging.format,
        log_file=config.logging.file,
        max_size_mb=config.logging.max_size_mb,
        backup_count=config.logging.backup_count,
    )

    system = WidgetSyncSystem(config)

    if args.refresh_once:
        report = system.dispatcher.refresh_all()
        return 0 if report.ok else 1

    # Setup signal handlers
    def signal_handler(sig, frame):
        logger.info("Received signal %s, shutting down...", sig)
        system.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        system.start(serve_web=not args.no_web)
        system.wait_for_shutdown()
        return 0

    except Exception as e:
        logger.exception("Fatal error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
