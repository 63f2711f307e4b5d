"""Image-backed display registry.

Each configured widget instance is a PNG file in the output directory.
Applying a view model renders it and atomically replaces that file, so a
consumer polling the directory never reads a half-written image.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, Sequence

from PIL import Image

from ..core.errors import DisplayError
from ..core.threading import ThreadSafeDict
from ..widgets.base import DisplayKind
from ..widgets.views import ViewModel
from .renderer import render_view

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppliedView:
    """Last view model put on an instance."""

    view: ViewModel
    applied_at: datetime


class ImageDisplayRegistry:
    """Renders widget instances to PNG files.

    Usage:
        registry = ImageDisplayRegistry(
            [("habits", DisplayKind.HABIT_PROGRESS)], Path("data/widgets")
        )
        registry.apply(DisplayKind.HABIT_PROGRESS, "habits", view)
    """

    def __init__(
        self,
        instances: Iterable[tuple[str, DisplayKind | str]],
        output_dir: str | Path,
        width: int = 320,
        height: int = 160,
        cell_size: int | None = None,
    ) -> None:
        self._kinds: dict[str, DisplayKind] = {
            instance_id: DisplayKind(kind) for instance_id, kind in instances
        }
        self._output_dir = Path(output_dir)
        self._width = width
        self._height = height
        self._cell_size = cell_size
        self._applied: ThreadSafeDict[str, AppliedView] = ThreadSafeDict()

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def all_instances(self) -> list[tuple[str, DisplayKind]]:
        """Every configured instance in configuration order."""
        return list(self._kinds.items())

    def instances(self, kind: DisplayKind) -> Sequence[str]:
        """Ids of the installed instances of one kind."""
        return [instance_id for instance_id, k in self._kinds.items() if k == kind]

    def image_path(self, instance_id: str) -> Path:
        return self._output_dir / f"{instance_id}.png"

    def last_view(self, instance_id: str) -> AppliedView | None:
        """Most recent view applied to an instance, if any."""
        return self._applied.get(instance_id)

    def apply(self, kind: DisplayKind, instance_id: str, view: ViewModel) -> None:
        """Render a view model and publish it as the instance's image.

        Raises:
            DisplayError: If the instance is unknown, of another kind, or
                the image cannot be written
        """
        expected = self._kinds.get(instance_id)
        if expected is None:
            raise DisplayError("Unknown display instance", details={"instance": instance_id})
        if expected != kind or view.kind != kind:
            raise DisplayError(
                "Display kind mismatch",
                details={"instance": instance_id, "expected": expected.value, "got": view.kind.value},
            )

        image = render_view(view, self._width, self._height, self._cell_size)
        self._write_image(instance_id, image)
        self._applied[instance_id] = AppliedView(view=view, applied_at=datetime.now())
        logger.debug("Applied %s view to %s", kind.value, instance_id)

    def _write_image(self, instance_id: str, image: Image.Image) -> None:
        target = self.image_path(instance_id)
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(prefix=f".{instance_id}-", suffix=".png", dir=self._output_dir)
        except OSError as e:
            raise DisplayError(
                "Cannot prepare display image", details={"path": str(target)}, cause=e
            ) from e

        try:
            with os.fdopen(fd, "wb") as f:
                image.save(f, format="PNG")
            os.replace(temp_name, target)
        except OSError as e:
            Path(temp_name).unlink(missing_ok=True)
            raise DisplayError(
                "Failed to write display image", details={"path": str(target)}, cause=e
            ) from e
