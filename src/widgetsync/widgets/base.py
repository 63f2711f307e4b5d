"""Display kinds and the registry interface.

Every installed widget belongs to one of a closed set of kinds. The
dispatcher builds one view model per kind and hands it to a
``DisplayRegistry``, which knows which instances exist and how to put a
view model on them.
"""

from enum import Enum
from typing import TYPE_CHECKING, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from .views import ViewModel


class DisplayKind(str, Enum):
    """Widget kinds, each with its own view-model shape."""

    HABIT_PROGRESS = "habit_progress"
    STATS = "stats"
    SNIPPET = "snippet"
    CALENDAR = "calendar"


@runtime_checkable
class DisplayRegistry(Protocol):
    """Enumerates installed displays and applies view models to them.

    ``apply`` is write-only; its result is never consumed. Implementations
    may raise, the dispatcher isolates failures per kind.
    """

    def instances(self, kind: DisplayKind) -> Sequence[str]:
        """Return stable ids of the installed displays of one kind."""
        ...

    def apply(self, kind: DisplayKind, instance_id: str, view: "ViewModel") -> None:
        """Put a fully formed view model on one display instance."""
        ...
