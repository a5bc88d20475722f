"""What the selection workflow needs from the hosting editor or UI."""
from __future__ import annotations

from typing import Protocol

from .models import Location


class TagHost(Protocol):
    """Presentation surface and jump target.

    ``current_location`` is where the user is before a jump (None when
    nothing is visited yet). ``open_location`` shows the location, in an
    alternate view when ``other_window`` is set. ``highlight`` marks the
    jump target for ``seconds``; it is purely cosmetic.
    """

    def current_location(self) -> Location | None:
        ...

    def open_location(self, location: Location, other_window: bool = False) -> None:
        ...

    def highlight(self, location: Location, seconds: float) -> None:
        ...
