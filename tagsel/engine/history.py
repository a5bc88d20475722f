"""Navigation history (the mark stack) and its scoped save/restore guard."""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import TypeVar

from .models import Location

logger = logging.getLogger(__name__)

MAX_MARK_ENTRIES = 256

T = TypeVar("T")

MarkStackSnapshot = tuple[Location, ...]


class MarkStack:
    """Back-navigation history. The most recent location is on top."""

    def __init__(self, max_entries: int = MAX_MARK_ENTRIES) -> None:
        self.max_entries = max(1, max_entries)
        self._entries: list[Location] = []

    def push(self, location: Location) -> None:
        self._entries.append(location)
        overflow = len(self._entries) - self.max_entries
        if overflow > 0:
            del self._entries[:overflow]

    def pop(self) -> Location | None:
        if not self._entries:
            return None
        return self._entries.pop()

    def peek(self) -> Location | None:
        return self._entries[-1] if self._entries else None

    def snapshot(self) -> MarkStackSnapshot:
        return tuple(self._entries)

    def restore(self, snapshot: MarkStackSnapshot) -> None:
        self._entries = list(snapshot)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Location]:
        return iter(self._entries)


class MarkStackGuard:
    """Run a body of work and put the mark stack back exactly as it was.

    Restoration happens on every exit path, including errors raised midway
    through a probe sequence.

    Usage::

        guard = MarkStackGuard(marks)
        groups = guard.run(lambda: aggregate())

        with MarkStackGuard(marks):
            ...
    """

    def __init__(self, marks: MarkStack) -> None:
        self._marks = marks
        self._saved: MarkStackSnapshot | None = None

    def run(self, body: Callable[[], T]) -> T:
        with self:
            return body()

    def __enter__(self) -> MarkStackGuard:
        self._saved = self._marks.snapshot()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        saved, self._saved = self._saved, None
        if saved is None:
            return
        if len(self._marks) != len(saved):
            logger.debug(
                "Restoring mark stack: %d -> %d entries",
                len(self._marks), len(saved),
            )
        self._marks.restore(saved)
