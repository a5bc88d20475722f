"""Value types shared by the lookup, aggregation and selection layers."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .buffers import SourceBuffer


@dataclass(frozen=True)
class Location:
    """A position in a source file. ``line`` is 1-based, ``column`` 0-based."""
    path: Path
    line: int
    column: int = 0

    def __str__(self) -> str:
        return f"{self.path}:{self.line}"


@dataclass(frozen=True)
class MatchHandle:
    """What a probe returns for one match.

    Probes may reuse the buffer behind a handle on the next call, so callers
    copy what they need into a :class:`Match` before advancing.
    """
    buffer: SourceBuffer
    location: Location
    text: str
    pushed_mark: bool = False


@dataclass(frozen=True)
class Match:
    """Durable copy of one probe result."""
    path: Path
    text: str
    location: Location

    @classmethod
    def from_handle(cls, handle: MatchHandle) -> Match:
        return cls(
            path=handle.buffer.path,
            text=handle.text,
            location=handle.location,
        )


@dataclass(frozen=True)
class FileGroup:
    """Matches from one source file, in discovery order."""
    path: Path
    matches: tuple[Match, ...]

    def __len__(self) -> int:
        return len(self.matches)
