"""Numbered, file-grouped presentation of lookup results and its navigation."""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import TagSelectConfig
from .errors import (
    BoundaryReachedError,
    CursorNotOnTagLineError,
    NumberCompletionRequiredError,
    SessionClosedError,
    TagNumberNotFoundError,
)
from .history import MarkStack
from .host import TagHost
from .models import FileGroup, Location, Match

logger = logging.getLogger(__name__)

HEADER = "header"
FILE = "file"
MATCH = "match"
BLANK = "blank"

# Called with the typed digit; returns the full tag number, "" for the
# default, or None when the user cancels.
NumberPrompt = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class RenderLine:
    """One line of the selection list."""
    kind: str
    text: str
    number: int | None = None
    path: Path | None = None
    location: Location | None = None

    @property
    def is_match(self) -> bool:
        return self.kind == MATCH


def render_lines(identifier: str, groups: list[FileGroup]) -> list[RenderLine]:
    """Lay out the header, a sub-header per file and one line per match.

    Matches are numbered 1..N in group order.
    """
    lines = [RenderLine(HEADER, f"Finding tag: {identifier}")]
    number = 0
    for group in groups:
        lines.append(RenderLine(BLANK, ""))
        lines.append(RenderLine(FILE, f"In: {group.path}", path=group.path))
        for match in group.matches:
            number += 1
            lines.append(
                RenderLine(
                    MATCH,
                    f"{number} [{match.location.line}] {match.text.strip()}",
                    number=number,
                    path=match.path,
                    location=match.location,
                )
            )
    return lines


class SelectionSession:
    """The navigable list for one lookup.

    The cursor is an index into ``lines``. It starts on the first match and
    NextTag/PreviousTag only ever stop on match lines.
    """

    def __init__(
        self,
        identifier: str,
        groups: list[FileGroup],
        host: TagHost,
        marks: MarkStack,
        config: TagSelectConfig | None = None,
        name: str | None = None,
    ) -> None:
        self.identifier = identifier
        self.name = name or identifier
        self.groups: tuple[FileGroup, ...] = tuple(groups)
        self.matches: tuple[Match, ...] = tuple(
            match for group in self.groups for match in group.matches
        )
        self.lines: tuple[RenderLine, ...] = tuple(render_lines(identifier, groups))
        self._index: dict[int, Location] = {
            idx: line.location
            for idx, line in enumerate(self.lines)
            if line.is_match and line.location is not None
        }
        self._host = host
        self._marks = marks
        self._config = config or TagSelectConfig()
        self._closed = False
        match_lines = sorted(self._index)
        self.cursor = match_lines[0] if match_lines else 0

    @classmethod
    def build(
        cls,
        identifier: str,
        groups: list[FileGroup],
        host: TagHost,
        marks: MarkStack,
        config: TagSelectConfig | None = None,
        name: str | None = None,
    ) -> SelectionSession:
        return cls(identifier, groups, host, marks, config=config, name=name)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def current_line(self) -> RenderLine:
        return self.lines[self.cursor]

    def render(self) -> list[str]:
        return [line.text for line in self.lines]

    def _check_open(self) -> None:
        if self._closed:
            raise SessionClosedError(self.name)

    def set_cursor(self, line: int) -> None:
        """Move the cursor to ``line``, clamped to the list."""
        self._check_open()
        self.cursor = max(0, min(line, len(self.lines) - 1))

    def next_tag(self) -> int:
        """Move to the next match line and return the new cursor."""
        self._check_open()
        line = self.cursor + 1
        while line < len(self.lines) and not self.lines[line].is_match:
            line += 1
        if line >= len(self.lines):
            self.cursor = self._last_match_line()
            raise BoundaryReachedError("next")
        self.cursor = line
        return line

    def previous_tag(self) -> int:
        """Move to the previous match line and return the new cursor."""
        self._check_open()
        line = self.cursor - 1
        while line >= 0 and not self.lines[line].is_match:
            line -= 1
        if line < 0:
            self.cursor = self._first_match_line()
            raise BoundaryReachedError("previous")
        self.cursor = line
        return line

    def _first_match_line(self) -> int:
        return min(self._index, default=0)

    def _last_match_line(self) -> int:
        return max(self._index, default=len(self.lines) - 1)

    def goto_tag(self, other_window: bool = False) -> Location:
        """Jump to the match under the cursor.

        The caller's location goes onto the mark stack first, so popping a
        mark returns to where the lookup started.
        """
        self._check_open()
        location = self._index.get(self.cursor)
        if location is None:
            raise CursorNotOnTagLineError(self.cursor)

        origin = self._host.current_location()
        if origin is not None:
            self._marks.push(origin)
        logger.debug(
            "Jumping to %s (other_window=%s) from %s",
            location, other_window, origin,
        )
        self._host.open_location(location, other_window=other_window)
        if self._config.highlight_after_jump:
            self._host.highlight(location, self._config.highlight_duration)
        return location

    def numbers_starting_with(self, prefix: str) -> list[int]:
        return [
            line.number for line in self.lines
            if line.number is not None and str(line.number).startswith(prefix)
        ]

    def needs_completion(self, prefix: str) -> bool:
        """Whether ``prefix`` must be completed before it names a tag."""
        if not self._config.go_if_unambiguous:
            return True
        return len(self.numbers_starting_with(prefix)) > 1

    def select_by_number(
        self,
        prefix: str,
        other_window: bool = False,
        prompt: NumberPrompt | None = None,
    ) -> Location | None:
        """Jump to a tag by number, starting from a typed digit.

        When the digit is ambiguous (or go_if_unambiguous is off) ``prompt``
        is asked for the full number, with the digit as default. Returns
        None if the prompt was cancelled. Without a prompt an incomplete
        digit raises NumberCompletionRequiredError.
        """
        self._check_open()
        number = prefix
        if self.needs_completion(prefix):
            if prompt is None:
                raise NumberCompletionRequiredError(
                    prefix, self.numbers_starting_with(prefix)
                )
            answer = prompt(prefix)
            if answer is None:
                return None
            number = answer.strip() or prefix
        return self.goto_number(number, other_window=other_window)

    def goto_number(self, number: str, other_window: bool = False) -> Location:
        """Jump to the match numbered exactly ``number``."""
        self._check_open()
        wanted = number.strip()
        saved = self.cursor
        for idx, line in enumerate(self.lines):
            if line.number is not None and str(line.number) == wanted:
                self.cursor = idx
                return self.goto_tag(other_window=other_window)
        self.cursor = saved
        raise TagNumberNotFoundError(wanted)

    def quit(self) -> None:
        """Dispose the session. Further navigation raises SessionClosedError."""
        if self._closed:
            return
        self._closed = True
        logger.debug("Closed selection session %s", self.name)
