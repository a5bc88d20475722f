"""Exception hierarchy for tag lookup and selection.

Every failure the selection workflow can report is a TagSelectError, so
hosts can surface them as notifications with a single except clause.
"""
from __future__ import annotations

from pathlib import Path


class TagSelectError(Exception):
    """Base exception for all tag selection errors."""


class NoMatchesError(TagSelectError):
    """The lookup produced no match for the identifier."""
    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"No tags found for '{identifier}'")


class ProbeError(TagSelectError):
    """The lookup primitive could not produce a match.

    After at least one match this only means enumeration is over.
    """
    def __init__(self, identifier: str, reason: str):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Probe for '{identifier}' failed: {reason}")


class CursorNotOnTagLineError(TagSelectError):
    """GotoTag was invoked on a header, file or blank line."""
    def __init__(self, line: int):
        self.line = line
        super().__init__(f"Line {line + 1} is not a tag line")


class TagNumberNotFoundError(TagSelectError):
    """No rendered match carries the requested number."""
    def __init__(self, number: str):
        self.number = number
        super().__init__(f"Tag number '{number}' not found")


class BoundaryReachedError(TagSelectError):
    """Next/previous tag navigation ran off the list."""
    def __init__(self, direction: str):
        self.direction = direction
        where = "end" if direction == "next" else "beginning"
        super().__init__(f"No more tags: reached {where} of list")


class SessionClosedError(TagSelectError):
    """A navigation operation was issued on a disposed session."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Selection session {name} is closed")


class NavigationHistoryEmptyError(TagSelectError):
    """There is no location to return to."""
    def __init__(self) -> None:
        super().__init__("No previous location in navigation history")


class UnknownBackendError(TagSelectError):
    """Requested lookup backend does not exist."""
    def __init__(self, backend: str, available: list[str]):
        self.backend = backend
        self.available = available
        avail_str = ", ".join(available) if available else "none"
        super().__init__(
            f"Unknown tag backend '{backend}'. Available backends: {avail_str}"
        )


class TagIndexError(TagSelectError):
    """The tag index file is missing or unreadable."""
    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot read tag index {path}: {reason}")


class NumberCompletionRequiredError(TagSelectError):
    """A typed digit is ambiguous and no prompt was given to complete it."""
    def __init__(self, prefix: str, candidates: list[int]):
        self.prefix = prefix
        self.candidates = candidates
        super().__init__(
            f"Tag number '{prefix}' is ambiguous ({len(candidates)} candidates)"
        )
