"""Lookup primitive interface and the sequential index-scanning engine."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from ..buffers import BufferRegistry
from ..errors import ProbeError, TagIndexError
from ..history import MarkStack
from ..models import Location, MatchHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagEntry:
    """One record of a tag index.

    ``pattern`` is literal text expected on the tag's line; ``line`` is the
    recorded line number. Either may be missing.
    """
    name: str
    path: Path
    line: int | None = None
    pattern: str | None = None


class TagProbe(ABC):
    """Stateful, one-match-at-a-time lookup.

    ``first`` starts a new enumeration; ``next`` continues it. Both return
    None or raise ProbeError when there is nothing more to produce.
    """

    name: str = ""

    @abstractmethod
    def first(self, identifier: str) -> MatchHandle | None:
        ...

    @abstractmethod
    def next(self, identifier: str) -> MatchHandle | None:
        ...

    @abstractmethod
    def tag_names(self) -> list[str]:
        """All tag names in the index, in index order."""


class IndexProbe(TagProbe):
    """Scan a tag index file entry by entry.

    Each visited match opens its source through the buffer registry, the way
    an editor visits a file to show a tag, and leaves the previous probe
    position on the mark stack.
    """

    def __init__(
        self,
        index_path: Path | str,
        registry: BufferRegistry,
        marks: MarkStack,
        case_fold: bool = False,
    ) -> None:
        self.index_path = Path(index_path)
        self._registry = registry
        self._marks = marks
        self._case_fold = case_fold
        self._entries: list[TagEntry] | None = None
        self._candidates: list[TagEntry] | None = None
        self._cursor = -1
        self._last: Location | None = None

    @abstractmethod
    def parse(self, text: str) -> list[TagEntry]:
        """Parse index file contents into entries."""

    def entries(self) -> list[TagEntry]:
        if self._entries is None:
            try:
                text = self.index_path.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                raise TagIndexError(self.index_path, str(exc)) from exc
            self._entries = self.parse(text)
            logger.info(
                "Loaded %d tags from %s (%s)",
                len(self._entries), self.index_path, self.name,
            )
        return self._entries

    def tag_names(self) -> list[str]:
        return [entry.name for entry in self.entries()]

    def resolve_source(self, raw: str) -> Path:
        path = Path(raw)
        if not path.is_absolute():
            path = self.index_path.parent / path
        return path

    def _matches(self, entry: TagEntry, identifier: str) -> bool:
        if self._case_fold:
            return entry.name.casefold() == identifier.casefold()
        return entry.name == identifier

    def first(self, identifier: str) -> MatchHandle | None:
        self._candidates = [
            entry for entry in self.entries() if self._matches(entry, identifier)
        ]
        self._cursor = 0
        self._last = None
        logger.debug(
            "Probe %s: %d candidates for '%s'",
            self.name, len(self._candidates), identifier,
        )
        if not self._candidates:
            return None
        return self._visit(identifier, self._candidates[0])

    def next(self, identifier: str) -> MatchHandle | None:
        if self._candidates is None:
            raise ProbeError(identifier, "next called before first")
        self._cursor += 1
        if self._cursor >= len(self._candidates):
            raise ProbeError(identifier, f"no more tags for '{identifier}'")
        return self._visit(identifier, self._candidates[self._cursor])

    def _visit(self, identifier: str, entry: TagEntry) -> MatchHandle:
        try:
            buffer = self._registry.open(entry.path)
        except OSError as exc:
            raise ProbeError(identifier, f"cannot open {entry.path}: {exc}") from exc

        line = self._locate(buffer, entry)
        location = Location(path=buffer.path, line=line)

        pushed = False
        if self._last is not None:
            self._marks.push(self._last)
            pushed = True
        self._last = location

        return MatchHandle(
            buffer=buffer,
            location=location,
            text=buffer.line_text(line),
            pushed_mark=pushed,
        )

    @staticmethod
    def _locate(buffer, entry: TagEntry) -> int:
        """Find the tag's line, preferring the pattern near the recorded line."""
        if entry.pattern:
            start = 1
            if entry.line:
                start = max(1, entry.line - 1)
            found = buffer.find_line(entry.pattern, start)
            if found is None and start > 1:
                found = buffer.find_line(entry.pattern)
            if found is not None:
                return found
        if entry.line:
            return entry.line
        return 1
