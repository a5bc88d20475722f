"""Drive a lookup probe to completion and group its matches by file."""
from __future__ import annotations

import logging

from .buffers import ArtifactLifecycleManager, BufferRegistry
from .config import TagSelectConfig
from .history import MarkStack, MarkStackGuard
from .models import FileGroup, Match, MatchHandle
from .probes.base import TagProbe

logger = logging.getLogger(__name__)


class MatchAggregator:
    """Enumerate every match of an identifier into ordered file groups.

    Groups come out in the order their file was first reached, and matches
    inside a group keep discovery order. Consecutive matches in the same
    buffer share a group; a file reached again later starts a new one.
    Positionally identical matches are all kept.

    The whole enumeration runs under a MarkStackGuard, so marks pushed by
    the probe never reach the caller. Buffers the probe opened are closed
    as soon as enumeration moves past them (see ArtifactLifecycleManager).
    """

    def __init__(
        self,
        probe: TagProbe,
        marks: MarkStack,
        registry: BufferRegistry,
        config: TagSelectConfig | None = None,
    ) -> None:
        self._probe = probe
        self._marks = marks
        self._artifacts = ArtifactLifecycleManager(registry)
        self._config = config or TagSelectConfig()

    def find_all(self, identifier: str) -> list[FileGroup]:
        return MarkStackGuard(self._marks).run(lambda: self._collect(identifier))

    def _collect(self, identifier: str) -> list[FileGroup]:
        snapshot = self._artifacts.snapshot()

        try:
            current = self._probe.first(identifier)
        except Exception as exc:
            logger.info("Lookup of '%s' found nothing: %s", identifier, exc)
            return []
        if current is None:
            logger.info("Lookup of '%s' found nothing", identifier)
            return []

        groups: list[FileGroup] = []
        file_matches: list[Match] = []
        while current is not None:
            file_matches.append(Match.from_handle(current))
            if current.pushed_mark:
                self._marks.pop()

            active = current.buffer
            following = self._advance(identifier)

            if following is None or following.buffer.buffer_id != active.buffer_id:
                groups.append(FileGroup(path=active.path, matches=tuple(file_matches)))
                file_matches = []
                self._artifacts.maybe_dispose(active, snapshot, self._config)

            current = following

        logger.debug(
            "Lookup of '%s': %d matches in %d groups",
            identifier, sum(len(g) for g in groups), len(groups),
        )
        return groups

    def _advance(self, identifier: str) -> MatchHandle | None:
        # Any probe failure ends the enumeration.
        try:
            return self._probe.next(identifier)
        except Exception as exc:
            logger.debug("Probe exhausted for '%s': %s", identifier, exc)
            return None
