"""Top-level find-tag operation."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from tagsel.shared.services.session_naming import SessionNamer

from .aggregator import MatchAggregator
from .buffers import BufferRegistry
from .config import TagSelectConfig
from .errors import NavigationHistoryEmptyError, NoMatchesError
from .history import MarkStack
from .host import TagHost
from .models import Location
from .probes.base import TagProbe
from .selection import SelectionSession

logger = logging.getLogger(__name__)


@dataclass
class FindResult:
    """Outcome of find_tag.

    Exactly one of ``session`` (interactive selection needed) and
    ``jumped_to`` (single match, already visited) is set.
    """
    session: SelectionSession | None = None
    jumped_to: Location | None = None


class TagFinder:
    """Look up an identifier and hand back a selection session.

    Usage::

        finder = TagFinder(probe, host, marks, registry, config)
        result = finder.find_tag("parse_header")
        if result.session is not None:
            host.show(result.session)
    """

    def __init__(
        self,
        probe: TagProbe,
        host: TagHost,
        marks: MarkStack,
        registry: BufferRegistry,
        config: TagSelectConfig | None = None,
        namer: SessionNamer | None = None,
    ) -> None:
        self.probe = probe
        self.host = host
        self.marks = marks
        self.registry = registry
        self.config = config or TagSelectConfig()
        self.namer = namer or SessionNamer()

    def find_tag(self, identifier: str) -> FindResult:
        identifier = identifier.strip()
        if not identifier:
            raise NoMatchesError(identifier)

        aggregator = MatchAggregator(self.probe, self.marks, self.registry, self.config)
        groups = aggregator.find_all(identifier)
        if not groups:
            raise NoMatchesError(identifier)

        session = SelectionSession.build(
            identifier,
            groups,
            self.host,
            self.marks,
            config=self.config,
            name=self.namer.unique_name(identifier),
        )
        logger.info(
            "Found %d tag(s) for '%s' in %d file(s)",
            len(session.matches), identifier, len(groups),
        )

        if len(session.matches) == 1 and self.config.no_select_for_one_match:
            try:
                location = session.goto_tag()
            finally:
                session.quit()
            return FindResult(jumped_to=location)

        self.namer.register(session.name)
        return FindResult(session=session)

    def close_session(self, session: SelectionSession) -> None:
        session.quit()
        self.namer.release(session.name)

    def pop_mark(self) -> Location:
        """Return to the location saved by the most recent jump."""
        location = self.marks.pop()
        if location is None:
            raise NavigationHistoryEmptyError()
        self.host.open_location(location)
        return location
