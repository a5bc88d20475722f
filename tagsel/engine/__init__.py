"""Tag lookup, aggregation and selection engine."""
from .aggregator import MatchAggregator
from .buffers import ArtifactLifecycleManager, BufferRegistry, SourceBuffer
from .config import TagSelectConfig
from .errors import (
    BoundaryReachedError,
    CursorNotOnTagLineError,
    NavigationHistoryEmptyError,
    NoMatchesError,
    NumberCompletionRequiredError,
    ProbeError,
    SessionClosedError,
    TagIndexError,
    TagNumberNotFoundError,
    TagSelectError,
    UnknownBackendError,
)
from .finder import FindResult, TagFinder
from .history import MarkStack, MarkStackGuard
from .host import TagHost
from .models import FileGroup, Location, Match, MatchHandle
from .selection import RenderLine, SelectionSession, render_lines

__all__ = [
    "ArtifactLifecycleManager",
    "BoundaryReachedError",
    "BufferRegistry",
    "CursorNotOnTagLineError",
    "FileGroup",
    "FindResult",
    "Location",
    "MarkStack",
    "MarkStackGuard",
    "Match",
    "MatchAggregator",
    "MatchHandle",
    "NavigationHistoryEmptyError",
    "NoMatchesError",
    "NumberCompletionRequiredError",
    "ProbeError",
    "RenderLine",
    "SelectionSession",
    "SessionClosedError",
    "SourceBuffer",
    "TagFinder",
    "TagHost",
    "TagIndexError",
    "TagNumberNotFoundError",
    "TagSelectConfig",
    "TagSelectError",
    "UnknownBackendError",
    "render_lines",
]
