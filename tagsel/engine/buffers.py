"""Open source buffers and disposal of buffers opened only for probing."""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import TagSelectConfig

logger = logging.getLogger(__name__)

ResourceIdentitySet = frozenset[str]


@dataclass
class SourceBuffer:
    """In-memory copy of a source file, keyed by an opaque buffer id."""
    path: Path
    lines: list[str]
    buffer_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def line_text(self, line: int) -> str:
        """Return the text of 1-based ``line``, or "" when out of range."""
        if 1 <= line <= len(self.lines):
            return self.lines[line - 1]
        return ""

    def find_line(self, needle: str, start: int = 1) -> int | None:
        """Find the first line at or after ``start`` containing ``needle``."""
        for idx in range(max(0, start - 1), len(self.lines)):
            if needle in self.lines[idx]:
                return idx + 1
        return None

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class BufferRegistry:
    """Registry of open source buffers.

    A path has at most one open buffer. Closing never prompts; a closed
    buffer's id is never reused.
    """

    def __init__(self) -> None:
        self._buffers: dict[str, SourceBuffer] = {}

    @staticmethod
    def _key(path: Path) -> Path:
        try:
            return path.resolve()
        except OSError:
            return path.absolute()

    def find(self, path: Path | str) -> SourceBuffer | None:
        key = self._key(Path(path))
        for buf in self._buffers.values():
            if buf.path == key:
                return buf
        return None

    def open(self, path: Path | str) -> SourceBuffer:
        """Return the buffer visiting ``path``, reading the file if needed.

        Raises OSError when the file cannot be read.
        """
        existing = self.find(path)
        if existing is not None:
            return existing
        key = self._key(Path(path))
        text = key.read_text(encoding="utf-8", errors="replace")
        buf = SourceBuffer(path=key, lines=text.splitlines())
        self._buffers[buf.buffer_id] = buf
        logger.debug("Opened buffer %s for %s", buf.buffer_id, key)
        return buf

    def add(self, buffer: SourceBuffer) -> SourceBuffer:
        """Register an already-built buffer (for hosts with their own loaders)."""
        self._buffers[buffer.buffer_id] = buffer
        return buffer

    def get(self, buffer_id: str) -> SourceBuffer | None:
        return self._buffers.get(buffer_id)

    def identities(self) -> ResourceIdentitySet:
        return frozenset(self._buffers)

    def close(self, buffer_id: str) -> bool:
        buf = self._buffers.pop(buffer_id, None)
        if buf is None:
            return False
        logger.debug("Closed buffer %s (%s)", buffer_id, buf.path)
        return True

    def buffers(self) -> list[SourceBuffer]:
        return list(self._buffers.values())

    def __contains__(self, buffer_id: object) -> bool:
        return buffer_id in self._buffers

    def __len__(self) -> int:
        return len(self._buffers)


class ArtifactLifecycleManager:
    """Tell pre-existing buffers apart from ones opened while probing."""

    def __init__(self, registry: BufferRegistry) -> None:
        self._registry = registry

    def snapshot(self) -> ResourceIdentitySet:
        return self._registry.identities()

    def maybe_dispose(
        self,
        buffer: SourceBuffer,
        snapshot: ResourceIdentitySet,
        config: TagSelectConfig,
    ) -> bool:
        """Close ``buffer`` if it was opened after ``snapshot`` was taken.

        Only call this once probing has moved past the buffer.
        """
        if not config.kill_artifact_buffers:
            return False
        if buffer.buffer_id in snapshot:
            return False
        disposed = self._registry.close(buffer.buffer_id)
        if disposed:
            logger.debug("Disposed artifact buffer for %s", buffer.path)
        return disposed
