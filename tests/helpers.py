"""Scripted probe and recording host shared by the engine tests."""

from __future__ import annotations

from pathlib import Path

from tagsel.engine.buffers import BufferRegistry
from tagsel.engine.errors import ProbeError
from tagsel.engine.history import MarkStack
from tagsel.engine.models import Location, MatchHandle
from tagsel.engine.probes.base import TagProbe


def write_sources(root: Path, *names: str, lines: int = 40) -> dict[str, Path]:
    """Create small source files whose line N reads '<name> line N'."""
    paths = {}
    for name in names:
        path = root / name
        path.write_text("\n".join(f"{name} line {n}" for n in range(1, lines + 1)))
        paths[name] = path.resolve()
    return paths


class ScriptedProbe(TagProbe):
    """Replays a fixed list of (path, line) steps.

    A step may be an exception instance, raised when reached. Running off
    the end raises ProbeError like a real index probe.
    """

    name = "scripted"

    def __init__(
        self,
        registry: BufferRegistry,
        marks: MarkStack,
        steps: list,
        push_marks: bool = True,
        flag_marks: bool = True,
    ) -> None:
        self.registry = registry
        self.marks = marks
        self.steps = steps
        self.push_marks = push_marks
        self.flag_marks = flag_marks
        self.calls: list[str] = []
        self._idx = 0

    def first(self, identifier: str) -> MatchHandle | None:
        self.calls.append("first")
        self._idx = 0
        return self._step(identifier)

    def next(self, identifier: str) -> MatchHandle | None:
        self.calls.append("next")
        self._idx += 1
        return self._step(identifier)

    def tag_names(self) -> list[str]:
        return []

    def _step(self, identifier: str) -> MatchHandle | None:
        if self._idx >= len(self.steps):
            raise ProbeError(identifier, "end of script")
        step = self.steps[self._idx]
        if step is None:
            return None
        if isinstance(step, Exception):
            raise step
        path, line = step
        buffer = self.registry.open(path)
        if self.push_marks:
            self.marks.push(Location(path=buffer.path, line=line))
        return MatchHandle(
            buffer=buffer,
            location=Location(path=buffer.path, line=line),
            text=buffer.line_text(line),
            pushed_mark=self.push_marks and self.flag_marks,
        )


class RecordingHost:
    """TagHost that records jumps and highlights."""

    def __init__(self, start: Location | None = None) -> None:
        self.location = start
        self.opened: list[tuple[Location, bool]] = []
        self.highlights: list[tuple[Location, float]] = []

    def current_location(self) -> Location | None:
        return self.location

    def open_location(self, location: Location, other_window: bool = False) -> None:
        self.opened.append((location, other_window))
        self.location = location

    def highlight(self, location: Location, seconds: float) -> None:
        self.highlights.append((location, seconds))
