"""Source view — read-only pane showing the buffer a tag jump landed in."""

from __future__ import annotations

from rich.syntax import Syntax
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.timer import Timer
from textual.widgets import Static

from tagsel.engine.buffers import SourceBuffer
from tagsel.engine.models import Location

_CONTEXT_LINES = 5


class SourceView(VerticalScroll):
    """Scrollable, syntax-highlighted view of one source buffer."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.source_buffer: SourceBuffer | None = None
        self.source_location: Location | None = None
        self._highlighted: int | None = None
        self._highlight_timer: Timer | None = None

    def compose(self) -> ComposeResult:
        yield Static(
            Text("No file visited. Press t to look up a tag.", style="dim"),
            id="source-body",
        )

    def show(self, buffer: SourceBuffer, location: Location) -> None:
        """Display ``buffer`` scrolled to ``location``."""
        self.source_buffer = buffer
        self.source_location = location
        self._highlighted = None
        self._cancel_timer()
        self._render_buffer()
        self.scroll_to(y=max(0, location.line - 1 - _CONTEXT_LINES), animate=False)

    def flash(self, line: int, seconds: float) -> None:
        """Highlight ``line`` for ``seconds``."""
        if self.source_buffer is None or seconds <= 0:
            return
        self._cancel_timer()
        self._highlighted = line
        self._render_buffer()
        self._highlight_timer = self.set_timer(seconds, self.clear_highlight)

    def clear_highlight(self) -> None:
        self._highlight_timer = None
        if self._highlighted is None:
            return
        self._highlighted = None
        self._render_buffer()

    @property
    def highlighted_line(self) -> int | None:
        return self._highlighted

    def _cancel_timer(self) -> None:
        if self._highlight_timer is not None:
            self._highlight_timer.stop()
            self._highlight_timer = None

    def _render_buffer(self) -> None:
        if self.source_buffer is None:
            return
        code = self.source_buffer.text
        syntax = Syntax(
            code,
            Syntax.guess_lexer(str(self.source_buffer.path), code),
            line_numbers=True,
            highlight_lines={self._highlighted} if self._highlighted else None,
            word_wrap=False,
        )
        self.query_one("#source-body", Static).update(syntax)
