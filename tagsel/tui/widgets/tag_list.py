"""Tag list — read-only, numbered selection list for one lookup."""

from __future__ import annotations

import logging
from collections.abc import Callable

from rich.text import Text
from textual.binding import Binding
from textual.message import Message
from textual.widget import Widget

from tagsel.engine.errors import BoundaryReachedError, TagSelectError
from tagsel.engine.selection import BLANK, FILE, HEADER, SelectionSession

logger = logging.getLogger(__name__)

_LINE_STYLES = {
    HEADER: "bold",
    FILE: "bold cyan",
    BLANK: "",
}


class TagListView(Widget, can_focus=True):
    """Renders a SelectionSession and maps keys onto its operations."""

    BINDINGS = [
        Binding("n", "next_tag", "Next"),
        Binding("down", "next_tag", "Next", show=False),
        Binding("p", "previous_tag", "Previous"),
        Binding("up", "previous_tag", "Previous", show=False),
        Binding("enter", "goto_tag", "Go"),
        Binding("o", "goto_tag_other_window", "Go (other window)"),
        Binding("q", "quit_session", "Quit list"),
        *(
            Binding(str(digit), f"select_number('{digit}')", str(digit), show=False)
            for digit in range(1, 10)
        ),
    ]

    class NumberRequested(Message):
        """A typed digit needs completing into a full tag number."""

        def __init__(self, prefix: str) -> None:
            super().__init__()
            self.prefix = prefix

    class Closed(Message):
        """The user quit the session shown in this list."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.session: SelectionSession | None = None

    def show_session(self, session: SelectionSession) -> None:
        self.session = session
        self.refresh(layout=True)
        self._scroll_to_cursor()

    def clear(self) -> None:
        self.session = None
        self.refresh(layout=True)

    def get_content_height(self, container, viewport, width: int) -> int:
        if self.session is None:
            return 1
        return len(self.session.lines)

    def render(self) -> Text:
        if self.session is None:
            return Text("No tag list.", style="dim")
        body = Text()
        for idx, line in enumerate(self.session.lines):
            if idx:
                body.append("\n")
            if line.is_match:
                number, _, rest = line.text.partition(" ")
                style = "reverse" if idx == self.session.cursor else ""
                body.append(number, style=f"bold yellow {style}".strip())
                body.append(f" {rest}", style=style)
            else:
                body.append(line.text, style=_LINE_STYLES.get(line.kind, ""))
        return body

    def run_operation(self, operation: Callable[[], object]) -> object | None:
        """Run a session operation, reporting failures as notifications."""
        try:
            return operation()
        except BoundaryReachedError as exc:
            self.notify(str(exc), severity="warning")
        except TagSelectError as exc:
            self.notify(str(exc), severity="error")
        except OSError as exc:
            logger.warning("Jump failed: %s", exc)
            self.notify(f"Cannot open file: {exc}", severity="error")
        finally:
            self.refresh()
            self._scroll_to_cursor()
        return None

    def _scroll_to_cursor(self) -> None:
        if self.session is None or self.parent is None:
            return
        scroller = self.parent
        scroll_to = getattr(scroller, "scroll_to", None)
        if scroll_to is not None:
            scroll_to(y=max(0, self.session.cursor - 3), animate=False)

    def action_next_tag(self) -> None:
        if self.session is not None:
            self.run_operation(self.session.next_tag)

    def action_previous_tag(self) -> None:
        if self.session is not None:
            self.run_operation(self.session.previous_tag)

    def action_goto_tag(self) -> None:
        if self.session is not None:
            self.run_operation(lambda: self.session.goto_tag(other_window=False))

    def action_goto_tag_other_window(self) -> None:
        if self.session is not None:
            self.run_operation(lambda: self.session.goto_tag(other_window=True))

    def action_select_number(self, digit: str) -> None:
        session = self.session
        if session is None:
            return
        if session.needs_completion(digit):
            self.post_message(self.NumberRequested(digit))
            return
        self.run_operation(lambda: session.select_by_number(digit))

    def goto_number(self, number: str) -> None:
        session = self.session
        if session is not None:
            self.run_operation(lambda: session.goto_number(number))

    def action_quit_session(self) -> None:
        if self.session is not None:
            self.post_message(self.Closed())
