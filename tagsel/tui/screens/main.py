"""Main screen — tag list above a source pane."""

from __future__ import annotations

import logging

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.screen import Screen
from textual.widgets import Footer, Static

from tagsel.engine.models import Location
from tagsel.engine.selection import SelectionSession
from tagsel.tui.screens.prompt import TagNumberScreen
from tagsel.tui.widgets.source_view import SourceView
from tagsel.tui.widgets.tag_list import TagListView

logger = logging.getLogger(__name__)


class MainScreen(Screen):
    """Hosts one selection session and the buffer jumps land in."""

    CSS = """
    #tag-list-scroll {
        height: 1fr;
        border: round $accent;
    }
    #tag-list-scroll.hidden {
        display: none;
    }
    #source-view {
        height: 2fr;
        border: round $primary;
    }
    #status-line {
        height: 1;
        background: $boost;
        padding: 0 1;
    }
    """

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="tag-list-scroll", classes="hidden"):
            yield TagListView(id="tag-list")
        yield SourceView(id="source-view")
        yield Static("", id="status-line")
        yield Footer()

    @property
    def tag_list(self) -> TagListView:
        return self.query_one("#tag-list", TagListView)

    @property
    def source_view(self) -> SourceView:
        return self.query_one("#source-view", SourceView)

    @property
    def list_visible(self) -> bool:
        return not self.query_one("#tag-list-scroll").has_class("hidden")

    def show_session(self, session: SelectionSession) -> None:
        self.tag_list.show_session(session)
        self._set_list_visible(True)
        self.call_after_refresh(self.tag_list.focus)
        self._set_status(f"{session.name}  {len(session.matches)} tag(s)")

    def hide_session(self) -> None:
        self.tag_list.clear()
        self._set_list_visible(False)
        self.source_view.focus()

    def reveal_list(self) -> bool:
        """Show the tag list again after a same-window jump."""
        if self.tag_list.session is None:
            return False
        self._set_list_visible(True)
        self.call_after_refresh(self.tag_list.focus)
        return True

    # TagHost surface, delegated from the app.

    def current_location(self) -> Location | None:
        return self.source_view.source_location

    def open_location(self, location: Location, other_window: bool = False) -> None:
        buffer = self.app.registry.open(location.path)
        self.source_view.show(buffer, location)
        self._set_status(str(location))
        if other_window:
            return
        self._set_list_visible(False)
        self.source_view.focus()

    def highlight(self, location: Location, seconds: float) -> None:
        self.source_view.flash(location.line, seconds)

    def _set_list_visible(self, visible: bool) -> None:
        scroller = self.query_one("#tag-list-scroll")
        if visible:
            scroller.remove_class("hidden")
        else:
            scroller.add_class("hidden")

    def _set_status(self, text: str) -> None:
        self.query_one("#status-line", Static).update(text)

    def on_tag_list_view_number_requested(
        self, event: TagListView.NumberRequested
    ) -> None:
        def _on_answer(answer: str | None) -> None:
            if answer is None:
                return
            self.tag_list.goto_number(answer.strip() or event.prefix)

        self.app.push_screen(TagNumberScreen(event.prefix), callback=_on_answer)

    def on_tag_list_view_closed(self, event: TagListView.Closed) -> None:
        session = self.tag_list.session
        if session is not None:
            self.app.finder.close_session(session)
        self.hide_session()
