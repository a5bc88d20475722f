"""tagsel TUI — Textual application that hosts tag selection."""

from __future__ import annotations

import logging

from textual.app import App

from tagsel.engine.buffers import BufferRegistry
from tagsel.engine.config import TagSelectConfig
from tagsel.engine.errors import TagSelectError
from tagsel.engine.finder import TagFinder
from tagsel.engine.history import MarkStack
from tagsel.engine.models import Location
from tagsel.engine.probes.base import TagProbe
from tagsel.shared.services.session_naming import SessionNamer
from tagsel.tui.screens.main import MainScreen
from tagsel.tui.screens.prompt import PromptScreen

logger = logging.getLogger(__name__)


class TagSelectApp(App):
    """Terminal UI for choosing among all definitions of a tag.

    The app is the TagHost for every session it opens: jumps land in the
    main screen's source pane and the mark stack lives as long as the app.
    """

    TITLE = "tagsel"
    SUB_TITLE = "Tag Select"

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("t", "find_tag", "Find tag"),
        ("l", "show_list", "Tag list"),
        ("ctrl+o", "pop_mark", "Back"),
    ]

    def __init__(
        self,
        probe: TagProbe,
        config: TagSelectConfig | None = None,
        identifier: str | None = None,
        registry: BufferRegistry | None = None,
        marks: MarkStack | None = None,
        namer: SessionNamer | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.config = config or TagSelectConfig()
        self.registry = registry if registry is not None else BufferRegistry()
        self.marks = marks if marks is not None else MarkStack()
        self.finder = TagFinder(
            probe,
            self,
            self.marks,
            self.registry,
            self.config,
            namer or SessionNamer(),
        )
        self._initial_identifier = identifier
        self._main: MainScreen | None = None

    @property
    def main_screen(self) -> MainScreen:
        if self._main is None:
            raise RuntimeError("Main screen is not mounted yet")
        return self._main

    async def on_mount(self) -> None:
        self._main = MainScreen()
        await self.push_screen(self._main)
        if self._initial_identifier:
            self.call_after_refresh(self.find_tag, self._initial_identifier)

    def find_tag(self, identifier: str) -> None:
        """Look up ``identifier`` and show the result list or jump."""
        screen = self.main_screen
        previous = screen.tag_list.session
        try:
            result = self.finder.find_tag(identifier)
        except TagSelectError as exc:
            self.notify(str(exc), severity="error")
            return
        except OSError as exc:
            logger.warning("Jump to '%s' failed: %s", identifier, exc)
            self.notify(f"Cannot open file: {exc}", severity="error")
            return

        if previous is not None:
            self.finder.close_session(previous)
        if result.session is not None:
            screen.show_session(result.session)
        else:
            screen.hide_session()
            self.notify(f"Jumped to {result.jumped_to}")

    # TagHost

    def current_location(self) -> Location | None:
        return self.main_screen.current_location()

    def open_location(self, location: Location, other_window: bool = False) -> None:
        self.main_screen.open_location(location, other_window=other_window)

    def highlight(self, location: Location, seconds: float) -> None:
        self.main_screen.highlight(location, seconds)

    # Actions

    def action_find_tag(self) -> None:
        def _on_answer(answer: str | None) -> None:
            if answer and answer.strip():
                self.find_tag(answer.strip())

        self.push_screen(
            PromptScreen("Find tag", placeholder="Identifier"),
            callback=_on_answer,
        )

    def action_show_list(self) -> None:
        if not self.main_screen.reveal_list():
            self.notify("No tag list to show", severity="warning")

    def action_pop_mark(self) -> None:
        try:
            self.finder.pop_mark()
        except TagSelectError as exc:
            self.notify(str(exc), severity="warning")
        except OSError as exc:
            self.notify(f"Cannot open file: {exc}", severity="error")
