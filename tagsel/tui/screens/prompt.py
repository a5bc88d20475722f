"""Single-line prompt modal used for tag numbers and identifiers."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Static


class PromptScreen(ModalScreen[str | None]):
    """Ask for one line of text. Returns the text, or None if cancelled."""

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
    ]

    CSS = """
    PromptScreen {
        align: center middle;
    }
    PromptScreen > Vertical {
        width: 60;
        height: auto;
        background: $surface;
        border: thick $accent;
        padding: 1 2;
    }
    PromptScreen .prompt-title {
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
        width: 100%;
    }
    """

    def __init__(
        self,
        title: str,
        default: str = "",
        placeholder: str = "",
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._title = title
        self._default = default
        self._placeholder = placeholder

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(self._title, classes="prompt-title")
            yield Input(
                value=self._default,
                placeholder=self._placeholder,
                id="prompt-input",
            )

    def on_mount(self) -> None:
        self.query_one("#prompt-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.dismiss(event.value)

    def action_cancel(self) -> None:
        self.dismiss(None)


class TagNumberScreen(PromptScreen):
    """Complete a typed digit into a full tag number."""

    def __init__(self, prefix: str, **kwargs) -> None:
        super().__init__(
            "Tag number",
            default=prefix,
            placeholder="Number of the tag to visit",
            **kwargs,
        )
