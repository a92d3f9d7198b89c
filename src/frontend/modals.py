"""Modal dialogs for the Textual config panel."""

from __future__ import annotations

from typing import Sequence

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Static


class PromptScreen(ModalScreen[str]):
    """Ask a question and dismiss with the id of the chosen button."""

    DEFAULT_CSS = """
    PromptScreen {
        align: center middle;
    }
    """

    def __init__(self, title: str, body: str, choices: Sequence[tuple[str, str, str]]) -> None:
        super().__init__()
        self._title = title
        self._body = body
        # (choice, label, button variant)
        self._choices = list(choices)

    def compose(self) -> ComposeResult:
        yield Container(
            Static(self._title, classes="modal-title"),
            Static(self._body, classes="modal-body"),
            Horizontal(
                *(Button(label, id=f"choice-{choice}", variant=variant) for choice, label, variant in self._choices),
                Button("Cancel", id="choice-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss((event.button.id or "choice-cancel").removeprefix("choice-"))


def unsaved_changes_prompt() -> PromptScreen:
    return PromptScreen(
        "Unsaved changes",
        "Save blocklist and settings before exit?",
        [("save", "Save", "success"), ("discard", "Discard", "error")],
    )


def reload_prompt() -> PromptScreen:
    return PromptScreen(
        "Reload config?",
        "Unsaved pattern edits will be lost.",
        [("save", "Save", "default"), ("reload", "Reload", "warning")],
    )


def remove_pattern_prompt(url: str) -> PromptScreen:
    return PromptScreen(
        "Remove pattern?",
        url or "(empty row)",
        [("remove", "Remove", "error")],
    )
