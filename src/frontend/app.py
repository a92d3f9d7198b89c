"""Main Textual app for the gifblock config panel."""

from __future__ import annotations

from typing import Any, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Center, Container, Horizontal, Vertical
from textual.widgets import Button, ContentSwitcher, Footer, Static, Tab, Tabs

from adapters.json_pattern_store import PATTERNS_KEY, JsonPatternStore
from .constants import ACCENT_PINK, CONFIG_PATH
from .modals import reload_prompt, unsaved_changes_prompt
from .state import ConfigState
from .tabs.patterns import PatternsTab
from .tabs.settings import SettingsTab

TAB_IDS = ("patterns", "settings")


class ConfigPanelApp(App):
    """Edits the blocklist and display settings stored in config.json."""

    BINDINGS = [
        ("ctrl+s", "save_config", "Save"),
        ("ctrl+r", "reload_config", "Reload"),
        ("q", "request_quit", "Quit"),
        ("ctrl+c", "request_quit", "Quit"),
    ]

    CSS_PATH = "app.tcss"

    def __init__(self, store: Optional[JsonPatternStore] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.store = store or JsonPatternStore(CONFIG_PATH)
        self.config_state = ConfigState()

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal(id="header-row"):
                with Vertical(id="header-left"):
                    yield Static(
                        Text.assemble(("GIF", ACCENT_PINK), ("BLOCK > Config Panel", "bold")),
                        id="title",
                    )
                    yield Static("exact-match GIF blocklist", classes="subtle")
                    yield Static("", id="header-count", classes="subtle")
                with Vertical(id="header-right"):
                    yield Static(f"config: {self.store.path.name}", classes="subtle")
                    yield Static("", id="header-status")
                    with Horizontal(id="header-actions"):
                        yield Button("Save", id="save-btn")
                        yield Button("Reload", id="reload-btn")

        with Container(id="tabs-bar"):
            with Center(id="tabs-center"):
                yield Tabs(
                    *(Tab(tab_id.title(), id=tab_id) for tab_id in TAB_IDS),
                    id="tabs",
                )

        with ContentSwitcher(id="content", initial="patterns"):
            yield PatternsTab(id="patterns")
            yield SettingsTab(id="settings")
        yield Footer()

    def on_mount(self) -> None:
        self._load_config()

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        if event.tab.id in TAB_IDS:
            self.query_one("#content", ContentSwitcher).current = event.tab.id

    @property
    def patterns(self) -> list[str]:
        data = self.config_state.data or {}
        patterns = data.get(PATTERNS_KEY)
        if isinstance(patterns, list):
            return [item if isinstance(item, str) else "" for item in patterns]
        return []

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save-btn":
            self.action_save_config()
        elif event.button.id == "reload-btn":
            self.action_reload_config()

    def action_save_config(self) -> None:
        self._save_config()

    def action_reload_config(self) -> None:
        if not self.config_state.dirty:
            self._load_config()
            return
        self.push_screen(reload_prompt(), self._after_reload_prompt)

    def action_request_quit(self) -> None:
        if not self.config_state.dirty:
            self.exit()
            return
        self.push_screen(unsaved_changes_prompt(), self._after_quit_prompt)

    def _after_quit_prompt(self, choice: Optional[str]) -> None:
        if choice == "discard" or (choice == "save" and self._save_config()):
            self.exit()

    def _after_reload_prompt(self, choice: Optional[str]) -> None:
        if choice == "reload" or (choice == "save" and self._save_config()):
            self._load_config()

    def _load_config(self) -> None:
        state = self.config_state
        try:
            data = self.store.load_document()
        except (OSError, ValueError) as exc:
            state.data = None
            state.error = str(exc)
        else:
            # A missing file starts as an empty blocklist; saving creates it.
            data.setdefault(PATTERNS_KEY, [])
            state.data = data
            state.error = None
        state.dirty = False
        state.edited_rows.clear()
        self._after_change()

    def _save_config(self) -> bool:
        state = self.config_state
        if state.data is None:
            state.error = "Nothing to save"
            self._refresh_header()
            return False

        data = dict(state.data)
        # Blank rows are left over from "Add pattern" and never stored.
        data[PATTERNS_KEY] = [value.strip() for value in self.patterns if value.strip()]
        try:
            self.store.save_document(data)
        except OSError as exc:
            state.error = f"save failed: {exc.strerror or exc}"
            self._refresh_header()
            return False

        state.data = data
        state.dirty = False
        state.error = None
        state.edited_rows.clear()
        self._after_change()
        return True

    def update_config_section(self, section: str, value: Any) -> None:
        """Replace one top-level config key in memory and mark the config dirty."""

        if self.config_state.data is None:
            self.config_state.data = {}
        self.config_state.data[section] = value
        self.config_state.dirty = True
        self._refresh_header()

    def _after_change(self) -> None:
        self._refresh_header()
        self.query_one(PatternsTab).reload_from_config()
        self.query_one(SettingsTab).reload_from_config()

    def _refresh_header(self) -> None:
        state = self.config_state
        status = self.query_one("#header-status", Static)
        status.remove_class("status-loaded", "status-modified", "status-error")
        if state.error:
            status.update(f"config: {state.error}")
            status.add_class("status-error")
        elif state.dirty:
            status.update("config: modified *")
            status.add_class("status-modified")
        else:
            status.update("config: loaded")
            status.add_class("status-loaded")

        count = sum(1 for value in self.patterns if value.strip())
        self.query_one("#header-count", Static).update(f"{count} blocked URL(s)")
        self.query_one("#save-btn", Button).disabled = state.data is None or not state.dirty
