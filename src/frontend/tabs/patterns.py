"""Patterns tab implementation."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from textual import on
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Static

from core.blocklist import should_block_url
from core.gif_classifier import is_gif_url
from core.url_normalizer import normalize_url
from ..modals import remove_pattern_prompt
from ..validators import duplicate_indexes, parse_pattern


class PatternsTab(Container):
    """Patterns tab for editing config.patterns and testing URLs."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._loading_form = False
        self._current_row_key: Optional[str] = None
        self._table_ready = False

    def compose(self):
        with Vertical(id="patterns-panel"):
            with Horizontal(id="patterns-body"):
                with Container(id="patterns-left"):
                    yield DataTable(id="patterns-table", cursor_type="row")
                with Container(id="patterns-right"):
                    yield Static("Blocked GIF URLs", id="patterns-title")
                    yield Static(
                        "Paste exact GIF links to block. Matching is exact.",
                        classes="subtle",
                    )
                    yield Static("url", classes="form-label")
                    yield Input(placeholder="e.g. https://media.tenor.com/.../gif", id="pattern-url")
                    yield Static("", id="pattern-hint", classes="settings-error")
                    yield Static("URL tester", id="patterns-test-title")
                    yield Input(placeholder="Paste a URL to test against the blocklist", id="pattern-test-url")
                    with Horizontal(id="patterns-test-actions"):
                        yield Button("Test", id="pattern-test", variant="primary")
                    yield Static("", id="pattern-test-result")
            with Horizontal(id="patterns-actions"):
                yield Button("Add pattern", id="add-pattern", variant="success")
                yield Button("Remove pattern", id="delete-pattern", variant="error")

    def on_mount(self) -> None:
        table = self.query_one("#patterns-table", DataTable)
        table.add_column("#", key="index", width=4)
        table.add_column("url", key="url", width=56)
        table.add_column("status", key="status", width=14)
        table.zebra_stripes = True
        self.query_one("#patterns-test-actions").styles.height = 3
        self._table_ready = True
        self.reload_from_config()
        self._set_form_state(None)

    def reload_from_config(self) -> None:
        if not self._table_ready:
            return
        table = self.query_one("#patterns-table", DataTable)
        table.clear()
        for index, value, status in self._iter_patterns():
            table.add_row(str(index + 1), value, status, key=str(index))
        self._update_action_state()

    def _iter_patterns(self) -> Iterable[tuple[int, str, str]]:
        patterns = self.app.patterns
        duplicates = duplicate_indexes(patterns)
        for index, value in enumerate(patterns):
            yield index, value, self._status_for(index, value, duplicates)

    def _status_for(self, index: int, value: str, duplicates: set[int]) -> str:
        info = parse_pattern(value)
        if info.error:
            status = "empty"
        elif index in duplicates:
            status = "duplicate"
        elif info.warning:
            status = "not a gif"
        else:
            status = "ok"
        if index in self.app.config_state.edited_rows:
            status = f"{status} *"
        return status

    def _set_patterns(self, patterns: list[str]) -> None:
        self.app.update_config_section("patterns", patterns)

    def _update_action_state(self) -> None:
        delete_btn = self.query_one("#delete-pattern", Button)
        delete_btn.disabled = self._current_row_key is None

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self._current_row_key = self._coerce_row_key(event.row_key)
        self._set_form_state(self._current_row_key)
        self._update_action_state()

    @on(Input.Changed, "#pattern-url")
    def _on_url_changed(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        index = self._current_index()
        if index is None:
            return
        patterns = self.app.patterns
        if index >= len(patterns):
            return
        patterns[index] = event.value
        self.app.config_state.edited_rows.add(index)
        self._set_patterns(patterns)
        self._update_hint(event.value)
        # Duplicate flags of later rows can change, so refresh every status.
        duplicates = duplicate_indexes(patterns)
        self._update_table_cell(index, "url", event.value)
        for row, value in enumerate(patterns):
            self._update_table_cell(row, "status", self._status_for(row, value, duplicates))

    @on(Button.Pressed, "#add-pattern")
    def _on_add_pattern(self) -> None:
        patterns = self.app.patterns
        patterns.append("")
        self._set_patterns(patterns)
        self.reload_from_config()
        self._select_row(len(patterns) - 1)
        self.query_one("#pattern-url", Input).focus()

    @on(Button.Pressed, "#delete-pattern")
    def _on_delete_pattern(self) -> None:
        index = self._current_index()
        if index is None:
            return
        patterns = self.app.patterns
        if index >= len(patterns):
            return
        self.app.push_screen(remove_pattern_prompt(patterns[index]), self._handle_delete_pattern)

    def _handle_delete_pattern(self, choice: str | None) -> None:
        if choice != "remove":
            return
        index = self._current_index()
        if index is None:
            return
        patterns = self.app.patterns
        if index >= len(patterns):
            return
        patterns.pop(index)
        # Row indexes shift after a removal; drop the stale edit markers.
        self.app.config_state.edited_rows.clear()
        self._set_patterns(patterns)
        self._current_row_key = None
        self.reload_from_config()
        self._set_form_state(None)

    @on(Button.Pressed, "#pattern-test")
    def _on_test_url(self) -> None:
        url = self.query_one("#pattern-test-url", Input).value.strip()
        result = self.query_one("#pattern-test-result", Static)
        if not url:
            result.update("Add a URL to test.")
            return
        patterns = [value for value in self.app.patterns if value.strip()]
        lines = [
            f"normalized: {normalize_url(url)}",
            f"gif-like:   {'yes' if is_gif_url(url) else 'no'}",
        ]
        if should_block_url(url, patterns):
            lines.append("Blocked")
        elif not patterns:
            lines.append("No patterns configured.")
        else:
            lines.append("Not blocked")
        result.update("\n".join(lines))

    def _update_hint(self, value: str) -> None:
        info = parse_pattern(value)
        self.query_one("#pattern-hint", Static).update(info.error or info.warning or "")

    def _set_form_state(self, row_key: Optional[str]) -> None:
        self._loading_form = True
        url_input = self.query_one("#pattern-url", Input)
        if row_key is None:
            url_input.value = ""
            url_input.disabled = True
            self.query_one("#pattern-hint", Static).update("")
        else:
            index = int(row_key)
            patterns = self.app.patterns
            if index >= len(patterns):
                self._loading_form = False
                return
            url_input.value = patterns[index]
            url_input.disabled = False
            self._update_hint(patterns[index])
        self._loading_form = False

    def _select_row(self, index: int) -> None:
        table = self.query_one("#patterns-table", DataTable)
        try:
            table.move_cursor(row=index)
        except Exception:
            return
        self._current_row_key = str(index)
        self._set_form_state(self._current_row_key)
        self._update_action_state()

    def _update_table_cell(self, index: int, column_key: str, value: Any) -> None:
        table = self.query_one("#patterns-table", DataTable)
        row_key = str(index)
        try:
            table.get_row(row_key)
        except Exception:
            self.reload_from_config()
            return
        table.update_cell(row_key, column_key, value)

    def _current_index(self) -> Optional[int]:
        if self._current_row_key is None:
            return None
        try:
            return int(self._current_row_key)
        except ValueError:
            return None

    @staticmethod
    def _coerce_row_key(value: Any) -> str:
        if hasattr(value, "value"):
            return str(value.value)
        return str(value)
