"""Settings tab implementation."""

from __future__ import annotations

from typing import Any, Optional

from textual.containers import Container, Horizontal, ScrollableContainer, Vertical
from textual.widgets import ContentSwitcher, DataTable, Input, Select, Static, Switch

from core.config import DEFAULT_REPLACEMENT_MODE, REPLACEMENT_MODES
import settings as app_settings

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# widget id -> (config path, default, kind)
FIELDS: dict[str, tuple[tuple[str, ...], Any, str]] = {
    "display-replacement-mode": (("replacement_mode",), DEFAULT_REPLACEMENT_MODE, "choice"),
    "logging-enabled": (("logging", "enabled"), False, "flag"),
    "logging-level": (("logging", "level"), "INFO", "choice"),
    "logging-console": (("logging", "console"), True, "flag"),
    "logging-file-enabled": (("logging", "file", "enabled"), False, "flag"),
    "logging-file-path": (("logging", "file", "path"), app_settings.DEFAULT_LOG_PATH, "text"),
    "logging-file-max-bytes": (("logging", "file", "max_bytes"), app_settings.DEFAULT_LOG_MAX_BYTES, "int"),
    "logging-file-backup": (("logging", "file", "backup_count"), app_settings.DEFAULT_LOG_BACKUP_COUNT, "int"),
}

FILE_FIELDS = ("logging-file-path", "logging-file-max-bytes", "logging-file-backup")


class SettingsTab(Container):
    """Settings tab for the replacement mode and logging sections."""

    SECTIONS = [
        ("display", "Display", "What to show when a GIF is blocked"),
        ("logging", "Logging", "Console/file logging"),
    ]

    CHOICES = {
        "display-replacement-mode": [
            ("Show italic 'GIF Blocked' note", "note"),
            ("Hide completely", "hide"),
        ],
        "logging-level": [(level, level) for level in LOG_LEVELS],
    }

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._loading_form = False
        self._table_ready = False

    def compose(self):
        with Vertical(id="settings-panel"):
            with Horizontal(id="settings-body"):
                with Container(id="settings-left"):
                    yield DataTable(id="settings-table", cursor_type="row")
                with Container(id="settings-right"):
                    with ContentSwitcher(id="settings-forms", initial="settings-display"):
                        with Container(id="settings-display"):
                            yield Static("Display", id="settings-title")
                            yield from self._field("replacement_mode", "display-replacement-mode")
                            yield Static("", id="display-error", classes="settings-error")
                        with ScrollableContainer(id="settings-logging"):
                            yield Static("Logging", id="settings-title")
                            yield from self._field("enabled", "logging-enabled")
                            yield from self._field("level", "logging-level")
                            yield from self._field("console", "logging-console")
                            yield from self._field("file.enabled", "logging-file-enabled")
                            yield from self._field("file.path", "logging-file-path")
                            yield from self._field("file.max_bytes", "logging-file-max-bytes")
                            yield from self._field("file.backup_count", "logging-file-backup")
                            yield Static("", id="logging-error", classes="settings-error")

    def _field(self, label: str, widget_id: str):
        _, default, kind = FIELDS[widget_id]
        yield Static(label, classes="form-label")
        if kind == "flag":
            yield Switch(id=widget_id)
        elif kind == "choice":
            yield Select(self.CHOICES[widget_id], id=widget_id, allow_blank=False)
        else:
            yield Input(placeholder=str(default), id=widget_id)

    def on_mount(self) -> None:
        table = self.query_one("#settings-table", DataTable)
        table.add_column("section", key="section", width=18)
        table.add_column("description", key="description", width=34)
        for key, label, description in self.SECTIONS:
            table.add_row(label, description, key=key)
        table.zebra_stripes = True
        self._table_ready = True
        self.reload_from_config()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        section = event.row_key.value if event.row_key is not None else None
        if section:
            self.query_one("#settings-forms", ContentSwitcher).current = f"settings-{section}"

    def reload_from_config(self) -> None:
        if not self._table_ready:
            return
        self._loading_form = True
        try:
            self._set_error("display-error", "")
            self._set_error("logging-error", "")
            for widget_id, (path, default, kind) in FIELDS.items():
                self._load_field(widget_id, self._lookup(path, default), kind)
            self._toggle_file_fields(bool(self._lookup(FIELDS["logging-file-enabled"][0], False)))
        finally:
            self._loading_form = False

    def _load_field(self, widget_id: str, value: Any, kind: str) -> None:
        widget = self.query_one(f"#{widget_id}")
        if kind == "flag":
            widget.value = bool(value)
        elif kind == "choice":
            allowed = [option for _, option in self.CHOICES[widget_id]]
            if value in allowed:
                widget.value = value
            else:
                widget.value = allowed[0]
                self._set_error(self._error_id(widget_id), f"Invalid value: {value}")
        else:
            widget.value = str(value)

    def on_switch_changed(self, event: Switch.Changed) -> None:
        if event.switch.id == "logging-file-enabled":
            self._toggle_file_fields(bool(event.value))
        self._store(event.switch.id, bool(event.value))

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.value is Select.BLANK:
            return
        self._store(event.select.id, event.value)

    def on_input_changed(self, event: Input.Changed) -> None:
        widget_id = event.input.id
        if widget_id not in FIELDS:
            return
        if FIELDS[widget_id][2] != "int":
            self._store(widget_id, event.value)
            return
        stripped = event.value.strip()
        if not stripped:
            return
        if not stripped.isdigit():
            self._set_error("logging-error", "Enter a non-negative integer")
            return
        self._set_error("logging-error", "")
        self._store(widget_id, int(stripped))

    def _store(self, widget_id: Optional[str], value: Any) -> None:
        if self._loading_form or widget_id not in FIELDS:
            return
        path, default, _ = FIELDS[widget_id]
        # Changed events also fire after a reload sets the widgets.
        if self._lookup(path, default) == value:
            return
        data = self.app.config_state.data or {}
        if len(path) == 1:
            self.app.update_config_section(path[0], value)
            return
        section = self._as_dict(data.get(path[0]))
        node = section
        for key in path[1:-1]:
            node[key] = self._as_dict(node.get(key))
            node = node[key]
        node[path[-1]] = value
        self.app.update_config_section(path[0], section)
        self._set_error(self._error_id(widget_id), "")

    def _lookup(self, path: tuple[str, ...], default: Any) -> Any:
        node: Any = self.app.config_state.data or {}
        for key in path:
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node

    def _toggle_file_fields(self, enabled: bool) -> None:
        for widget_id in FILE_FIELDS:
            self.query_one(f"#{widget_id}", Input).disabled = not enabled

    def _set_error(self, error_id: str, message: str) -> None:
        self.query_one(f"#{error_id}", Static).update(message)

    @staticmethod
    def _error_id(widget_id: str) -> str:
        return "display-error" if widget_id.startswith("display-") else "logging-error"

    @staticmethod
    def _as_dict(value: Any) -> dict[str, Any]:
        return dict(value) if isinstance(value, dict) else {}
