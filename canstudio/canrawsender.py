"""The raw frame sender component: a table of lines, each able to send a CAN frame once or periodically."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from .newlinemanager import CanFrame, ColName, NewLineManager
from .widgets import SenderGui, WidgetFactory

log = logging.getLogger(__name__)

COLUMNS = ("Id", "Data", "Loop", "Interval", "")
REQUIRED_COLUMNS = ("Id", "Data", "Loop", "Interval")
MAX_SORT_INDEX = 5
NAME_PROPERTY = "name"
SUPPORTED_PROPERTIES = {NAME_PROPERTY: str}


class ConfigError(ValueError):
    """Raised when a saved sender configuration cannot be restored."""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _json_int(value: Any) -> int:
    """Whole numbers convert to int; anything else becomes 0."""
    if isinstance(value, float):
        return int(value) if value.is_integer() else 0
    return int(value)


class CanRawSender:
    """Manages the sender lines, their configuration and the frames they emit."""

    def __init__(self, gui: Optional[SenderGui] = None, factory: Optional[WidgetFactory] = None) -> None:
        self._gui = gui if gui is not None else SenderGui()
        self._factory = factory if factory is not None else WidgetFactory()
        self._lines: list[NewLineManager] = []
        self._simulation_state = False
        self._current_index = 0
        self._docked = True
        self._properties: dict[str, Any] = {name: None for name in SUPPORTED_PROPERTIES}
        self._frame_listeners: list[Callable[[CanFrame], None]] = []
        self._dock_listeners: list[Callable[[SenderGui], None]] = []

        self._gui.on_add(self._add_new_item)
        self._gui.on_remove(self._remove_selected_rows)
        self._gui.on_dock_toggle(self._toggle_dock)

    @property
    def gui(self) -> SenderGui:
        return self._gui

    @property
    def lines(self) -> tuple[NewLineManager, ...]:
        return tuple(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def docked(self) -> bool:
        return self._docked

    @property
    def properties(self) -> dict[str, Any]:
        return dict(self._properties)

    @properties.setter
    def properties(self, values: Mapping[str, Any]) -> None:
        """Take the supported properties from ``values``; others are ignored."""
        for name in SUPPORTED_PROPERTIES:
            if name in values:
                self._properties[name] = values[name]

    def start_simulation(self) -> None:
        self._set_simulation_state(True)

    def stop_simulation(self) -> None:
        self._set_simulation_state(False)

    def _set_simulation_state(self, state: bool) -> None:
        self._simulation_state = state
        for line in self._lines:
            line.set_simulation_state(state)

    def send_frame(self, frame: CanFrame) -> None:
        """Pass a frame on to every listener."""
        for callback in list(self._frame_listeners):
            callback(frame)

    def on_send_frame(self, callback: Callable[[CanFrame], None]) -> None:
        self._frame_listeners.append(callback)

    def on_dock_toggled(self, callback: Callable[[SenderGui], None]) -> None:
        self._dock_listeners.append(callback)

    def _toggle_dock(self) -> None:
        self._docked = not self._docked
        for callback in list(self._dock_listeners):
            callback(self._gui)

    def get_config(self) -> dict:
        return {
            "senderColumns": list(COLUMNS),
            "sorting": {"currentIndex": self._current_index},
            "content": [line.to_json() for line in self._lines],
        }

    def set_config(self, config: Mapping[str, Any]) -> bool:
        """Restore a configuration, logging instead of raising; True on success."""
        try:
            self.restore_configuration(config)
        except ConfigError as exc:
            log.error("%s", exc)
            return False
        return True

    def restore_configuration(self, config: Mapping[str, Any]) -> None:
        """Restore columns, lines and sorting in that order; raises ConfigError on the first problem."""
        self._adopt_columns(config)
        self._adopt_content(config)
        self._adopt_sorting(config)

    def _add_new_item(self) -> None:
        line = NewLineManager(self, self._simulation_state, self._factory)
        row = len(self._lines)
        self._lines.append(line)
        self._place_widgets(row, line)

    def _place_widgets(self, row: int, line: NewLineManager) -> None:
        for column in ColName:
            self._gui.set_index_widget(row, int(column), line.widget(column))

    def _remove_rows(self, rows: list[int]) -> None:
        old_count = len(self._lines)
        for row in sorted(set(rows), reverse=True):
            del self._lines[row]
        for row, line in enumerate(self._lines):
            self._place_widgets(row, line)
        for row in range(len(self._lines), old_count):
            for column in ColName:
                self._gui.index_widgets.pop((row, int(column)), None)

    def _remove_selected_rows(self) -> None:
        self._remove_rows(self._gui.selected_rows)

    def _adopt_columns(self, config: Mapping[str, Any]) -> None:
        if "senderColumns" not in config:
            raise ConfigError("Columns item not found")
        columns = config["senderColumns"]
        if not isinstance(columns, list):
            raise ConfigError("Columns format is different than array")
        if len(columns) != len(COLUMNS):
            raise ConfigError(f"Columns array size is {len(columns)} - must be 5!")
        for name in REQUIRED_COLUMNS:
            if name not in columns:
                raise ConfigError(f"Columns array does not contain {name} field.")
        log.info("Columns validation is finished successfully.")

    def _adopt_content(self, config: Mapping[str, Any]) -> None:
        if "content" not in config:
            raise ConfigError("Content item not found")
        content = config["content"]
        if not isinstance(content, list):
            raise ConfigError("Content format is different than array")

        send = False
        for entry in content:
            line = entry if isinstance(entry, dict) else {}
            data = self._string_field(line, "data", "Data")
            frame_id = self._string_field(line, "id", "Id")
            interval = self._string_field(line, "interval", "Interval")
            loop = False
            if "loop" in line:
                if not isinstance(line["loop"], bool):
                    raise ConfigError("Loop does not contain a bool format.")
                loop = line["loop"]
            else:
                log.info("Loop is not available.")
            if "send" in line:
                if isinstance(line["send"], bool):
                    send = line["send"]
                else:
                    log.error("Send checked status does not contain a bool format.")
            else:
                log.info("Send checked status is not available.")

            self._add_new_item()
            if self._lines[-1].restore_line(frame_id, data, interval, loop, send):
                log.info("New line was adopted correctly.")
            else:
                self._remove_rows([len(self._lines) - 1])
                log.warning("Problem with a validation of line occurred.")

    @staticmethod
    def _string_field(line: Mapping[str, Any], key: str, label: str) -> str:
        if key not in line:
            log.info("%s is not available.", label)
            return ""
        value = line[key]
        if not isinstance(value, str):
            raise ConfigError(f"{label} does not contain a string format.")
        return value

    def _adopt_sorting(self, config: Mapping[str, Any]) -> None:
        if "sorting" not in config:
            raise ConfigError("Sorting item not found")
        sorting = config["sorting"]
        if not isinstance(sorting, dict):
            raise ConfigError("Sorting format is different than object")
        if len(sorting) != 1:
            raise ConfigError(f"Sorting object count {len(sorting)} is different than 1.")
        if "currentIndex" not in sorting:
            raise ConfigError("Sorting object does not contain currentIndex.")
        value = sorting["currentIndex"]
        if not _is_number(value):
            raise ConfigError("currentIndex format in sorting object is incorrect.")
        log.info("Sorting validation is finished successfully.")

        index = _json_int(value)
        if not 0 <= index <= MAX_SORT_INDEX:
            raise ConfigError(f"currentIndex data '{index}' is out of range.")
        self._current_index = index
        log.debug("currentIndex data is adopted new value = %d.", index)