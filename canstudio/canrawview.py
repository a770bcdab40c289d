"""The raw frame view component: a log of sent and received CAN frames, with a unique-frame filter."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping, Optional

from .canrawsender import ConfigError
from .newlinemanager import CanFrame
from .table import ColType, SortModel, SortOrder, Table
from .viewgui import ViewGui

log = logging.getLogger(__name__)

COLUMNS = ("rowID", "time", "id", "dir", "dlc", "data")
COLUMN_TYPES = (ColType.UINT, ColType.DOUBLE, ColType.HEX, ColType.STR, ColType.UINT, ColType.STR)
ROW_COUNT_MAX = 2000
EXPECTED_VIEW_COLUMNS = 5
EXTENDED_FLAG = 0x80000000
NAME_PROPERTY = "name"
SUPPORTED_PROPERTIES = {NAME_PROPERTY: str}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _json_int(value: Any) -> int:
    """Whole numbers convert to int; anything else becomes 0."""
    if isinstance(value, float):
        return int(value) if value.is_integer() else 0
    return int(value)


def _new_table() -> Table:
    table = Table(COLUMNS)
    for column, col_type in enumerate(COLUMN_TYPES):
        table.set_column_type(column, col_type)
    return table


class CanRawView:
    """Shows every frame in order and, in filter mode, only the latest frame per id and direction."""

    def __init__(self, gui: Optional[ViewGui] = None, clock: Optional[Callable[[], float]] = None) -> None:
        self._gui = gui if gui is not None else ViewGui()
        self._clock = clock if clock is not None else time.monotonic
        self._started_at = self._clock()
        self._sim_started = False
        self._docked = True
        self._row_id = 0
        self._prev_index = 0
        self._sort_index = 0
        self._current_sort_order = SortOrder.ASCENDING
        self._properties: dict[str, Any] = {name: None for name in SUPPORTED_PROPERTIES}
        self._dock_listeners: list[Callable[[ViewGui], None]] = []
        self._unique_rx: dict[int, int] = {}
        self._unique_tx: dict[int, int] = {}

        self._table = _new_table()
        self._unique_table = _new_table()
        self._sort_model = SortModel(self._table)
        self._unique_sort_model = SortModel(self._unique_table)

        self._gui.init_table_view(self._table)
        self._gui.set_model(self._sort_model)
        self._gui.on_clear(self._clear)
        self._gui.on_section_clicked(self._sort)
        self._gui.on_filter(self._set_filter)
        self._gui.on_dock_toggle(self._toggle_dock)

    @property
    def gui(self) -> ViewGui:
        return self._gui

    @property
    def table(self) -> Table:
        return self._table

    @property
    def unique_table(self) -> Table:
        return self._unique_table

    @property
    def sort_model(self) -> SortModel:
        return self._sort_model

    @property
    def unique_sort_model(self) -> SortModel:
        return self._unique_sort_model

    @property
    def simulation_started(self) -> bool:
        return self._sim_started

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
        self._started_at = self._clock()
        self._sim_started = True
        self._clear()

    def stop_simulation(self) -> None:
        self._sim_started = False

    def frame_received(self, frame: CanFrame) -> None:
        self._frame_view(frame, "RX")

    def frame_sent(self, status: bool, frame: CanFrame) -> None:
        if status:
            self._frame_view(frame, "TX")

    def on_dock_toggled(self, callback: Callable[[ViewGui], None]) -> None:
        self._dock_listeners.append(callback)

    def _toggle_dock(self) -> None:
        self._docked = not self._docked
        for callback in list(self._dock_listeners):
            callback(self._gui)

    def _frame_view(self, frame: CanFrame, direction: str) -> None:
        if not self._sim_started:
            log.debug("send/received frame while simulation stopped")
            return

        padding = 8 if frame.extended else 3
        frame_id = "0x" + format(frame.frame_id, "x").rjust(padding, "0")
        elapsed_ms = int((self._clock() - self._started_at) * 1000)
        stamp = f"{elapsed_ms / 1000.0:.2f}"
        payload = bytes(frame.payload)
        row = (str(self._row_id), stamp, frame_id, direction, str(len(payload)), payload.hex(" "))

        if len(self._table) >= ROW_COUNT_MAX:
            self._table.take_row(0)
        self._table.append_row(row)

        key = frame.frame_id | EXTENDED_FLAG if frame.extended else frame.frame_id
        unique = {"RX": self._unique_rx, "TX": self._unique_tx}.get(direction)
        if unique is None:
            log.warning("Invalid direction string: %s", direction)
        elif key in unique:
            self._unique_table.set_row(unique[key], row)
        else:
            unique[key] = len(self._unique_table)
            self._unique_table.append_row(row)

        if not self._gui.frozen:
            self._gui.scroll_to_bottom()

        self._row_id += 1

    def get_config(self) -> dict:
        columns = [
            {"name": name, "vIdx": self._gui.visual_index(column)}
            for column, name in enumerate(COLUMNS)
            if not self._gui.is_column_hidden(column)
        ]
        return {"viewColumns": columns, "scrolling": self._gui.frozen}

    def set_config(self, config: Mapping[str, Any]) -> bool:
        """Restore a configuration, logging instead of raising; True on success."""
        try:
            self.restore_configuration(config)
        except ConfigError as exc:
            log.error("%s", exc)
            return False
        return True

    def restore_configuration(self, config: Mapping[str, Any]) -> None:
        """Restore column layout, then scrolling; raises ConfigError on the first problem."""
        self._adopt_columns(config)
        self._adopt_scrolling(config)

    def _adopt_scrolling(self, config: Mapping[str, Any]) -> None:
        if "scrolling" not in config:
            raise ConfigError("Scrolling item not found")
        frozen = config["scrolling"]
        if not isinstance(frozen, bool):
            raise ConfigError("Scrolling format is different than bool")
        if self._gui.frozen != frozen:
            self._gui.frozen = frozen
        log.info("Scrolling was restored correctly")

    def _adopt_columns(self, config: Mapping[str, Any]) -> None:
        if "viewColumns" not in config:
            raise ConfigError("Columns item not found")
        entries = config["viewColumns"]
        if not isinstance(entries, list):
            raise ConfigError("Columns format is different than array")
        if len(entries) != EXPECTED_VIEW_COLUMNS:
            raise ConfigError(f"Columns array size must be 5 not {len(entries)}")

        wanted: list[tuple[int, int]] = []
        for column, name in enumerate(COLUMNS):
            if self._gui.is_column_hidden(column):
                continue
            position = self._find_column(entries, name)
            wanted.append((column, position))

        wanted.sort(key=lambda item: item[1], reverse=True)
        for column, position in wanted:
            current = self._gui.visual_index(column)
            if current != position:
                self._gui.move_section(current, position)
        log.info("Column properties were restored correctly")

    @staticmethod
    def _find_column(entries: list, name: str) -> int:
        for entry in entries:
            if not isinstance(entry, dict):
                raise ConfigError("Columns description is not an object.")
            if "name" not in entry:
                raise ConfigError("Columns description does not contain name field.")
            if not isinstance(entry["name"], str):
                raise ConfigError("name is not a String format.")
            if entry["name"] != name:
                continue
            if "vIdx" not in entry:
                raise ConfigError("Columns description does not contain vIdx field.")
            if not _is_number(entry["vIdx"]):
                raise ConfigError("vIdx is not a Number format.")
            return _json_int(entry["vIdx"])
        raise ConfigError("Required parameter in column description was not found.")

    def _clear(self) -> None:
        self._table.clear()
        self._unique_table.clear()
        self._unique_rx.clear()
        self._unique_tx.clear()
        self._row_id = 0

    def _sort(self, clicked_index: int) -> None:
        self._current_sort_order = self._gui.sort_order
        self._sort_index = clicked_index

        if self._prev_index == clicked_index:
            if self._current_sort_order is SortOrder.DESCENDING:
                self._gui.set_sorting(self._sort_index, SortOrder.DESCENDING)
            else:
                self._gui.set_sorting(0, SortOrder.ASCENDING)
                self._prev_index = 0
                self._sort_index = 0
        else:
            self._gui.set_sorting(self._sort_index, SortOrder.ASCENDING)
            self._prev_index = clicked_index

    def _set_filter(self, enabled: bool) -> None:
        self._sort_model.set_filter_active(enabled)
        self._unique_sort_model.set_filter_active(enabled)
        self._gui.set_model(self._unique_sort_model if enabled else self._sort_model)
        self._current_sort_order = self._gui.sort_order
        self._gui.set_sorting(self._sort_index, self._current_sort_order)