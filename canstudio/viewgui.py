"""Headless window of the raw frame view: table header state and its buttons."""

from __future__ import annotations

from typing import Callable, Optional, Union

from .table import SortModel, SortOrder, Table

Callback = Callable[[], None]
Model = Union[Table, SortModel]

ID_COLUMN_WIDTH = 85


class ViewGui:
    """Holds what the view window shows: model, column layout, sort indicator and toggles."""

    def __init__(self) -> None:
        self._clear: list[Callback] = []
        self._dock: list[Callback] = []
        self._section: list[Callable[[int], None]] = []
        self._filter: list[Callable[[bool], None]] = []
        self._model: Optional[Model] = None
        self._visual: list[int] = []
        self._hidden: set[int] = set()
        self._widths: dict[int, int] = {}
        self._sort_section = 0
        self._sort_order = SortOrder.ASCENDING
        self._filter_on = False
        self._dock_checked = False
        self.sections_movable = False
        self.frozen = False
        self.window_title = ""
        self.scroll_requests = 0

    @property
    def model(self) -> Optional[Model]:
        return self._model

    @property
    def sort_section(self) -> int:
        return self._sort_section

    @property
    def sort_order(self) -> SortOrder:
        return self._sort_order

    @property
    def filter_enabled(self) -> bool:
        return self._filter_on

    def on_clear(self, callback: Callback) -> None:
        self._clear.append(callback)

    def on_dock_toggle(self, callback: Callback) -> None:
        self._dock.append(callback)

    def on_section_clicked(self, callback: Callable[[int], None]) -> None:
        self._section.append(callback)

    def on_filter(self, callback: Callable[[bool], None]) -> None:
        self._filter.append(callback)

    def set_model(self, model: Model) -> None:
        """Show ``model``; the column layout is kept while the column count stays the same."""
        self._model = model
        count = len(model.headers)
        if len(self._visual) != count:
            self._visual = list(range(count))
            self._hidden = {column for column in self._hidden if column < count}

    def init_table_view(self, model: Model) -> None:
        self.set_model(model)
        self.sections_movable = True
        self._sort_section, self._sort_order = 0, SortOrder.ASCENDING
        self._hidden.add(0)
        self._widths[2] = ID_COLUMN_WIDTH

    def set_sorting(self, column: int, order: SortOrder) -> None:
        """Sort the shown model and move the sort indicator."""
        order = SortOrder(order)
        if isinstance(self._model, SortModel):
            self._model.sort(column, order)
        self._sort_section, self._sort_order = column, order

    def scroll_to_bottom(self) -> None:
        self.scroll_requests += 1

    def clicked_column(self, column: int) -> str:
        """Header text of ``column``; empty when there is no such column."""
        if self._model is None or not 0 <= column < len(self._model.headers):
            return ""
        return self._model.headers[column]

    def is_column_hidden(self, column: int) -> bool:
        return column in self._hidden

    def set_column_hidden(self, column: int, hidden: bool) -> None:
        if hidden:
            self._hidden.add(column)
        else:
            self._hidden.discard(column)

    def column_width(self, column: int) -> Optional[int]:
        return self._widths.get(column)

    def visual_index(self, column: int) -> int:
        """Position at which the logical ``column`` is shown."""
        if not 0 <= column < len(self._visual):
            raise IndexError(f"column {column} out of range 0..{len(self._visual) - 1}")
        return self._visual.index(column)

    def move_section(self, from_index: int, to_index: int) -> bool:
        """Move the section at visual position ``from_index`` to ``to_index``; False when either is invalid."""
        count = len(self._visual)
        if not (0 <= from_index < count and 0 <= to_index < count):
            return False
        self._visual.insert(to_index, self._visual.pop(from_index))
        return True

    def click_section(self, column: int) -> None:
        """Click a header section: clicking the sorted section flips the order, then listeners run."""
        if column == self._sort_section:
            self._sort_order = (
                SortOrder.DESCENDING if self._sort_order is SortOrder.ASCENDING else SortOrder.ASCENDING
            )
        self._sort_section = column
        for callback in list(self._section):
            callback(column)

    def toggle_filter(self, enabled: bool) -> None:
        """Set the unique-frame filter button; listeners run only on a change."""
        enabled = bool(enabled)
        if enabled == self._filter_on:
            return
        self._filter_on = enabled
        for callback in list(self._filter):
            callback(enabled)

    def clear(self) -> None:
        for callback in list(self._clear):
            callback()

    def toggle_dock(self) -> None:
        self._dock_checked = not self._dock_checked
        for callback in list(self._dock):
            callback()