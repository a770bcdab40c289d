"""A plain table of text cells and a sorting view over it that compares by column type."""

from __future__ import annotations

import enum
import functools
import logging
import math
import re
from typing import Iterable, Iterator, Optional, Sequence

log = logging.getLogger(__name__)

# Column sorted by in filtering mode when the row-number column is requested;
# sorting unique frames by time makes them flicker.
FILTER_SORT_COLUMN = 2

_DEC = re.compile(r"\s*\+?([0-9]+)\s*")
_HEX = re.compile(r"\s*\+?(?:0[xX])?([0-9A-Fa-f]+)\s*")


class ColType(enum.IntEnum):
    """How the cells of a column compare while sorting."""

    UINT = 0
    HEX = 1
    DOUBLE = 2
    STR = 3


class SortOrder(enum.IntEnum):
    ASCENDING = 0
    DESCENDING = 1


def _to_uint(text: str, pattern: re.Pattern[str], base: int) -> int:
    """Parse an unsigned 32-bit number; anything unparsable counts as 0."""
    match = pattern.fullmatch(text)
    if match is None:
        return 0
    value = int(match.group(1), base)
    return value if value <= 0xFFFFFFFF else 0


def _to_double(text: str) -> float:
    """Parse a floating point number; anything unparsable counts as 0.0."""
    if "_" in text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return 0.0
    return 0.0 if math.isnan(value) else value


class Table:
    """Rows of text cells under fixed headers, with an optional sort type per column."""

    def __init__(self, headers: Iterable[str]) -> None:
        self._headers = tuple(headers)
        self._rows: list[list[str]] = []
        self._types: dict[int, ColType] = {}

    @property
    def headers(self) -> tuple[str, ...]:
        return self._headers

    @property
    def column_count(self) -> int:
        return len(self._headers)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[tuple[str, ...]]:
        return (tuple(row) for row in self._rows)

    def __getitem__(self, index: int) -> tuple[str, ...]:
        return tuple(self._rows[index])

    def cell(self, row: int, column: int) -> str:
        self._check_column(column)
        return self._rows[row][column]

    def _check_column(self, column: int) -> None:
        if not 0 <= column < len(self._headers):
            raise IndexError(f"column {column} out of range 0..{len(self._headers) - 1}")

    def _cells(self, row: Sequence[object]) -> list[str]:
        cells = [str(value) for value in row]
        if len(cells) > len(self._headers):
            raise ValueError(f"row has {len(cells)} cells, table has {len(self._headers)} columns")
        cells.extend("" for _ in range(len(self._headers) - len(cells)))
        return cells

    def append_row(self, row: Sequence[object]) -> None:
        """Append a row; missing trailing cells are empty."""
        self._rows.append(self._cells(row))

    def set_row(self, index: int, row: Sequence[object]) -> None:
        """Replace the cells of an existing row."""
        self._rows[index] = self._cells(row)

    def take_row(self, index: int) -> list[str]:
        """Remove a row and hand its cells back."""
        return self._rows.pop(index)

    def clear(self) -> None:
        self._rows.clear()

    def set_column_type(self, column: int, col_type: ColType) -> None:
        self._check_column(column)
        self._types[column] = ColType(col_type)

    def column_type(self, column: int) -> Optional[ColType]:
        """The sort type of a column, or None when none was set."""
        self._check_column(column)
        return self._types.get(column)


class SortModel:
    """A sorted view of a table that stays sorted as the table changes."""

    def __init__(self, source: Table) -> None:
        self._source = source
        self._column = 0
        self._order = SortOrder.ASCENDING
        self._filter_active = False
        self._sorted = False

    @property
    def source(self) -> Table:
        return self._source

    @property
    def headers(self) -> tuple[str, ...]:
        return self._source.headers

    @property
    def is_filter_active(self) -> bool:
        return self._filter_active

    @property
    def sort_column(self) -> int:
        return self._column

    @property
    def sort_order(self) -> SortOrder:
        return self._order

    def set_filter_active(self, enabled: bool) -> None:
        self._filter_active = bool(enabled)

    def _effective_column(self) -> int:
        if self._filter_active and self._column == 0:
            return FILTER_SORT_COLUMN
        return self._column

    def sort(self, column: int, order: SortOrder = SortOrder.ASCENDING) -> None:
        """Sort by ``column``; a negative column restores the table's own order."""
        self._column = column
        self._order = SortOrder(order)
        self._sorted = column >= 0
        log.debug(
            "Sort index: %d, Refreshed sort index: %d, sort order: %d",
            self._column,
            self._effective_column(),
            self._order,
        )

    def less_than(self, left: int, right: int) -> bool:
        """Compare two table rows, given by index, in the current sort column."""
        column = self._effective_column()
        left_text = self._source.cell(left, column)
        right_text = self._source.cell(right, column)
        col_type = self._source.column_type(column)
        if col_type is ColType.UINT:
            return _to_uint(left_text, _DEC, 10) < _to_uint(right_text, _DEC, 10)
        if col_type is ColType.DOUBLE:
            return _to_double(left_text) < _to_double(right_text)
        if col_type is ColType.HEX:
            return _to_uint(left_text, _HEX, 16) < _to_uint(right_text, _HEX, 16)
        return left_text < right_text

    def _compare(self, left: int, right: int) -> int:
        if self.less_than(left, right):
            return -1
        if self.less_than(right, left):
            return 1
        return 0

    def rows(self) -> list[tuple[str, ...]]:
        """The table's rows in view order; equal rows keep their table order."""
        indices = list(range(len(self._source)))
        if self._sorted:
            key = functools.cmp_to_key(self._compare)
            if self._order is SortOrder.ASCENDING:
                indices.sort(key=key)
            else:
                indices.sort(key=key, reverse=True)
        return [self._source[index] for index in indices]