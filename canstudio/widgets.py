"""Headless widgets used by the raw frame sender: check box, line edit, push button and sender window."""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional, Pattern, Union

Callback = Callable[[], None]


class CheckBox:
    """A two-state check box that notifies listeners whenever its state changes."""

    def __init__(self) -> None:
        self._state = False
        self.disabled = False
        self._toggled: list[Callable[[bool], None]] = []

    def on_toggled(self, callback: Callable[[bool], None]) -> None:
        """Register a callback receiving the new state on every change."""
        self._toggled.append(callback)

    @property
    def state(self) -> bool:
        return self._state

    @state.setter
    def state(self, value: bool) -> None:
        value = bool(value)
        if value == self._state:
            return
        self._state = value
        for callback in list(self._toggled):
            callback(value)


class LineEdit:
    """A single-line text field with an optional validating regular expression.

    Text that does not fully match the pattern is rejected; empty text is always accepted.
    """

    def __init__(self) -> None:
        self.placeholder = ""
        self.disabled = False
        self._pattern: Optional[Pattern[str]] = None
        self._text = ""
        self._edited: list[Callback] = []
        self._finished: list[Callback] = []

    @property
    def text(self) -> str:
        return self._text

    def configure(self, placeholder: str, pattern: Union[str, Pattern[str], None] = None) -> None:
        """Set the placeholder text and the validating pattern."""
        self.placeholder = placeholder
        self._pattern = re.compile(pattern) if pattern is not None else None

    def accepts(self, text: str) -> bool:
        """Tell whether the validator lets ``text`` into the field."""
        return not text or self._pattern is None or self._pattern.fullmatch(text) is not None

    def on_text_edited(self, callback: Callback) -> None:
        self._edited.append(callback)

    def on_editing_finished(self, callback: Callback) -> None:
        self._finished.append(callback)

    def set_text(self, text: str) -> None:
        """Replace the text programmatically; rejected text leaves the field empty."""
        self._text = text if self.accepts(text) else ""

    def edit(self, text: str) -> bool:
        """Apply a user edit; returns False when the field is disabled or the text is rejected."""
        if self.disabled or not self.accepts(text):
            return False
        self._text = text
        for callback in list(self._edited):
            callback()
        return True

    def finish_editing(self) -> None:
        """Signal that the user has finished editing the field."""
        for callback in list(self._finished):
            callback()


class PushButton:
    """A push button that may be made checkable; pressing a checkable button toggles it."""

    def __init__(self) -> None:
        self.label = ""
        self.enabled = True
        self._checkable = False
        self._checked = False
        self._pressed: list[Callback] = []

    def configure(self, label: str, enabled: bool) -> None:
        self.label = label
        self.enabled = bool(enabled)

    @property
    def checkable(self) -> bool:
        return self._checkable

    @checkable.setter
    def checkable(self, value: bool) -> None:
        self._checkable = bool(value)
        if not self._checkable:
            self._checked = False

    @property
    def checked(self) -> bool:
        return self._checkable and self._checked

    def on_pressed(self, callback: Callback) -> None:
        self._pressed.append(callback)

    def press(self) -> bool:
        """Press the button: listeners run first, then a checkable button toggles."""
        if not self.enabled:
            return False
        for callback in list(self._pressed):
            callback()
        if self._checkable:
            self._checked = not self._checked
        return True

    def set_checked(self, checked: bool) -> None:
        """Bring the button to ``checked`` by clicking it when it differs."""
        if bool(checked) != self.checked:
            self.press()


class WidgetFactory:
    """Creates the widgets that make up one sender line."""

    def create_check_box(self) -> CheckBox:
        return CheckBox()

    def create_line_edit(self) -> LineEdit:
        return LineEdit()

    def create_push_button(self) -> PushButton:
        return PushButton()


class SenderGui:
    """The sender window: add, remove and dock buttons plus a table of line widgets."""

    def __init__(self) -> None:
        self._add: list[Callback] = []
        self._remove: list[Callback] = []
        self._dock: list[Callback] = []
        self._selected: list[int] = []
        self.index_widgets: dict[tuple[int, int], object] = {}

    @property
    def selected_rows(self) -> list[int]:
        return list(self._selected)

    def on_add(self, callback: Callback) -> None:
        self._add.append(callback)

    def on_remove(self, callback: Callback) -> None:
        self._remove.append(callback)

    def on_dock_toggle(self, callback: Callback) -> None:
        self._dock.append(callback)

    def set_index_widget(self, row: int, column: int, widget: object) -> None:
        self.index_widgets[(row, column)] = widget

    def select_rows(self, rows: Iterable[int]) -> None:
        self._selected = sorted(set(rows))

    def add(self) -> None:
        for callback in list(self._add):
            callback()

    def remove(self) -> None:
        for callback in list(self._remove):
            callback()
        self._selected = []

    def toggle_dock(self) -> None:
        for callback in list(self._dock):
            callback()