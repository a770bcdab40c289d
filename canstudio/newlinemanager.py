"""One line of the raw frame sender: id, data, loop, interval and send widgets and their interplay."""

from __future__ import annotations

import enum
import logging
import re
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Union

from .widgets import CheckBox, LineEdit, PushButton, WidgetFactory

log = logging.getLogger(__name__)

MAX_EXTENDED_ID = 0x1FFFFFFF
MAX_STANDARD_ID = 0x7FF

# Patterns also admit partial input, as a field being typed in must.
ID_PATTERN = r"[0-9A-Fa-f]{0,8}"
DATA_PATTERN = r"[0-9A-Fa-f]{0,16}"
INTERVAL_PATTERN = r"([1-9]\d{0,6})?"

_HEX = re.compile(r"[0-9A-Fa-f]+")
_DEC = re.compile(r"[0-9]+")


def _to_uint(text: str, base: int) -> Optional[int]:
    """Parse an unsigned 32-bit number; None when the text is not one."""
    digits = text.strip()
    if base == 16 and digits[:2].lower() == "0x":
        digits = digits[2:]
    if not (_HEX if base == 16 else _DEC).fullmatch(digits):
        return None
    value = int(digits, base)
    return value if value <= 0xFFFFFFFF else None


def _hex_to_bytes(text: str) -> bytes:
    digits = "".join(ch for ch in text if ch in "0123456789abcdefABCDEF")
    if len(digits) % 2:
        digits = "0" + digits
    return bytes.fromhex(digits)


@dataclass
class CanFrame:
    """A CAN frame: identifier, payload and whether it uses the 29-bit format."""

    frame_id: int = 0
    payload: bytes = b""
    extended: bool = False


class ColName(enum.IntEnum):
    """Columns of a sender line, in table order."""

    ID_LINE = 0
    DATA_LINE = 1
    LOOP_CHECK_BOX = 2
    INTERVAL_LINE = 3
    SEND_BUTTON = 4


class FrameSink(Protocol):
    def send_frame(self, frame: CanFrame) -> None: ...


class RepeatingTimer:
    """Calls a function periodically on a background thread until stopped."""

    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        return self._stop_event is not None and not self._stop_event.is_set()

    def start(self, interval_ms: int) -> None:
        """(Re)start the timer with a period in milliseconds."""
        if interval_ms <= 0:
            raise ValueError(f"timer interval must be positive, got {interval_ms}")
        self.stop()
        event = threading.Event()
        thread = threading.Thread(target=self._run, args=(interval_ms / 1000.0, event), daemon=True)
        self._stop_event, self._thread = event, thread
        thread.start()

    def _run(self, interval: float, event: threading.Event) -> None:
        while not event.wait(interval):
            self._callback()

    def stop(self) -> None:
        if self._stop_event is None:
            return
        self._stop_event.set()
        thread = self._thread
        self._stop_event, self._thread = None, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()


class NewLineManager:
    """Holds the widgets of one sender line and the rules that tie them together."""

    def __init__(self, sender: Optional[FrameSink], simulation_state: bool, factory: WidgetFactory) -> None:
        if sender is None:
            raise ValueError("sender must not be None")
        self._sender = sender
        self._sim_state = bool(simulation_state)
        self._frame = CanFrame()

        self._id: LineEdit = factory.create_line_edit()
        self._id.configure("Id in hex", ID_PATTERN)
        self._id.on_text_edited(self._update_send_button)
        self._id.on_editing_finished(self._normalise_id)

        self._data: LineEdit = factory.create_line_edit()
        self._data.configure("Data in hex", DATA_PATTERN)
        self._data.on_text_edited(self._update_send_button)

        self._interval: LineEdit = factory.create_line_edit()
        self._interval.configure("ms", INTERVAL_PATTERN)
        self._interval.on_text_edited(self._update_send_button)

        self._send: PushButton = factory.create_push_button()
        self._send.configure("Send", False)
        self._send.on_pressed(self._send_pressed)

        self._loop: CheckBox = factory.create_check_box()
        self._loop.on_toggled(self._loop_toggled)

        self._timer = RepeatingTimer(self._timer_expired)

    def widget(self, column: Optional[ColName]) -> Union[LineEdit, CheckBox, PushButton, None]:
        """Return the widget shown in ``column``, or None when there is no column."""
        if column is None:
            return None
        return {
            ColName.ID_LINE: self._id,
            ColName.DATA_LINE: self._data,
            ColName.LOOP_CHECK_BOX: self._loop,
            ColName.INTERVAL_LINE: self._interval,
            ColName.SEND_BUTTON: self._send,
        }[ColName(column)]

    def set_simulation_state(self, state: bool) -> None:
        """Follow the simulation state: a checked send button resumes, stopping halts the timer."""
        self._sim_state = bool(state)
        self._update_send_button()
        if self._sim_state:
            if self._send.checked:
                self._start_timer()
        else:
            self._stop_timer()

    def to_json(self) -> dict:
        return {
            "id": self._id.text,
            "data": self._data.text,
            "interval": self._interval.text,
            "loop": bool(self._loop.state),
            "send": self._send.checked,
        }

    def restore_line(self, frame_id: str, data: str, interval: str, loop: bool, send: bool) -> bool:
        """Fill the line from saved values; False when the widgets did not take them all."""
        self._id.set_text(frame_id)
        self._data.set_text(data)
        if interval:
            self._loop.state = True
            self._interval.set_text(interval)
        if self._loop.state != loop:
            self._loop.state = loop
        if loop and send:
            self._send.set_checked(True)

        return not (
            self._id.text != frame_id
            or self._data.text != data
            or (interval and self._interval.text != interval)
            or self._loop.state != loop
        )

    def _normalise_id(self) -> None:
        text = self._id.text
        value = _to_uint(text, 16)
        if value is not None and value > MAX_EXTENDED_ID:
            self._id.set_text(f"{MAX_EXTENDED_ID:x}")
        elif len(text) < 3:
            self._id.set_text(text.rjust(3, "0"))
        elif 3 < len(text) < 8:
            self._id.set_text(text.rjust(8, "0"))

    def _line_fields(self):
        return (self._id, self._data, self._loop, self._interval)

    def _stop_timer(self) -> None:
        self._timer.stop()
        for field in self._line_fields():
            field.disabled = False

    def _start_timer(self) -> None:
        delay = _to_uint(self._interval.text, 10) or 0
        if delay:
            self._timer.start(delay)
            for field in self._line_fields():
                field.disabled = True
        else:
            log.info("Timer not started. Delay set to 0")

    def _loop_toggled(self, checked: bool) -> None:
        self._send.checkable = checked
        self._update_send_button()

    def _update_send_button(self) -> None:
        self._send.enabled = bool(self._id.text) and (self._sim_state or self._send.checkable)

    def _send_pressed(self) -> None:
        if self._send.checked:
            self._stop_timer()
            return
        id_text = self._id.text
        frame_id = _to_uint(id_text, 16) or 0
        self._frame = CanFrame(
            frame_id=frame_id,
            payload=_hex_to_bytes(self._data.text),
            extended=frame_id > MAX_STANDARD_ID or len(id_text) == 8,
        )
        if self._sim_state:
            self._sender.send_frame(self._frame)
            if self._send.checkable:
                self._start_timer()

    def _timer_expired(self) -> None:
        self._sender.send_frame(self._frame)