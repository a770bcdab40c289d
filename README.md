# canstudio

Building blocks for simulating traffic on a CAN bus: a raw frame sender and a
raw frame viewer. They need no GUI toolkit. Their widgets are small in-memory
models that you drive from code. You can script them in tests or connect them
to a front end of your own.

## Modules

- `canstudio.newlinemanager`
  - `CanFrame` is a dataclass with the fields `frame_id`, `payload` and
    `extended`.
  - `NewLineManager` manages one sender line. The line has id, data, loop,
    interval and send widgets, which `widget(ColName...)` returns. The class
    validates hex input and zero-pads the id when editing finishes: short ids
    become 3 digits, longer ids become 8 digits, and anything above `1fffffff`
    is clamped to `1fffffff`. It builds the frame and sends it when the send
    button is pressed.
  - When the loop box is checked, a background `RepeatingTimer` resends the
    frame every interval, given in milliseconds.
  - `to_json()` and `restore_line(...)` save and restore a line.
- `canstudio.canrawsender`
  - `CanRawSender` owns the sender lines. `SenderGui.add()` and
    `SenderGui.remove()` add lines and remove the selected rows.
  - `start_simulation()` and `stop_simulation()` start and stop the lines.
  - Frames go to every callback registered with `on_send_frame`.
  - `get_config()` returns a JSON-ready dict with the keys `senderColumns`,
    `sorting` and `content`.
  - `set_config()` restores such a dict and returns `True` or `False`.
    `restore_configuration()` does the same but raises `ConfigError` at the
    first problem.
- `canstudio.canrawview`
  - `CanRawView` logs frames passed to `frame_received(frame)` (RX) and to
    `frame_sent(status, frame)` (TX, only when `status` is true).
  - Frames are logged only while the simulation is running. The log table
    keeps at most 2000 rows; older rows are dropped first.
  - A second "unique" table keeps the latest frame for each id and direction.
    The filter button switches the view to that table.
  - Clicking a column header sorts by that column. `get_config()` and
    `set_config()` save and restore the column order and the scrolling
    (frozen) state.
- `canstudio.table`
  - `Table` holds rows of text cells. Each column has a `ColType` that sets
    how it sorts: unsigned, hex, double or string.
  - `SortModel` is a sorted view of a table, sorted with
    `sort(column, SortOrder...)` and read with `rows()`.
- `canstudio.widgets` provides the headless widgets used by the sender:
  `CheckBox`, `LineEdit`, `PushButton`, `WidgetFactory` and `SenderGui`.
- `canstudio.viewgui` provides `ViewGui`, the headless window state used by
  the viewer: sort indicator, column order, hidden columns and the filter,
  clear and dock toggles.

## Sending a frame

```python
from canstudio.canrawsender import CanRawSender
from canstudio.newlinemanager import ColName
from canstudio.widgets import SenderGui, WidgetFactory

gui = SenderGui()
sender = CanRawSender(gui, WidgetFactory())
sent = []
sender.on_send_frame(sent.append)

gui.add()                                   # one new line in the table
sender.start_simulation()

line = sender.lines[0]
line.widget(ColName.ID_LINE).edit("123")
line.widget(ColName.DATA_LINE).edit("0102")
line.widget(ColName.SEND_BUTTON).press()
# sent == [CanFrame(frame_id=0x123, payload=b"\x01\x02", extended=False)]

config = sender.get_config()
```

The send button is enabled only when the id field holds text and either the
simulation is running or the loop box is checked. A frame is extended when its
id is above `0x7ff` or the id text has 8 digits.

## Viewing frames

```python
from canstudio.canrawview import CanRawView
from canstudio.newlinemanager import CanFrame

view = CanRawView(clock=lambda: 0.0)
view.start_simulation()
view.frame_received(CanFrame(frame_id=0x123, payload=b"\x01\x02"))

view.table[0]          # ("0", "0.00", "0x123", "RX", "2", "01 02")
view.gui.toggle_filter(True)   # show the unique-frame table
view.gui.click_section(2)      # sort by id
```

## What it does not do

- It does not open a CAN interface and does not talk to real hardware. Frames
  are handed to callbacks and nothing else.
- It has no command-line program and no graphical window. The widgets only
  keep state for a front end to draw.
- Configurations are plain dicts. Reading them from disk and writing them to
  disk, for example with `json`, is left to the caller.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```