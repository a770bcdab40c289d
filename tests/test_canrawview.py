import pytest

from canstudio.canrawsender import ConfigError
from canstudio.canrawview import CanRawView
from canstudio.newlinemanager import CanFrame
from canstudio.table import SortOrder
from canstudio.viewgui import ViewGui


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def view(clock):
    return CanRawView(ViewGui(), clock)


def test_initialize_table_rx_tx_and_extended(view):
    frame = CanFrame(payload=b"123")
    view.start_simulation()
    view.frame_received(frame)
    view.frame_sent(True, frame)
    view.frame_sent(False, frame)
    assert len(view.table) == 2
    assert len(view.unique_table) == 2
    assert view.table[0] == ("0", "0.00", "0x000", "RX", "3", "31 32 33")
    assert view.table[1][3] == "TX"

    extended = CanFrame(payload=b"123", extended=True)
    view.frame_received(extended)
    view.frame_sent(True, extended)
    view.frame_sent(False, extended)
    assert len(view.table) == 4
    assert len(view.unique_table) == 4
    assert view.table[2][2] == "0x00000000"

    view.stop_simulation()
    view.frame_received(extended)
    assert len(view.table) == 4


def test_frames_ignored_before_start(view):
    view.frame_received(CanFrame(frame_id=1))
    assert len(view.table) == 0


def test_time_column_uses_clock(view, clock):
    view.start_simulation()
    clock.now += 1.234
    view.frame_received(CanFrame(frame_id=0x12, payload=b"\x01\xab"))
    assert view.table[0] == ("0", "1.23", "0x012", "RX", "2", "01 ab")


def test_unique_row_updated_for_same_id(view):
    view.start_simulation()
    view.frame_received(CanFrame(frame_id=11, payload=b"1"))
    view.frame_received(CanFrame(frame_id=11, payload=b"12"))
    assert len(view.table) == 2
    assert len(view.unique_table) == 1
    assert view.unique_table[0][0] == "1"
    assert view.unique_table[0][4] == "2"


def test_start_simulation_clears(view):
    view.start_simulation()
    view.frame_received(CanFrame(frame_id=1))
    view.start_simulation()
    assert len(view.table) == 0
    assert len(view.unique_table) == 0
    view.frame_received(CanFrame(frame_id=1))
    assert view.table[0][0] == "0"


def test_clear_button(view):
    view.start_simulation()
    view.frame_received(CanFrame(frame_id=1))
    view.gui.clear()
    assert len(view.table) == 0
    assert len(view.unique_table) == 0


def test_row_limit_drops_oldest(view):
    view.start_simulation()
    for i in range(2001):
        view.frame_received(CanFrame(frame_id=i & 0x7FF))
    assert len(view.table) == 2000
    assert view.table[0][0] == "1"
    assert view.table[-1][0] == "2000"


def test_stress_unique_rows(view):
    view.gui.toggle_filter(True)
    view.start_simulation()
    for i in range(0x7FF):
        frame = CanFrame(frame_id=i, payload=b"123")
        view.frame_received(frame)
        view.frame_sent(True, frame)
    view.gui.toggle_filter(False)
    assert len(view.table) == 2000
    assert len(view.unique_table) == 2 * 0x7FF


def test_scroll_only_when_not_frozen(view):
    view.start_simulation()
    view.frame_received(CanFrame(frame_id=1))
    assert view.gui.scroll_requests == 1
    view.gui.frozen = True
    view.frame_received(CanFrame(frame_id=1))
    assert view.gui.scroll_requests == 1


def test_misc_docked(view):
    assert view.docked is True


def test_dock_undock(view):
    seen = []
    view.on_dock_toggled(seen.append)
    view.gui.toggle_dock()
    assert len(seen) == 1
    assert view.docked is False
    view.gui.toggle_dock()
    assert len(seen) == 2
    assert view.docked is True


def test_properties_ignore_unsupported(view):
    view.properties = {"name": "CAN1", "fake": "unsupported"}
    assert view.properties == {"name": "CAN1"}


def test_section_clicked_sequence(view):
    view.start_simulation()
    for frame_id, payload in ((11, b"123"), (11, b"123"), (12, b"1234"), (123, b"12345")):
        view.frame_received(CanFrame(frame_id=frame_id, payload=payload))

    view.gui.click_section(1)
    assert (view.gui.sort_section, view.gui.sort_order) == (1, SortOrder.ASCENDING)
    view.gui.click_section(1)
    assert (view.gui.sort_section, view.gui.sort_order) == (1, SortOrder.DESCENDING)
    assert view.sort_model.sort_column == 1
    view.gui.click_section(1)
    assert (view.gui.sort_section, view.gui.sort_order) == (0, SortOrder.ASCENDING)

    for column in (1, 2, 3, 4):
        view.gui.click_section(column)
        assert (view.gui.sort_section, view.gui.sort_order) == (column, SortOrder.ASCENDING)


def test_sort_by_dlc(view):
    view.start_simulation()
    view.frame_received(CanFrame(frame_id=1, payload=b"12345"))
    view.frame_received(CanFrame(frame_id=2, payload=b"1"))
    view.frame_received(CanFrame(frame_id=3, payload=b"123"))
    view.gui.click_section(4)
    assert [row[4] for row in view.gui.model.rows()] == ["1", "3", "5"]


def test_filter_switches_model(view):
    view.gui.toggle_filter(True)
    assert view.gui.model is view.unique_sort_model
    assert view.unique_sort_model.is_filter_active is True
    assert view.sort_model.is_filter_active is True

    view.start_simulation()
    for frame_id in (123, 11, 12, 11):
        frame = CanFrame(frame_id=frame_id, payload=b"1")
        view.frame_received(frame)
        view.frame_sent(True, frame)
    ids = [row[2] for row in view.gui.model.rows()]
    assert ids == ["0x00b", "0x00b", "0x00c", "0x00c", "0x07b", "0x07b"]

    view.gui.toggle_filter(False)
    assert view.gui.model is view.sort_model
    assert view.sort_model.is_filter_active is False


def test_default_config(view):
    config = view.get_config()
    assert config == {
        "viewColumns": [
            {"name": "time", "vIdx": 1},
            {"name": "id", "vIdx": 2},
            {"name": "dir", "vIdx": 3},
            {"name": "dlc", "vIdx": 4},
            {"name": "data", "vIdx": 5},
        ],
        "scrolling": False,
    }


def test_config_round_trip(view):
    config = view.get_config()
    config["scrolling"] = True
    assert view.set_config(config) is True
    assert view.get_config() == config
    assert view.gui.frozen is True


def test_restore_reorders_columns(view):
    positions = {"time": 5, "id": 1, "dir": 2, "dlc": 3, "data": 4}
    config = {
        "viewColumns": [{"name": name, "vIdx": idx} for name, idx in positions.items()],
        "scrolling": False,
    }
    view.restore_configuration(config)
    saved = {entry["name"]: entry["vIdx"] for entry in view.get_config()["viewColumns"]}
    assert saved == positions


def _columns(item, count=5):
    return [dict(item) if isinstance(item, dict) else item for _ in range(count)]


@pytest.mark.parametrize(
    "config, message",
    [
        ({}, "Columns item not found"),
        ({"viewColumns": ""}, "Columns format is different than array"),
        ({"viewColumns": [{"dummy": 123}]}, "Columns array size must be 5 not 1"),
        ({"viewColumns": _columns(None)}, "Columns description is not an object."),
        ({"viewColumns": _columns({"dummy": 123, "dummy2": 234})}, "does not contain name field"),
        ({"viewColumns": _columns({"name": 123, "dummy2": 234})}, "name is not a String format."),
        ({"viewColumns": _columns({"name": "time", "dummy2": 234})}, "does not contain vIdx field"),
        ({"viewColumns": _columns({"name": "time", "vIdx": "dsds"})}, "vIdx is not a Number format."),
        ({"viewColumns": _columns({"name": "Blah", "vIdx": 1})}, "Required parameter"),
        (
            {
                "viewColumns": [
                    {"name": "time", "vIdx": 2},
                    {"name": "id", "vIdx": 3},
                    {"name": "dir", "vIdx": 4},
                    {"name": "dlc", "vIdx": 5},
                    {"name": "data", "vIdx": 6},
                ]
            },
            "Scrolling item not found",
        ),
    ],
)
def test_restore_config_errors(view, config, message):
    with pytest.raises(ConfigError, match=message):
        view.restore_configuration(config)
    assert view.set_config(config) is False


def test_scrolling_must_be_bool(view):
    config = view.get_config()
    config["scrolling"] = "yes"
    with pytest.raises(ConfigError, match="Scrolling format is different than bool"):
        view.restore_configuration(config)