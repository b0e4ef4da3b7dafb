from __future__ import annotations

import pytest

from can_browser.core.dataset import Dataset
from can_browser.core.filter_state import FrameFilterState
from can_browser.core.indexer import build_index
from can_browser.core.pager import PageAction
from can_browser.core.selection import SelectionState
from can_browser.services.browser_session import BrowserSession


def _signal(index, name, labels=()):
    return {
        "signal_index": index,
        "signal_name": name,
        "possible_values": [{"value_dec": str(i), "value_hex": hex(i), "label": l} for i, l in enumerate(labels)],
    }


def _frame(name, address, signals=()):
    return {
        "bus_name": "VEH",
        "bus_id": "0",
        "address_dec": address,
        "address_hex": hex(address),
        "frame_name": name,
        "signals": list(signals),
    }


def _make_index():
    frames = [
        _frame("ID_A", 100, [_signal(i, f"a{i}") for i in range(5)]),
        _frame("ID_B", 50, [_signal(0, "gear", labels=("DRIVE", "PARK")), _signal(1, "speed")]),
    ]
    return build_index(Dataset.from_payload({"frames": frames}))


def _token(index, name):
    frame = next(f for f in index.frames if f.frame_name == name)
    return frame.key.token


def test_new_session_selects_first_filtered_frame():
    index = _make_index()

    session = BrowserSession(index)

    assert [f.frame_name for f in session.filtered_frames] == ["ID_B", "ID_A"]
    assert session.selected_frame().frame_name == "ID_B"


def test_filter_change_keeps_visible_selection_and_panel_state():
    index = _make_index()
    session = BrowserSession(index)
    session.select_frame(_token(index, "ID_A"))
    session.toggle_signal("x")
    session.selection.signal_page = 2

    session.apply_filters(FrameFilterState(query="id"))

    assert session.selected_frame().frame_name == "ID_A"
    assert session.selection.signal_page == 2
    assert session.selection.expanded == {"x"}


def test_filter_change_moves_hidden_selection_to_first_match():
    index = _make_index()
    session = BrowserSession(index)
    session.select_frame(_token(index, "ID_A"))
    session.toggle_signal("x")

    session.apply_filters(FrameFilterState(query="park"))

    assert session.selected_frame().frame_name == "ID_B"
    assert session.selection.signal_page == 1
    assert session.selection.expanded == set()


def test_no_matches_clears_selection():
    session = BrowserSession(_make_index(), FrameFilterState(query="zzz"))

    assert session.filtered_frames == []
    assert session.selected_frame() is None
    assert session.signal_page() is None
    assert session.matching_signals() == []


def test_select_unknown_frame_is_ignored():
    index = _make_index()
    session = BrowserSession(index)

    assert session.select_frame("nope") is False
    assert session.selected_frame().frame_name == "ID_B"


def test_signal_paging_and_clamping():
    index = _make_index()
    selection = SelectionState(selected_key=_token(index, "ID_A"), signal_page_size=2)
    session = BrowserSession(index, selection=selection)

    page = session.signal_page()
    assert [s.signal_name for s in page.signals] == ["a0", "a1"]
    assert page.window.total_pages == 3

    assert session.navigate_page(PageAction.LAST) == 3
    assert [s.signal_name for s in session.signal_page().signals] == ["a4"]

    session.selection.signal_page = 99
    assert session.signal_page().window.page == 3
    assert session.selection.signal_page == 3

    assert session.navigate_page(PageAction.FIRST) == 1


def test_signal_query_filters_and_resets_page():
    index = _make_index()
    selection = SelectionState(selected_key=_token(index, "ID_B"), signal_page=2, signal_page_size=1)
    session = BrowserSession(index, selection=selection)

    session.set_signal_query("park")

    page = session.signal_page()
    assert session.selection.signal_page == 1
    assert [s.signal_name for s in page.signals] == ["gear"]
    assert page.window.total == 1


def test_page_size_change_resets_page():
    index = _make_index()
    selection = SelectionState(selected_key=_token(index, "ID_A"), signal_page=2, signal_page_size=2)
    session = BrowserSession(index, selection=selection)

    session.set_page_size(100)

    page = session.signal_page()
    assert page.window.page == 1
    assert len(page.signals) == 5


def test_signal_keys_and_expansion():
    index = _make_index()
    session = BrowserSession(index)
    signal = session.selected_frame().signals[0]

    key = session.signal_key(signal)
    assert key == f"{_token(index, 'ID_B')}:0"

    assert session.toggle_signal(key) is True
    assert session.toggle_signal(key) is False
    assert session.selection.expanded == set()


@pytest.mark.parametrize("action", ["first", "prev", "next", "last"])
def test_navigate_without_selection_is_harmless(action):
    session = BrowserSession(_make_index(), FrameFilterState(query="zzz"))

    assert session.navigate_page(action) == 1
