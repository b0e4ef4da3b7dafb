from __future__ import annotations

from can_browser.core.selection import SelectionState


def test_toggle_twice_returns_to_empty():
    st = SelectionState(selected_key="VEH|0|50|ID_B")

    assert st.toggle_expanded("ID_B:0") is True
    assert st.is_expanded("ID_B:0")
    assert st.toggle_expanded("ID_B:0") is False
    assert st.expanded == set()


def test_select_resets_signal_panel():
    st = SelectionState(selected_key="a", signal_page=4, signal_query="x", expanded={"a:1"})

    assert st.select("b") is True
    assert st.selected_key == "b"
    assert st.signal_page == 1
    assert st.signal_query == ""
    assert st.expanded == set()


def test_reselecting_current_frame_is_a_noop():
    st = SelectionState(selected_key="a", signal_page=4, signal_query="x", expanded={"a:1"})

    assert st.select("a") is False
    assert (st.signal_page, st.signal_query, st.expanded) == (4, "x", {"a:1"})


def test_reconcile_keeps_visible_selection():
    st = SelectionState(selected_key="b", signal_page=3, expanded={"b:0"})

    assert st.reconcile(["a", "b", "c"]) is False
    assert (st.selected_key, st.signal_page, st.expanded) == ("b", 3, {"b:0"})


def test_reconcile_moves_to_first_visible():
    st = SelectionState(selected_key="z", signal_page=3, signal_query="keep", expanded={"z:0"})

    assert st.reconcile(["a", "b"]) is True
    assert st.selected_key == "a"
    assert st.signal_page == 1
    assert st.expanded == set()
    assert st.signal_query == "keep"


def test_reconcile_empty_list_clears_selection():
    st = SelectionState(selected_key="a")

    assert st.reconcile([]) is True
    assert st.selected_key is None
    assert not st.has_selection
    assert st.reconcile([]) is False


def test_signal_query_and_page_size_reset_page():
    st = SelectionState(selected_key="a", signal_page=5, expanded={"a:0"})

    st.set_page_size("50")
    assert (st.signal_page_size, st.signal_page) == (50, 1)
    assert st.expanded == {"a:0"}

    st.signal_page = 3
    st.set_signal_query("gear")
    assert (st.signal_query, st.signal_page, st.expanded) == ("gear", 1, set())


def test_to_from_dict_roundtrip():
    st = SelectionState(selected_key="a", signal_page=2, signal_page_size=50, signal_query="q", expanded={"a:2", "a:1"})

    raw = st.to_dict()
    assert raw["expanded"] == ["a:1", "a:2"]
    assert SelectionState.from_dict(raw) == st


def test_from_dict_is_tolerant():
    assert SelectionState.from_dict(None) == SelectionState()
    st = SelectionState.from_dict({"signal_page": "x", "signal_page_size": -2, "selected_key": ""})
    assert st.signal_page == 1
    assert st.signal_page_size == 200
    assert st.selected_key is None
