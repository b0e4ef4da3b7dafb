from __future__ import annotations

from can_browser.core.dataset import PossibleValue, Signal
from can_browser.core.signal_query import SignalSearch, build_signal_blob


def _signals():
    return (
        Signal(0, "DI_gear", enum_map_symbol="DI_gear_E", possible_values=(
            PossibleValue("1", "0x1", "PARK"),
            PossibleValue("4", "0x4", "DRIVE"),
        )),
        Signal(1, "DI_speed", possible_values_note="Continuous value", vapi_alias="VehicleSpeed"),
        Signal(2, "DI_torque", vapi_source="vapi.drive"),
    )


def test_blob_includes_own_fields_and_value_codes():
    blob = build_signal_blob(_signals()[0])

    assert "di_gear" in blob
    assert "di_gear_e" in blob
    assert "0x4" in blob
    assert "park" in blob
    assert blob == blob.lower()


def test_filter_matches_all_tokens_in_original_order():
    search = SignalSearch()
    signals = _signals()

    assert [s.signal_index for s in search.filter(signals, "drive")] == [0, 2]
    assert [s.signal_index for s in search.filter(signals, "di drive")] == [0, 2]
    assert [s.signal_index for s in search.filter(signals, "DRIVE park")] == [0]
    assert search.filter(signals, "nothing-here") == []


def test_empty_query_returns_all_signals():
    search = SignalSearch()
    signals = _signals()

    assert search.filter(signals, "") == list(signals)
    assert search.filter(signals, "   ") == list(signals)
    assert search.filter(signals, None) == list(signals)


def test_blobs_are_built_lazily_and_cached():
    search = SignalSearch()
    signals = _signals()

    search.filter(signals, "")
    assert not any(search.is_cached(s) for s in signals)

    search.filter(signals, "speed")
    assert all(search.is_cached(s) for s in signals)
    assert search.blob(signals[1]) is search.blob(signals[1])
