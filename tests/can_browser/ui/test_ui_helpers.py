from __future__ import annotations

from dash import html

from can_browser.core.dataset import Dataset
from can_browser.core.filter_state import SortMode
from can_browser.core.indexer import build_index
from can_browser.core.pager import compute_page
from can_browser.core.selection import SelectionState
from can_browser.ui.callbacks.callbacks_export import export_filename
from can_browser.ui.callbacks.callbacks_utils import filters_from_controls, try_parse_selection
from can_browser.ui.helpers import (
    EXPORT_COLUMNS,
    dataset_libs_label,
    dataset_source_label,
    format_num,
    frame_subtitle,
    frame_title,
    frames_dataframe,
    get_filter_dropdown_options,
    render_frame_list,
    render_pagination,
    render_signal_table,
    stats_labels,
)


def _make_index(**extra):
    payload = {
        "frames": [
            {
                "bus_name": "VEH",
                "bus_id": "0",
                "address_dec": 280,
                "address_hex": "0x118",
                "frame_name": "DI_systemStatus",
                "signals": [
                    {
                        "signal_index": 0,
                        "signal_name": "DI_gear",
                        "vapi_alias": "GearState",
                        "possible_values": [
                            {"value_dec": "1", "value_hex": "0x1", "label": "P"},
                            {"value_dec": "4", "value_hex": "0x4", "label": "D"},
                        ],
                    },
                    {"signal_index": 1, "signal_name": "DI_speed"},
                ],
            },
            {
                "bus_name": "CH",
                "bus_id": "1",
                "address_dec": 66,
                "address_hex": "0x42",
                "frame_name": "VCFRONT_lighting",
                "signals": [],
            },
        ]
    }
    payload.update(extra)
    return build_index(Dataset.from_payload(payload))


def test_format_num_uses_thousands_separators():
    assert format_num(0) == "0"
    assert format_num(1234567) == "1,234,567"


def test_stats_labels_use_digest_for_vapi():
    index = _make_index(vapi_digest={"counts": {"db_signals_annotated_with_vapi_alias": 1500}})

    assert stats_labels(index) == ("2", "2", "2", "1,500")


def test_provenance_labels_use_defaults():
    index = _make_index(dataset_source={"mcu": "MCU2"}, sources_processed=[{"library": "libX.so"}])

    source = dataset_source_label(index.dataset)
    assert source[0] == "Dataset source: Model 3 firmware "
    assert source[1].children == "2026.2"
    assert source[2] == " (MCU2)"

    libs = dataset_libs_label(index.dataset)
    assert [c.children for c in libs if isinstance(c, html.Code)] == ["libQtCarCANData.so", "libX.so"]


def test_no_source_block_means_no_source_label():
    assert dataset_source_label(_make_index().dataset) is None


def test_dropdown_options():
    bus_options, module_options = get_filter_dropdown_options(_make_index())

    assert [o["value"] for o in bus_options] == ["CH (1)", "VEH (0)"]
    assert [o["value"] for o in module_options] == ["DI", "VCFRONT"]


def test_frame_list_marks_selected_item():
    index = _make_index()
    frames = list(index.frames)
    selected = frames[1].key.token

    group, results = render_frame_list(index, frames, selected)

    assert results == "2 frames"
    assert [item.active for item in group.children] == [False, True]
    assert group.children[1].id == {"type": "frame-item", "index": selected, "n": 0}


def test_frames_sharing_a_key_get_distinct_ids():
    frame = {"bus_name": "VEH", "bus_id": "0", "address_dec": 5, "address_hex": "0x5", "frame_name": "ID_X"}
    index = build_index(Dataset.from_payload({"frames": [frame, dict(frame)]}))
    frames = list(index.frames)
    token = frames[0].key.token

    group, results = render_frame_list(index, frames, token)

    ids = [item.id for item in group.children]
    assert results == "2 frames"
    assert len({(i["index"], i["n"]) for i in ids}) == 2
    assert [i["index"] for i in ids] == [token, token]
    assert [item.active for item in group.children] == [True, False]


def test_signals_sharing_an_index_get_distinct_ids():
    index = build_index(
        Dataset.from_payload(
            {
                "frames": [
                    {
                        "bus_name": "VEH",
                        "bus_id": "0",
                        "address_dec": 5,
                        "address_hex": "0x5",
                        "frame_name": "ID_X",
                        "signals": [{"signal_name": "A"}, {"signal_name": "B"}],
                    }
                ]
            }
        )
    )
    frame = index.frames[0]
    token = frame.key.token

    table = render_signal_table(token, frame.signals, SelectionState(selected_key=token))
    ids = [row.id for row in table.children[1].children]

    assert [i["index"] for i in ids] == [f"{token}:0", f"{token}:0"]
    assert [i["n"] for i in ids] == [0, 1]


def test_empty_frame_list():
    children, results = render_frame_list(_make_index(), [], None)

    assert results == "0 frames"
    assert children.children == "No frames match your filters."


def test_titles():
    frame = _make_index().frames[0]

    assert frame_title(frame) == "DI_systemStatus (0x118)"
    assert frame_subtitle(frame) == "Address 280 on VEH bus"


def test_signal_table_expands_value_rows():
    index = _make_index()
    frame = index.frames[0]
    token = frame.key.token
    selection = SelectionState(selected_key=token, expanded={f"{token}:0"})

    table = render_signal_table(token, frame.signals, selection)
    body = table.children[1]

    # two signal rows plus one expanded values row
    assert len(body.children) == 3
    assert body.children[0].id == {"type": "signal-row", "index": f"{token}:0", "n": 0}
    assert body.children[2].id == {"type": "signal-row", "index": f"{token}:1", "n": 0}


def test_empty_signal_table():
    table = render_signal_table("x", [], SelectionState())

    assert table.children == "No signals match the current filter."


def test_frames_dataframe_for_export():
    index = _make_index()

    df = frames_dataframe(index, index.frames)

    assert list(df.columns) == EXPORT_COLUMNS
    assert df["frame_name"].tolist() == ["DI_systemStatus", "VCFRONT_lighting"]
    assert df["enum_values"].tolist() == [2, 0]
    assert df["module"].tolist() == ["DI", "VCFRONT"]


def test_empty_frames_dataframe_keeps_columns():
    df = frames_dataframe(_make_index(), [])

    assert df.empty
    assert list(df.columns) == EXPORT_COLUMNS


def test_filters_from_controls():
    filters = filters_from_controls("gear", None, "DI", SortMode.NAME, True)

    assert filters.query == "gear"
    assert filters.bus is None
    assert filters.module == "DI"
    assert filters.sort_mode == SortMode.NAME
    assert filters.enumerated_only is True


def test_try_parse_selection_falls_back_to_default_page_size():
    assert try_parse_selection(None, 50).signal_page_size == 50
    assert try_parse_selection({"selected_key": "k"}, 50).selected_key == "k"


def test_export_filename():
    assert export_filename({"source_key": "mcu2"}) == "mcu2_frames.csv"
    assert export_filename({"source_key": "mcu2", "is_data_override": True}) == "custom_frames.csv"


def test_pagination_window_is_rendered():
    pagination = render_pagination(compute_page(total=450, page_size=200, requested=3))

    assert pagination.children[0].children == "Showing 401-450 of 450 signals"
    buttons = [c for c in pagination.children[1].children if not isinstance(c, html.Span)]
    assert [b.disabled for b in buttons] == [False, False, True, True]
