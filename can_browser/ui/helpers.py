from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional, Sequence

import dash_bootstrap_components as dbc
import pandas as pd
from dash import html

from can_browser.core.dataset import (
    DEFAULT_FIRMWARE,
    DEFAULT_VEHICLE,
    Dataset,
    Frame,
    PossibleValue,
    Signal,
    signal_key,
)
from can_browser.core.filter_state import SortMode
from can_browser.core.indexer import CatalogIndex, FrameMeta
from can_browser.core.pager import PageAction, PageWindow
from can_browser.core.selection import SelectionState
from can_browser.ui.ids import frame_item_id, pager_id, signal_row_id

EXPORT_COLUMNS = [
    "bus_name",
    "bus_id",
    "address_dec",
    "address_hex",
    "frame_name",
    "module",
    "signals",
    "enumerated_signals",
    "enum_values",
    "vapi_aliases",
]


def format_num(value: int) -> str:
    return f"{int(value):,}"


def _empty_state(text: str) -> html.Div:
    return html.Div(text, className="empty-state")


# ---------------------------------------------------------------------------
# Provenance / stats
# ---------------------------------------------------------------------------
def dataset_source_label(dataset: Dataset):
    """'Dataset source: <vehicle> firmware <firmware> (<hardware>)', or None if the feed has no source block."""
    source = dataset.dataset_source
    if source is None:
        return None
    hardware = f" ({source.hardware})" if source.hardware else ""
    return [
        f"Dataset source: {source.vehicle or DEFAULT_VEHICLE} firmware ",
        html.Code(source.firmware or DEFAULT_FIRMWARE),
        hardware,
    ]


def dataset_libs_label(dataset: Dataset):
    libs = dataset.source_libraries()
    if not libs:
        return None
    children: list = ["Sources: "]
    for i, lib in enumerate(libs):
        if i:
            children.append(", ")
        children.append(html.Code(lib))
    return children


def stats_labels(index: CatalogIndex) -> tuple[str, str, str, str]:
    stats = index.stats
    return (
        format_num(stats.total_frames),
        format_num(stats.total_signals),
        format_num(stats.total_values),
        format_num(index.vapi_display_count),
    )


# ---------------------------------------------------------------------------
# Dropdown options
# ---------------------------------------------------------------------------
def get_filter_dropdown_options(index: CatalogIndex) -> tuple[List[dict], List[dict]]:
    bus_options = [{"label": bus, "value": bus} for bus in index.buses]
    module_options = [{"label": module, "value": module} for module in index.modules]
    return bus_options, module_options


def sort_mode_options() -> List[dict]:
    return [{"label": SortMode.LABELS[mode], "value": mode} for mode in SortMode.ALL]


def page_size_options(sizes: Iterable[int]) -> List[dict]:
    return [{"label": f"{size} / page", "value": size} for size in sizes]


# ---------------------------------------------------------------------------
# Frame list
# ---------------------------------------------------------------------------
def frame_list_item(frame: Frame, meta: FrameMeta, active: bool, occurrence: int = 0) -> dbc.ListGroupItem:
    pills = [
        f"Bus {frame.bus_name} ({frame.bus_id})",
        meta.module,
        f"{format_num(meta.signal_count)} signals",
        f"{format_num(meta.enumerated_signal_count)} enum",
        f"{format_num(meta.vapi_alias_count)} VAPI",
    ]
    return dbc.ListGroupItem(
        [
            html.Div(
                [
                    html.Div(frame.frame_name, className="frame-name"),
                    html.Div(frame.address_hex, className="frame-addr"),
                ],
                className="frame-top",
            ),
            html.Div(
                [html.Span(p, className="meta-pill") for p in pills],
                className="frame-meta",
            ),
        ],
        id=frame_item_id(meta.key.token, occurrence),
        n_clicks=0,
        action=True,
        active=active,
        className="frame-item",
    )


def render_frame_list(index: CatalogIndex, frames: Sequence[Frame], selected_key: Optional[str]):
    """
    Frame list children plus the 'N frames' results label.

    Frames sharing a key get distinct ids; a key resolves to its first frame,
    so only that occurrence is marked active.
    """
    if not frames:
        return _empty_state("No frames match your filters."), "0 frames"

    seen: Counter = Counter()
    items = []
    for frame in frames:
        meta = index.meta(frame)
        token = meta.key.token
        occurrence = seen[token]
        seen[token] += 1
        active = token == selected_key and index.get(token) is frame
        items.append(frame_list_item(frame, meta, active, occurrence))
    return dbc.ListGroup(items, flush=True), f"{format_num(len(frames))} frames"


# ---------------------------------------------------------------------------
# Frame detail
# ---------------------------------------------------------------------------
def _chip(label: str, value: str, suffix: str = "") -> html.Span:
    return html.Span([f"{label}: ", html.Code(value), suffix], className="chip")


def frame_meta_chips(frame: Frame, meta: FrameMeta) -> List[html.Span]:
    return [
        _chip("Bus", frame.bus_name, f" ({frame.bus_id})"),
        _chip("Module", meta.module),
        _chip("Signals", format_num(meta.signal_count)),
        _chip("Enumerated", format_num(meta.enumerated_signal_count)),
        _chip("Enum Values", format_num(meta.value_count)),
        _chip("VAPI Aliases", format_num(meta.vapi_alias_count)),
    ]


def frame_title(frame: Frame) -> str:
    return f"{frame.frame_name} ({frame.address_hex})"


def frame_subtitle(frame: Frame) -> str:
    return f"Address {frame.address_dec} on {frame.bus_name} bus"


def render_pagination(window: PageWindow) -> html.Div:
    def button(label: str, action: str, disabled: bool) -> dbc.Button:
        return dbc.Button(
            label,
            id=pager_id(action),
            n_clicks=0,
            disabled=disabled,
            size="sm",
            color="secondary",
            outline=True,
        )

    return html.Div(
        [
            html.Div(
                f"Showing {format_num(window.first_item)}-{format_num(window.last_item)} "
                f"of {format_num(window.total)} signals"
            ),
            html.Div(
                [
                    button("First", PageAction.FIRST, not window.has_prev),
                    button("Prev", PageAction.PREV, not window.has_prev),
                    html.Span(f"Page {format_num(window.page)} / {format_num(window.total_pages)}"),
                    button("Next", PageAction.NEXT, not window.has_next),
                    button("Last", PageAction.LAST, not window.has_next),
                ],
                className="pager-buttons",
            ),
        ],
        className="signal-pagination-inner",
    )


def render_values_table(values: Sequence[PossibleValue]):
    if not values:
        return _empty_state("No discrete values decoded for this signal.")

    rows = [
        html.Tr(
            [
                html.Td(v.value_dec, className="mono"),
                html.Td(v.value_hex, className="mono"),
                html.Td(v.label or ""),
            ]
        )
        for v in values
    ]
    return html.Div(
        html.Table(
            [
                html.Thead(html.Tr([html.Th("Value (Dec)"), html.Th("Value (Hex)"), html.Th("Label")])),
                html.Tbody(rows),
            ],
            className="values-table",
        ),
        className="values-wrap",
    )


def _signal_row(signal: Signal, key: str, occurrence: int = 0) -> html.Tr:
    values = signal.possible_values
    note_class = "status-note warn" if not values and signal.enum_map_symbol else "status-note"

    vapi_cell: list = [signal.vapi_alias or "-"]
    if signal.vapi_source:
        vapi_cell.append(html.Div(signal.vapi_source, className="vapi-source"))

    return html.Tr(
        [
            html.Td(str(signal.signal_index), className="mono"),
            html.Td(signal.signal_name, className="signal-name"),
            html.Td(signal.enum_map_symbol or "-", className="mono"),
            html.Td(vapi_cell, className="mono"),
            html.Td(format_num(len(values)), className="mono"),
            html.Td(signal.possible_values_note, className=note_class),
        ],
        id=signal_row_id(key, occurrence),
        n_clicks=0,
        className="signal-row",
    )


def render_signal_table(frame_key: str, signals: Sequence[Signal], selection: SelectionState):
    """
    Signal table for one page; rows whose key is expanded are followed by
    their possible-values table.
    """
    if not signals:
        return _empty_state("No signals match the current filter.")

    seen: Counter = Counter()
    rows = []
    for signal in signals:
        key = signal_key(frame_key, signal.signal_index)
        rows.append(_signal_row(signal, key, seen[key]))
        seen[key] += 1
        if selection.is_expanded(key):
            rows.append(html.Tr(html.Td(render_values_table(signal.possible_values), colSpan=6)))

    return html.Table(
        [
            html.Thead(
                html.Tr(
                    [
                        html.Th("#"),
                        html.Th("Signal Name"),
                        html.Th("Enum Map"),
                        html.Th("VAPI Alias"),
                        html.Th("Value Count"),
                        html.Th("Notes"),
                    ]
                )
            ),
            html.Tbody(rows),
        ],
        className="signal-table",
    )


def empty_detail():
    """Title, subtitle, chips, pagination and table when nothing is selected."""
    return (
        "Select a frame",
        "Browse by frame address and signal values.",
        [],
        None,
        _empty_state("Frame details will appear here after selection."),
    )


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------
def frames_dataframe(index: CatalogIndex, frames: Iterable[Frame]) -> pd.DataFrame:
    """One row per frame with its derived counters, in the given order."""
    records = []
    for frame in frames:
        meta = index.meta(frame)
        records.append(
            {
                "bus_name": frame.bus_name,
                "bus_id": frame.bus_id,
                "address_dec": frame.address_dec,
                "address_hex": frame.address_hex,
                "frame_name": frame.frame_name,
                "module": meta.module,
                "signals": meta.signal_count,
                "enumerated_signals": meta.enumerated_signal_count,
                "enum_values": meta.value_count,
                "vapi_aliases": meta.vapi_alias_count,
            }
        )
    return pd.DataFrame.from_records(records, columns=EXPORT_COLUMNS)
