from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Optional

import dash
from dash import Input, State

from can_browser.core.filter_state import FrameFilterState
from can_browser.core.indexer import CatalogIndex
from can_browser.core.selection import SelectionState
from can_browser.ui.ids import IDs

if TYPE_CHECKING:
    from can_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

_FILTER_CONTROLS = (
    (IDs.Control.GLOBAL_SEARCH, "value"),
    (IDs.Control.BUS_FILTER, "value"),
    (IDs.Control.MODULE_FILTER, "value"),
    (IDs.Control.SORT_MODE, "value"),
    (IDs.Control.ENUMERATED_ONLY, "value"),
)


def filter_inputs() -> List[Input]:
    return [Input(cid, prop) for cid, prop in _FILTER_CONTROLS]


def filter_states() -> List[State]:
    return [State(cid, prop) for cid, prop in _FILTER_CONTROLS]


def filters_from_controls(query, bus, module, sort_mode, enumerated_only) -> FrameFilterState:
    """Sidebar control values (in filter_inputs() order) -> FrameFilterState."""
    return FrameFilterState.from_dict(
        {
            "query": query,
            "bus": bus,
            "module": module,
            "sort_mode": sort_mode,
            "enumerated_only": enumerated_only,
        }
    )


def try_parse_selection(data: object, default_page_size: int) -> SelectionState:
    if not isinstance(data, dict) or not data:
        return SelectionState(signal_page_size=default_page_size)
    try:
        return SelectionState.from_dict(data)
    except Exception:
        logger.exception("Invalid selection-state: %r", data)
        return SelectionState(signal_page_size=default_page_size)


def index_from_store(ctx: AppConfig, data_selection: object) -> Optional[CatalogIndex]:
    """CatalogIndex for the data-selection store, None if nothing is loaded."""
    if not isinstance(data_selection, dict) or not data_selection.get("loaded"):
        return None
    return ctx.index_for(data_selection.get("location"))


def triggered_click() -> Optional[dict]:
    """
    Pattern-matching id of the component whose click fired this callback.

    Returns None when the trigger was not a real click (e.g. the component
    was just rendered with n_clicks=0).
    """
    triggered_id = dash.ctx.triggered_id
    if not isinstance(triggered_id, dict):
        return None
    value: Any = dash.ctx.triggered[0].get("value") if dash.ctx.triggered else None
    if not value:
        return None
    return triggered_id
