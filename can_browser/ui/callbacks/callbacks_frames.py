from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import ALL, Input, Output, State
from dash.exceptions import PreventUpdate

from can_browser.core.selection import SelectionState
from can_browser.services.browser_session import BrowserSession
from can_browser.ui.callbacks.callbacks_utils import (
    filter_inputs,
    filters_from_controls,
    index_from_store,
    triggered_click,
    try_parse_selection,
)
from can_browser.ui.helpers import render_frame_list
from can_browser.ui.ids import IDs

if TYPE_CHECKING:
    from can_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_frame_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    default_page_size = ctx.global_config.signal_page_size

    # ---------------------------------------------------------
    # Filters / frame clicks -> frame list + reconciled selection
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.FRAME_LIST, "children"),
        Output(IDs.Control.FRAME_RESULTS, "children"),
        Output(IDs.Store.SELECTION, "data"),
        Output(IDs.Control.SIGNAL_SEARCH, "value"),
        Input(IDs.Store.DATA_SELECTION, "data"),
        *filter_inputs(),
        Input({"type": IDs.Pattern.FRAME_ITEM, "index": ALL, "n": ALL}, "n_clicks"),
        State(IDs.Store.SELECTION, "data"),
    )
    def update_frame_list(
            data_selection,
            query,
            bus,
            module,
            sort_mode,
            enumerated_only,
            _frame_clicks,
            selection_data,
    ):
        selection = try_parse_selection(selection_data, default_page_size)

        index = index_from_store(ctx, data_selection)
        if index is None:
            cleared = SelectionState(signal_page_size=selection.signal_page_size)
            return [], "0 frames", cleared.to_dict(), dash.no_update

        triggered_id = dash.ctx.triggered_id
        clicked = triggered_click()
        if isinstance(triggered_id, dict) and clicked is None:
            # frame items were (re-)rendered, nothing was clicked
            raise PreventUpdate

        filters = filters_from_controls(query, bus, module, sort_mode, enumerated_only)
        session = BrowserSession(index, filters, selection)

        signal_search = dash.no_update
        if clicked is not None and clicked.get("type") == IDs.Pattern.FRAME_ITEM:
            if session.select_frame(clicked["index"]):
                signal_search = ""
                logger.debug("Frame selected", extra={"selected_key": clicked["index"]})

        frame_list, results = render_frame_list(
            index, session.filtered_frames, session.selection.selected_key
        )
        return frame_list, results, session.selection.to_dict(), signal_search
