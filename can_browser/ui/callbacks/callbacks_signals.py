from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import ALL, Input, Output, State
from dash.exceptions import PreventUpdate

from can_browser.services.browser_session import BrowserSession
from can_browser.ui.callbacks.callbacks_utils import (
    filter_states,
    filters_from_controls,
    index_from_store,
    triggered_click,
    try_parse_selection,
)
from can_browser.ui.helpers import (
    empty_detail,
    frame_meta_chips,
    frame_subtitle,
    frame_title,
    render_pagination,
    render_signal_table,
)
from can_browser.ui.ids import IDs

if TYPE_CHECKING:
    from can_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_signal_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    default_page_size = ctx.global_config.signal_page_size

    def session_from_state(data_selection, selection_data, filter_values) -> BrowserSession | None:
        index = index_from_store(ctx, data_selection)
        if index is None:
            return None
        return BrowserSession(
            index,
            filters_from_controls(*filter_values),
            try_parse_selection(selection_data, default_page_size),
        )

    # ---------------------------------------------------------
    # Signal panel controls -> selection store
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.SELECTION, "data", allow_duplicate=True),
        Input(IDs.Control.SIGNAL_SEARCH, "value"),
        Input(IDs.Control.SIGNAL_PAGE_SIZE, "value"),
        Input({"type": IDs.Pattern.PAGER, "index": ALL}, "n_clicks"),
        Input({"type": IDs.Pattern.SIGNAL_ROW, "index": ALL, "n": ALL}, "n_clicks"),
        State(IDs.Store.SELECTION, "data"),
        State(IDs.Store.DATA_SELECTION, "data"),
        *filter_states(),
        prevent_initial_call=True,
    )
    def update_signal_state(
            signal_query,
            page_size,
            _pager_clicks,
            _row_clicks,
            selection_data,
            data_selection,
            *filter_values,
    ):
        session = session_from_state(data_selection, selection_data, filter_values)
        if session is None or not session.selection.has_selection:
            raise PreventUpdate

        triggered_id = dash.ctx.triggered_id
        selection = session.selection

        if triggered_id == IDs.Control.SIGNAL_SEARCH:
            if (signal_query or "") == selection.signal_query:
                raise PreventUpdate
            session.set_signal_query(signal_query)
        elif triggered_id == IDs.Control.SIGNAL_PAGE_SIZE:
            session.set_page_size(page_size)
        else:
            clicked = triggered_click()
            if clicked is None:
                raise PreventUpdate
            if clicked.get("type") == IDs.Pattern.PAGER:
                session.navigate_page(clicked["index"])
            elif clicked.get("type") == IDs.Pattern.SIGNAL_ROW:
                session.toggle_signal(clicked["index"])
            else:
                raise PreventUpdate

        return selection.to_dict()

    # ---------------------------------------------------------
    # Selection store -> frame detail panel
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.FRAME_TITLE, "children"),
        Output(IDs.Control.FRAME_SUBTITLE, "children"),
        Output(IDs.Control.FRAME_META, "children"),
        Output(IDs.Control.SIGNAL_PAGINATION, "children"),
        Output(IDs.Control.SIGNAL_TABLE_WRAP, "children"),
        Output(IDs.Control.SIGNAL_SEARCH, "disabled"),
        Output(IDs.Control.SIGNAL_PAGE_SIZE, "disabled"),
        Input(IDs.Store.SELECTION, "data"),
        State(IDs.Store.DATA_SELECTION, "data"),
        *filter_states(),
    )
    def render_frame_detail(selection_data, data_selection, *filter_values):
        session = session_from_state(data_selection, selection_data, filter_values)
        page = session.signal_page() if session is not None else None
        if page is None:
            return (*empty_detail(), True, True)

        return (
            frame_title(page.frame),
            frame_subtitle(page.frame),
            frame_meta_chips(page.frame, page.meta),
            render_pagination(page.window),
            render_signal_table(page.meta.key.token, page.signals, session.selection),
            False,
            False,
        )
