from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import Input, Output, State, dcc
from dash.exceptions import PreventUpdate

from can_browser.core.frame_query import query_frames
from can_browser.ui.callbacks.callbacks_utils import filter_states, filters_from_controls, index_from_store
from can_browser.ui.helpers import frames_dataframe
from can_browser.ui.ids import IDs

if TYPE_CHECKING:
    from can_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def export_filename(data_selection: dict) -> str:
    key = data_selection.get("source_key") if not data_selection.get("is_data_override") else None
    return f"{key or 'custom'}_frames.csv"


def register_export_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Download the filtered frame list (CSV)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.EXPORT_DOWNLOAD, "data"),
        Input(IDs.Control.EXPORT_BTN, "n_clicks"),
        State(IDs.Store.DATA_SELECTION, "data"),
        *filter_states(),
        prevent_initial_call=True,
    )
    def export_frames(n_clicks, data_selection, *filter_values):
        if not n_clicks:
            raise PreventUpdate

        index = index_from_store(ctx, data_selection)
        if index is None:
            raise PreventUpdate

        frames = query_frames(index, filters_from_controls(*filter_values))
        df = frames_dataframe(index, frames)

        logger.info(
            "Exporting frame list",
            extra={"location": data_selection.get("location"), "n_frames": len(df)},
        )
        return dcc.send_data_frame(df.to_csv, export_filename(data_selection), index=False)
