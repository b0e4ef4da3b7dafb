from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc

from can_browser.core.selection import SelectionState
from can_browser.ui.ids import IDs
from can_browser.ui.layout.build_filter_panel import build_filter_panel
from can_browser.ui.layout.build_frame_panel import build_frame_panel
from can_browser.ui.layout.build_navbar import build_navbar

if TYPE_CHECKING:
    from can_browser.ui.config import AppConfig


def build_layout(ctx: AppConfig):
    global_config = ctx.global_config
    initial_selection = SelectionState(signal_page_size=global_config.signal_page_size)

    return dbc.Container(
        fluid=True,
        className="cb-root",
        children=[
            dcc.Location(id=IDs.Control.URL, refresh=False),
            dcc.Location(id=IDs.Control.URL_REDIRECT, refresh=True),

            build_navbar(global_config, ctx.sources),

            # App-level stores; memory storage resets with each page load / source switch
            dcc.Store(id=IDs.Store.DATA_SELECTION, storage_type="memory"),
            dcc.Store(id=IDs.Store.SELECTION, storage_type="memory", data=initial_selection.to_dict()),

            dbc.Alert(
                id=IDs.Control.LOAD_ERROR,
                color="danger",
                is_open=False,
                className="mt-3",
            ),

            dbc.Row(
                [
                    dbc.Col(build_filter_panel(), md=4, lg=3, className="mt-3"),
                    dbc.Col(
                        build_frame_panel(global_config.page_size_options, global_config.signal_page_size),
                        md=8,
                        lg=9,
                        className="mt-3",
                    ),
                ],
                id=IDs.Control.MAIN_CONTENT,
                className="gx-3",
            ),
        ],
    )
