from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from can_browser.core.filter_state import SortMode
from can_browser.ui.helpers import sort_mode_options
from can_browser.ui.ids import IDs

SEARCH_DEBOUNCE_SECONDS = 0.12


def build_filter_panel() -> dbc.Card:
    """Sidebar: frame search, bus/module/sort filters and the filtered frame list."""
    return dbc.Card(
        [
            dbc.CardHeader("Frames", className="fw-semibold"),
            dbc.CardBody(
                [
                    html.Label("Search", className="form-label"),
                    dcc.Input(
                        id=IDs.Control.GLOBAL_SEARCH,
                        type="search",
                        value="",
                        debounce=SEARCH_DEBOUNCE_SECONDS,
                        placeholder="Frame, address, signal, enum, VAPI alias...",
                        className="form-control mb-3",
                    ),

                    html.Label("Bus", className="form-label"),
                    dcc.Dropdown(
                        id=IDs.Control.BUS_FILTER,
                        options=[],
                        placeholder="All buses",
                        className="mb-3",
                    ),

                    html.Label("Module", className="form-label"),
                    dcc.Dropdown(
                        id=IDs.Control.MODULE_FILTER,
                        options=[],
                        placeholder="All modules",
                        className="mb-3",
                    ),

                    html.Label("Sort by", className="form-label"),
                    dcc.Dropdown(
                        id=IDs.Control.SORT_MODE,
                        options=sort_mode_options(),
                        value=SortMode.ADDRESS,
                        clearable=False,
                        className="mb-3",
                    ),

                    dbc.Switch(
                        id=IDs.Control.ENUMERATED_ONLY,
                        label="Only frames with enumerated signals",
                        value=False,
                        className="mb-2",
                    ),
                    html.Hr(),

                    html.Div(
                        [
                            html.Small("0 frames", id=IDs.Control.FRAME_RESULTS, className="text-muted"),
                            dbc.Button(
                                "Export (CSV)",
                                id=IDs.Control.EXPORT_BTN,
                                color="secondary",
                                size="sm",
                                outline=True,
                            ),
                            dcc.Download(id=IDs.Control.EXPORT_DOWNLOAD),
                        ],
                        className="d-flex justify-content-between align-items-center mb-2",
                    ),
                    dcc.Loading(
                        html.Div(id=IDs.Control.FRAME_LIST, className="frame-list"),
                        type="default",
                    ),
                ]
            ),
        ],
        className="cb-sidebar",
    )
