from __future__ import annotations

from typing import Sequence

import dash_bootstrap_components as dbc
from dash import dcc, html

from can_browser.ui.helpers import page_size_options
from can_browser.ui.layout.build_filter_panel import SEARCH_DEBOUNCE_SECONDS
from can_browser.ui.ids import IDs


def build_frame_panel(page_sizes: Sequence[int], default_page_size: int) -> dbc.Card:
    sizes = list(page_sizes)
    if default_page_size not in sizes:
        sizes = sorted(sizes + [default_page_size])

    return dbc.Card(
        [
            dbc.CardHeader(
                html.Div(
                    [
                        html.H4("Select a frame", id=IDs.Control.FRAME_TITLE, className="mb-0"),
                        html.Small(
                            "Browse by frame address and signal values.",
                            id=IDs.Control.FRAME_SUBTITLE,
                            className="text-muted",
                        ),
                    ],
                    className="d-flex flex-column",
                ),
                className="p-2",
            ),
            dbc.CardBody(
                [
                    html.Div(id=IDs.Control.FRAME_META, className="frame-chips mb-3"),
                    dbc.Row(
                        [
                            dbc.Col(
                                dcc.Input(
                                    id=IDs.Control.SIGNAL_SEARCH,
                                    type="search",
                                    value="",
                                    debounce=SEARCH_DEBOUNCE_SECONDS,
                                    disabled=True,
                                    placeholder="Filter signals, enum values, VAPI aliases...",
                                    className="form-control",
                                ),
                                md=9,
                            ),
                            dbc.Col(
                                dcc.Dropdown(
                                    id=IDs.Control.SIGNAL_PAGE_SIZE,
                                    options=page_size_options(sizes),
                                    value=default_page_size,
                                    clearable=False,
                                    disabled=True,
                                ),
                                md=3,
                            ),
                        ],
                        className="g-2 mb-2",
                    ),
                    html.Div(id=IDs.Control.SIGNAL_PAGINATION, className="signal-pagination mb-2"),
                    html.Div(id=IDs.Control.SIGNAL_TABLE_WRAP, className="signal-table-wrap"),
                ],
                className="cb-main-body",
            ),
        ],
        className="cb-maincard",
    )
