from __future__ import annotations

from typing import Dict

import dash_bootstrap_components as dbc
from dash import dcc, html

from can_browser.config.model import GlobalConfig, SourceConfig
from can_browser.ui.ids import IDs


def _stat(label: str, stat_id: str) -> html.Div:
    return html.Div(
        [
            html.Div("-", id=stat_id, className="stat-value"),
            html.Div(label, className="stat-label"),
        ],
        className="stat-block",
    )


def build_navbar(global_config: GlobalConfig, sources: Dict[str, SourceConfig]) -> dbc.Navbar:
    source_options = [{"label": cfg.label, "value": key} for key, cfg in sources.items()]

    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                # Left: title + provenance
                html.Div(
                    [
                        html.H2(global_config.ui_title, className="mb-0"),
                        html.Small(id=IDs.Control.DATASET_SOURCE_LABEL, className="text-muted"),
                        html.Small(id=IDs.Control.DATASET_LIBS_LABEL, className="text-muted"),
                    ],
                    className="d-flex flex-column justify-content-center",
                ),

                # Middle: dataset stats
                html.Div(
                    [
                        _stat("Frames", IDs.Control.STAT_FRAMES),
                        _stat("Signals", IDs.Control.STAT_SIGNALS),
                        _stat("Enum Values", IDs.Control.STAT_VALUES),
                        _stat("VAPI Aliases", IDs.Control.STAT_VAPI),
                    ],
                    className="d-flex stat-row mx-auto",
                ),

                # Right: source selector
                html.Div(
                    [
                        html.Div("Data Source", className="navbar-dataset-title"),
                        dcc.Dropdown(
                            id=IDs.Control.SOURCE_SELECT,
                            options=source_options,
                            clearable=False,
                            placeholder="Select source",
                            className="cb-source-dropdown mt-1",
                        ),
                        html.Small(id=IDs.Control.SOURCE_NOTE, className="text-muted"),
                    ],
                    className="navbar-dataset-block",
                    style={"minWidth": "240px", "maxWidth": "340px"},
                ),
            ],
        ),
        dark=False,
        className="shadow-sm cb-navbar",
    )
