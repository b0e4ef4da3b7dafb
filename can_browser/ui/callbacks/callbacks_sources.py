from __future__ import annotations

import logging
from dataclasses import asdict
from typing import TYPE_CHECKING
from urllib.parse import urlencode

import dash
from dash import Input, Output, State
from dash.exceptions import PreventUpdate

from can_browser.core.exceptions import ConfigError, DatasetLoadError
from can_browser.ui.helpers import (
    dataset_libs_label,
    dataset_source_label,
    get_filter_dropdown_options,
    stats_labels,
)
from can_browser.ui.ids import IDs

if TYPE_CHECKING:
    from can_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

OVERRIDE_NOTE = "Disabled because a custom ?data= override is active."
HIDDEN = {"display": "none"}


def register_source_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Page URL -> dataset selection, load + index, header stats
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.DATA_SELECTION, "data"),
        Output(IDs.Control.SOURCE_SELECT, "value"),
        Output(IDs.Control.SOURCE_SELECT, "disabled"),
        Output(IDs.Control.SOURCE_NOTE, "children"),
        Output(IDs.Control.LOAD_ERROR, "children"),
        Output(IDs.Control.LOAD_ERROR, "is_open"),
        Output(IDs.Control.MAIN_CONTENT, "style"),
        Output(IDs.Control.STAT_FRAMES, "children"),
        Output(IDs.Control.STAT_SIGNALS, "children"),
        Output(IDs.Control.STAT_VALUES, "children"),
        Output(IDs.Control.STAT_VAPI, "children"),
        Output(IDs.Control.DATASET_SOURCE_LABEL, "children"),
        Output(IDs.Control.DATASET_LIBS_LABEL, "children"),
        Output(IDs.Control.BUS_FILTER, "options"),
        Output(IDs.Control.MODULE_FILTER, "options"),
        Input(IDs.Control.URL, "search"),
    )
    def load_selected_source(search: str | None):
        def failed(message: str, selection=None, note=None):
            empty: list[dict] = []
            stored = dict(asdict(selection), loaded=False) if selection is not None else None
            return (
                stored,
                selection.source_key if selection is not None else None,
                selection.is_data_override if selection is not None else False,
                note,
                message, True, HIDDEN,
                "-", "-", "-", "-",
                None, None,
                empty, empty,
            )

        try:
            selection = ctx.selection_for(search)
        except ConfigError as e:
            logger.error("Could not resolve a dataset source: %s", e)
            return failed(f"Failed to load data. {e}")

        note = OVERRIDE_NOTE if selection.is_data_override else None

        try:
            index = ctx.datasets[selection.location]
        except DatasetLoadError as e:
            return failed(
                f"Failed to load data. Error: {e}",
                selection=selection,
                note=note,
            )

        bus_options, module_options = get_filter_dropdown_options(index)
        frames, signals, values, vapi = stats_labels(index)

        logger.info(
            "Dataset selected",
            extra={
                "source_key": selection.source_key,
                "location": selection.location,
                "is_data_override": selection.is_data_override,
                "n_frames": len(index),
            },
        )

        return (
            dict(asdict(selection), loaded=True),
            selection.source_key,
            selection.is_data_override,
            note,
            None, False, {},
            frames, signals, values, vapi,
            dataset_source_label(index.dataset),
            dataset_libs_label(index.dataset),
            bus_options, module_options,
        )

    # ---------------------------------------------------------
    # Source switch -> full page reload on ?source=<key>
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.URL_REDIRECT, "search"),
        Input(IDs.Control.SOURCE_SELECT, "value"),
        State(IDs.Store.DATA_SELECTION, "data"),
        prevent_initial_call=True,
    )
    def switch_source(source_key: str | None, data_selection: dict | None):
        if not source_key or source_key not in ctx.sources:
            raise PreventUpdate
        if isinstance(data_selection, dict):
            if data_selection.get("is_data_override"):
                raise PreventUpdate
            if data_selection.get("source_key") == source_key:
                raise PreventUpdate

        logger.info("Switching data source", extra={"source_key": source_key})
        return "?" + urlencode({"source": source_key})
