from __future__ import annotations

import logging
from pathlib import Path

import dash_bootstrap_components as dbc
from dash import Dash

from can_browser.config.loader import load_source_registry, registered_locations
from can_browser.services.dataset_service import DatasetManager
from can_browser.ui.callbacks.callbacks_export import register_export_callbacks
from can_browser.ui.callbacks.callbacks_frames import register_frame_callbacks
from can_browser.ui.callbacks.callbacks_signals import register_signal_callbacks
from can_browser.ui.callbacks.callbacks_sources import register_source_callbacks
from can_browser.ui.config import AppConfig
from can_browser.ui.layout.build_layout import build_layout

logger = logging.getLogger(__name__)


def create_dash_app(config_root: Path | str = Path("config")) -> Dash:
    config_root = Path(config_root)

    # 1) Load Config
    global_config, cfg_by_key = load_source_registry(config_root)

    # 2) Initialize Service Layer (datasets are fetched + indexed on first use)
    dataset_manager = DatasetManager(
        data_root=global_config.data_root,
        batch_size=global_config.index_batch_size,
        registered=registered_locations(cfg_by_key),
    )

    # 3) App Context
    ctx = AppConfig(
        config_root=config_root,
        global_config=global_config,
        sources=cfg_by_key,
        datasets=dataset_manager,
    )
    ctx.validate()

    assets_path = Path(__file__).parent / "assets"

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        assets_folder=str(assets_path),
    )
    app.title = global_config.ui_title

    app.layout = build_layout(ctx)

    # Register callbacks
    register_source_callbacks(app, ctx)
    register_frame_callbacks(app, ctx)
    register_signal_callbacks(app, ctx)
    register_export_callbacks(app, ctx)

    logger.info(
        "Dash app created",
        extra={"config_root": str(config_root), "n_sources": len(cfg_by_key)},
    )
    return app
