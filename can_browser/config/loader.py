from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from can_browser.config.model import GlobalConfig, SourceConfig
from can_browser.core.exceptions import ConfigError
from can_browser.core.indexer import DEFAULT_BATCH_SIZE
from can_browser.core.pager import PAGE_SIZE_OPTIONS, normalise_page_size

logger = logging.getLogger(__name__)

DATA_ROOT_ENV = "CAN_BROWSER_DATA_ROOT"


def _read_json(path: Path) -> Any:
    try:
        with path.open() as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read {path}: {e}") from e


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _resolve_data_root(root: Path, raw_global: Dict[str, Any]) -> Optional[Path]:
    env_root = os.environ.get(DATA_ROOT_ENV)
    if env_root:
        return Path(env_root).resolve()

    data_root_raw = raw_global.get("data_root")
    if data_root_raw is None:
        return None
    data_root_path = Path(data_root_raw)
    if data_root_path.is_absolute():
        return data_root_path
    return (root / data_root_path).resolve()


def load_global_config(root: Path) -> GlobalConfig:
    """
    Load configuration from a directory using the multi-file layout:

        root/
          global.json
          sources/*.json
    """
    root = Path(root)
    logger.info("Loading global config", extra={"config_root": str(root)})

    global_path = root / "global.json"
    if not global_path.is_file():
        raise ConfigError(f"File not found at {global_path}")

    raw_global = _read_json(global_path)
    if not isinstance(raw_global, dict):
        raise ConfigError(f"{global_path} must contain a JSON object")

    sources_dir = root / "sources"
    sources: List[SourceConfig] = []

    if sources_dir.is_dir():
        files = sorted(sources_dir.glob("*.json"))
        if not files:
            logger.warning("No .json files found in %s", sources_dir)

        for idx, config_file in enumerate(files):
            try:
                raw = _read_json(config_file)
            except ConfigError as e:
                logger.error("Failed to load %s: %s", config_file.name, e)
                continue
            if not isinstance(raw, dict):
                logger.error("Skipping %s: not a JSON object", config_file.name)
                continue
            sources.append(SourceConfig.from_raw(raw, source_path=config_file, index=idx))
    else:
        logger.warning("Sources directory not found at: %s", sources_dir)

    sources.sort(key=lambda s: s.order)

    raw_options = raw_global.get("page_size_options", PAGE_SIZE_OPTIONS)
    if not isinstance(raw_options, (list, tuple)):
        logger.warning("Ignoring page_size_options in %s: expected a list", global_path)
        raw_options = PAGE_SIZE_OPTIONS
    options = tuple(
        dict.fromkeys(
            size
            for size in (normalise_page_size(v, default=0) for v in raw_options)
            if size > 0
        )
    )

    return GlobalConfig(
        ui_title=raw_global.get("ui_title", "CAN Frame Browser"),
        default_source=raw_global.get("default_source"),
        signal_page_size=normalise_page_size(raw_global.get("signal_page_size")),
        page_size_options=options or PAGE_SIZE_OPTIONS,
        index_batch_size=_positive_int(raw_global.get("index_batch_size"), DEFAULT_BATCH_SIZE),
        sources=sources,
        data_root=_resolve_data_root(root, raw_global),
        allow_data_override=raw_global.get("allow_data_override") is True,
    )


def load_source_registry(root: Path) -> tuple[GlobalConfig, Dict[str, SourceConfig]]:
    """
    Load global config + source configs only (no dataset is fetched).
    Returns mapping of source key -> SourceConfig in display order.
    """
    global_config = load_global_config(root)

    cfg_by_key: Dict[str, SourceConfig] = {}
    duplicates: List[str] = []

    for source_cfg in global_config.sources:
        if source_cfg.key in cfg_by_key:
            duplicates.append(source_cfg.key)
            continue
        cfg_by_key[source_cfg.key] = source_cfg

    if duplicates:
        raise ConfigError(f"Duplicate source keys in config: {sorted(set(duplicates))}")

    if not cfg_by_key:
        logger.warning("No dataset sources configured under: %s", root)

    logger.info(
        "Source registry loaded",
        extra={
            "config_root": str(root),
            "n_sources": len(cfg_by_key),
            "source_keys": list(cfg_by_key),
        },
    )

    return global_config, cfg_by_key


def registered_locations(cfg_by_key: Dict[str, SourceConfig]) -> List[str]:
    """Dataset locations of every source that names one; the rest are logged and skipped."""
    locations: List[str] = []
    for key, cfg in cfg_by_key.items():
        try:
            locations.append(cfg.location)
        except ConfigError as e:
            logger.warning("Source %r has no dataset location: %s", key, e)
    return locations
