from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from urllib.parse import parse_qs

from can_browser.config.model import GlobalConfig, SourceConfig
from can_browser.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DATA_OVERRIDE_ENV = "CAN_BROWSER_DATA"


@dataclass(frozen=True)
class DataSelection:
    """
    Which dataset to load for this page view.

    When `is_data_override` is set the location came from a raw override and
    source switching is disabled in the UI.
    """
    source_key: Optional[str]
    source_label: str
    location: str
    is_data_override: bool = False


def default_source_key(global_config: GlobalConfig, cfg_by_key: Dict[str, SourceConfig]) -> Optional[str]:
    """Configured default if it is registered, else the first source in display order."""
    if not cfg_by_key:
        return None
    default = global_config.default_source
    if default in cfg_by_key:
        return default
    first = next(iter(cfg_by_key))
    if default:
        logger.warning("Default source %r is not registered; using %r", default, first)
    return first


def parse_query_string(search: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Pull `source` and `data` out of a URL query string like '?source=mcu3'."""
    params = parse_qs((search or "").lstrip("?"))

    def first(name: str) -> Optional[str]:
        values = [v for v in params.get(name, []) if v]
        return values[0] if values else None

    return first("source"), first("data")


def resolve_selection(
        global_config: GlobalConfig,
        cfg_by_key: Dict[str, SourceConfig],
        source_key: Optional[str] = None,
        data_override: Optional[str] = None,
) -> DataSelection:
    """
    Resolve a requested source key and optional raw override to one dataset location.

    Unknown source keys fall back to the default source. The override comes from
    the argument (honoured only when `allow_data_override` is set in global
    config), else from the CAN_BROWSER_DATA environment variable.

    Raises:
        ConfigError: if there is neither a registered source nor an override
    """
    if data_override and not global_config.allow_data_override:
        logger.warning("Ignoring data override; allow_data_override is off", extra={"location": data_override})
        data_override = None

    override = data_override or os.environ.get(DATA_OVERRIDE_ENV) or None

    key = source_key if source_key in cfg_by_key else default_source_key(global_config, cfg_by_key)
    source = cfg_by_key.get(key) if key is not None else None

    if override:
        return DataSelection(
            source_key=key,
            source_label=source.label if source is not None else "Custom dataset",
            location=override,
            is_data_override=True,
        )

    if source is None:
        raise ConfigError("No dataset sources configured and no data override given")

    return DataSelection(
        source_key=key,
        source_label=source.label,
        location=source.location,
        is_data_override=False,
    )
