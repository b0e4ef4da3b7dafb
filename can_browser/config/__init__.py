"""
Config package for can_browser.

Responsible for:
- config models (GlobalConfig, SourceConfig)
- config I/O helpers (load_global_config / load_source_registry)
- resolving which dataset source a page view loads
"""

from .model import GlobalConfig, SourceConfig
from .loader import load_global_config, load_source_registry
from .selection import DataSelection, resolve_selection

__all__ = [
    "GlobalConfig",
    "SourceConfig",
    "load_global_config",
    "load_source_registry",
    "DataSelection",
    "resolve_selection",
]
