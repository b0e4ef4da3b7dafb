from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from can_browser.core.exceptions import ConfigError
from can_browser.core.indexer import DEFAULT_BATCH_SIZE
from can_browser.core.pager import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS


@dataclass
class SourceConfig:
    """
    Parsed config entry for a single dataset source.
    """
    raw: Dict[str, Any]
    source_path: Path
    index: int

    @property
    def key(self) -> str:
        return str(self.raw.get("key") or self.source_path.stem)

    @property
    def label(self) -> str:
        return str(self.raw.get("label") or self.key)

    @property
    def location(self) -> str:
        """
        Where the dataset lives: an http(s) URL or a path relative to the data root.

        Supports both "path" and legacy "url".
        """
        location = self.raw.get("path") or self.raw.get("url")
        if not location:
            raise ConfigError(f"No 'path' or 'url' in source config: {self.source_path}")
        return str(location)

    @property
    def order(self) -> Tuple[int, int]:
        try:
            return int(self.raw.get("order", self.index)), self.index
        except (TypeError, ValueError):
            return self.index, self.index

    @classmethod
    def from_raw(cls, raw: Dict[str, Any], source_path: Path, index: int) -> SourceConfig:
        return cls(raw=raw, source_path=source_path, index=index)


@dataclass
class GlobalConfig:
    ui_title: str = "CAN Frame Browser"
    default_source: Optional[str] = None
    signal_page_size: int = DEFAULT_PAGE_SIZE
    page_size_options: Tuple[int, ...] = PAGE_SIZE_OPTIONS
    index_batch_size: int = DEFAULT_BATCH_SIZE
    sources: List[SourceConfig] = field(default_factory=list)
    data_root: Optional[Path] = None
    allow_data_override: bool = False
