from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from can_browser.config.model import GlobalConfig, SourceConfig
from can_browser.config.selection import DataSelection, parse_query_string, resolve_selection
from can_browser.core.indexer import CatalogIndex
from can_browser.services.dataset_service import DatasetManager


@dataclass
class AppConfig:
    config_root: Path
    global_config: GlobalConfig
    sources: Dict[str, SourceConfig] = field(default_factory=dict)
    datasets: Optional[DatasetManager] = None

    def validate(self) -> None:
        """Ensure all required services are attached before the app starts."""
        if self.datasets is None:
            raise RuntimeError("AppConfig.datasets must be initialized.")

    def selection_for(self, search: Optional[str]) -> DataSelection:
        """Resolve the page URL query string to the dataset it should show."""
        source_key, data_override = parse_query_string(search)
        return resolve_selection(self.global_config, self.sources, source_key, data_override)

    def index_for(self, location: Optional[str]) -> Optional[CatalogIndex]:
        """Index for a location, loading it on first use; None if it cannot be loaded."""
        if not location or self.datasets is None:
            return None
        return self.datasets.get(location)
