from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from can_browser.core.dataset import Dataset
from can_browser.core.dataset_loader import load_dataset
from can_browser.core.exceptions import DatasetLoadError
from can_browser.core.indexer import DEFAULT_BATCH_SIZE, CatalogIndex, IndexProgress, build_index
from can_browser.validation.dataset_validation import warn_on_invalid_index

logger = logging.getLogger(__name__)


class DatasetManager(Mapping[str, CatalogIndex]):
    """
    Central service for loaded catalogs, keyed by dataset location.

    Implements the Mapping interface (dict-like): the first lookup of a
    location fetches, parses and indexes it; later lookups return the same
    read-only CatalogIndex. A new location means a full new index.

    Only `registered` locations (the configured sources) are kept for the
    life of the process. Any other location shares a single slot: loading
    a new one replaces the previous index.
    """

    def __init__(
            self,
            data_root: Optional[Path] = None,
            batch_size: int = DEFAULT_BATCH_SIZE,
            loader: Callable[..., Dataset] = load_dataset,
            registered: Iterable[str] = (),
    ):
        self._data_root = data_root
        self._batch_size = batch_size
        self._loader = loader
        self._registered = frozenset(registered)
        self._loaded: Dict[str, CatalogIndex] = {}
        self._transient: Optional[Tuple[str, CatalogIndex]] = None

    def _cached(self, location: str) -> Optional[CatalogIndex]:
        if location in self._loaded:
            return self._loaded[location]
        if self._transient is not None and self._transient[0] == location:
            return self._transient[1]
        return None

    def __getitem__(self, location: str) -> CatalogIndex:
        # 1. Fast path: already indexed
        cached = self._cached(location)
        if cached is not None:
            return cached

        # 2. Load + index
        try:
            dataset = self._loader(location, data_root=self._data_root)
        except DatasetLoadError as e:
            logger.error(
                "Dataset load failed",
                extra={"location": location, "error": str(e)},
            )
            raise
        except Exception:
            logger.exception(
                "Unexpected error while loading dataset",
                extra={"location": location},
            )
            raise

        def report(progress: IndexProgress) -> None:
            logger.debug(
                "Building search index",
                extra={"location": location, "processed": progress.processed, "total": progress.total},
            )

        index = build_index(dataset, batch_size=self._batch_size, on_progress=report)
        warn_on_invalid_index(index, location, logger)

        # 3. Cache
        if location in self._registered:
            self._loaded[location] = index
        else:
            if self._transient is not None:
                logger.info(
                    "Replacing unregistered dataset",
                    extra={"location": location, "evicted": self._transient[0]},
                )
            self._transient = (location, index)
        return index

    def _locations(self) -> List[str]:
        locations = list(self._loaded)
        if self._transient is not None:
            locations.append(self._transient[0])
        return locations

    def __iter__(self) -> Iterator[str]:
        return iter(self._locations())

    def __len__(self) -> int:
        return len(self._locations())

    def __contains__(self, location: object) -> bool:
        return isinstance(location, str) and self._cached(location) is not None

    def get(self, location: str, default=None) -> CatalogIndex | None:
        try:
            return self[location]
        except (KeyError, DatasetLoadError):
            return default

    def is_loaded(self, location: str) -> bool:
        return location in self

    def clear(self) -> None:
        """Drop every cached index; the next lookup reloads from scratch."""
        self._loaded.clear()
        self._transient = None
