from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Generator, List, Optional, Tuple

from can_browser.core.dataset import Dataset, Frame, FrameKey
from can_browser.core.signal_query import SignalSearch
from can_browser.validation.errors import ValidationIssue

logger = logging.getLogger(__name__)

MODULE_DELIMITER = "_"
UNKNOWN_MODULE = "UNKNOWN"
DEFAULT_BATCH_SIZE = 20


def module_name(frame_name: Optional[str]) -> str:
    """
    Coarse module grouping inferred from the frame name prefix.

    "BMS_energyStatus" -> "BMS", "DOOR" -> "DOOR", "" -> "UNKNOWN"
    """
    if not frame_name:
        return UNKNOWN_MODULE
    head, _, _ = frame_name.partition(MODULE_DELIMITER)
    return head


@dataclass(frozen=True)
class FrameMeta:
    """
    Derived, search-oriented view of one frame.

    Built once by the indexer and never mutated; raw Frame records stay untouched.
    """
    key: FrameKey
    module: str
    bus_label: str
    signal_count: int
    enumerated_signal_count: int
    value_count: int
    vapi_alias_count: int
    search_blob: str
    label_blob: str


@dataclass(frozen=True)
class IndexStats:
    total_frames: int
    total_signals: int
    total_values: int
    total_vapi_aliases: int


@dataclass(frozen=True)
class IndexProgress:
    processed: int
    total: int


class CatalogIndex:
    """
    Read-only searchable index over one loaded Dataset.

    Includes:
    - FrameMeta per frame (parallel mapping keyed by the Frame record)
    - FrameKey / token lookup (first frame wins on duplicate keys)
    - dataset-wide counters
    - sorted bus labels and module names for the filter dropdowns
    - the memoised per-signal search cache
    """

    def __init__(
        self,
        dataset: Dataset,
        meta: Dict[Frame, FrameMeta],
        frame_by_key: Dict[FrameKey, Frame],
        stats: IndexStats,
        buses: List[str],
        modules: List[str],
        issues: Tuple[ValidationIssue, ...] = (),
    ) -> None:
        self.dataset = dataset
        self.stats = stats
        self.buses = buses
        self.modules = modules
        self.issues = issues
        self._meta = meta
        self._frame_by_key = frame_by_key
        self._frame_by_token = {key.token: frame for key, frame in frame_by_key.items()}
        self.signal_search = SignalSearch()

    @property
    def frames(self) -> Tuple[Frame, ...]:
        return self.dataset.frames

    def meta(self, frame: Frame) -> FrameMeta:
        return self._meta[frame]

    def get(self, key: FrameKey | str | None) -> Optional[Frame]:
        """Look a frame up by FrameKey or by its token string."""
        if key is None:
            return None
        if isinstance(key, FrameKey):
            return self._frame_by_key.get(key)
        return self._frame_by_token.get(key)

    def __len__(self) -> int:
        return len(self.dataset.frames)

    @property
    def vapi_display_count(self) -> int:
        """Feed's precomputed VAPI counter when present, else our own total."""
        digest = self.dataset.vapi_digest_count
        return digest if digest is not None else self.stats.total_vapi_aliases


def _frame_meta(frame: Frame) -> FrameMeta:
    module = module_name(frame.frame_name)
    search_parts = [
        frame.bus_name,
        frame.bus_id,
        frame.address_hex,
        str(frame.address_dec),
        frame.frame_name,
        module,
    ]
    signal_parts: List[str] = []
    label_parts: List[str] = []
    enumerated = 0
    values = 0
    aliases = 0

    for signal in frame.signals:
        signal_parts.extend(
            (
                signal.signal_name,
                signal.enum_map_symbol,
                signal.possible_values_note,
                signal.vapi_alias,
                signal.vapi_source,
            )
        )
        if signal.vapi_alias:
            aliases += 1
        if signal.possible_values:
            enumerated += 1
            values += len(signal.possible_values)
            label_parts.extend(v.label for v in signal.possible_values if v.label is not None)

    return FrameMeta(
        key=frame.key,
        module=module,
        bus_label=frame.bus_label,
        signal_count=len(frame.signals),
        enumerated_signal_count=enumerated,
        value_count=values,
        vapi_alias_count=aliases,
        search_blob=f"{' '.join(search_parts)} {' '.join(signal_parts)}".lower(),
        label_blob=" ".join(label_parts).lower(),
    )


def iter_build_index(
        dataset: Dataset,
        batch_size: int = DEFAULT_BATCH_SIZE,
) -> Generator[IndexProgress, None, CatalogIndex]:
    """
    Index `dataset` in fixed-size batches, yielding an IndexProgress between batches.

    The finished CatalogIndex is the generator's return value; use build_index()
    unless you need to interleave other work with the pass.
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    frames = dataset.frames
    total = len(frames)

    meta: Dict[Frame, FrameMeta] = {}
    frame_by_key: Dict[FrameKey, Frame] = {}
    duplicates: Dict[FrameKey, int] = {}
    bus_set = set()
    module_set = set()
    total_signals = total_values = total_aliases = 0

    for start in range(0, total, batch_size):
        for frame in frames[start:start + batch_size]:
            info = _frame_meta(frame)
            meta[frame] = info

            if info.key in frame_by_key:
                duplicates[info.key] = duplicates.get(info.key, 1) + 1
            else:
                frame_by_key[info.key] = frame

            bus_set.add(info.bus_label)
            module_set.add(info.module)
            total_signals += info.signal_count
            total_values += info.value_count
            total_aliases += info.vapi_alias_count

        processed = min(total, start + batch_size)
        logger.debug("Indexing frames %d/%d", processed, total)
        yield IndexProgress(processed=processed, total=total)

    issues = list(dataset.issues)
    for key, count in duplicates.items():
        logger.warning(
            "Duplicate frame key %s seen %d times; lookup keeps the first occurrence",
            key.token,
            count,
        )
        issues.append(
            ValidationIssue("FRAME_KEY_DUPLICATE", f"{key.token} appears {count} times")
        )

    stats = IndexStats(
        total_frames=total,
        total_signals=total_signals,
        total_values=total_values,
        total_vapi_aliases=total_aliases,
    )
    logger.info(
        "Catalog indexed",
        extra={
            "n_frames": stats.total_frames,
            "n_signals": stats.total_signals,
            "n_values": stats.total_values,
            "n_vapi_aliases": stats.total_vapi_aliases,
            "n_issues": len(issues),
        },
    )

    return CatalogIndex(
        dataset=dataset,
        meta=meta,
        frame_by_key=frame_by_key,
        stats=stats,
        buses=sorted(bus_set),
        modules=sorted(module_set),
        issues=tuple(issues),
    )


def build_index(
        dataset: Dataset,
        batch_size: int = DEFAULT_BATCH_SIZE,
        on_progress: Optional[Callable[[IndexProgress], None]] = None,
) -> CatalogIndex:
    """Drive iter_build_index() to completion, reporting each batch to `on_progress`."""
    builder = iter_build_index(dataset, batch_size)
    while True:
        try:
            progress = next(builder)
        except StopIteration as done:
            return done.value
        if on_progress is not None:
            on_progress(progress)
