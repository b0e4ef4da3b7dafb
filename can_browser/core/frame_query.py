from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from can_browser.core.dataset import Frame
from can_browser.core.filter_state import FrameFilterState, SortMode
from can_browser.core.indexer import CatalogIndex, FrameMeta
from can_browser.core.tokens import tokenize


def frame_matches(
        meta: FrameMeta,
        tokens: Sequence[str],
        bus: Optional[str] = None,
        module: Optional[str] = None,
        enumerated_only: bool = False,
) -> bool:
    """
    Categorical filters first (each one an AND condition, None = unconstrained),
    then every token must hit the search blob or the value-label blob.
    """
    if bus and meta.bus_label != bus:
        return False
    if module and meta.module != module:
        return False
    if enumerated_only and meta.enumerated_signal_count == 0:
        return False

    for token in tokens:
        if token in meta.search_blob:
            continue
        if meta.label_blob and token in meta.label_blob:
            continue
        return False
    return True


# -------------------------------------------------------------------------
# Sorting
#
# Every key ends with the full FrameKey so that distinct frames never tie.
# -------------------------------------------------------------------------
def _identity(meta: FrameMeta) -> Tuple[str, str, str]:
    return meta.key.frame_name, meta.key.bus_name, meta.key.bus_id


def _by_address(meta: FrameMeta) -> tuple:
    return (meta.key.address_dec, *_identity(meta))


def _by_name(meta: FrameMeta) -> tuple:
    return meta.key.frame_name, meta.key.address_dec, meta.key.bus_name, meta.key.bus_id


def _descending(counter: Callable[[FrameMeta], int]) -> Callable[[FrameMeta], tuple]:
    def key(meta: FrameMeta) -> tuple:
        return (-counter(meta), meta.key.address_dec, *_identity(meta))
    return key


_SORT_KEYS: Dict[str, Callable[[FrameMeta], tuple]] = {
    SortMode.ADDRESS: _by_address,
    SortMode.NAME: _by_name,
    SortMode.SIGNALS: _descending(lambda m: m.signal_count),
    SortMode.ENUMS: _descending(lambda m: m.enumerated_signal_count),
    SortMode.VAPI: _descending(lambda m: m.vapi_alias_count),
}


def sort_frames(frames: Iterable[Frame], index: CatalogIndex, mode: str = SortMode.ADDRESS) -> List[Frame]:
    """Return a new list of `frames` ordered by `mode`; unknown modes sort by address."""
    sort_key = _SORT_KEYS.get(mode, _by_address)
    return sorted(frames, key=lambda frame: sort_key(index.meta(frame)))


def query_frames(index: CatalogIndex, filters: FrameFilterState) -> List[Frame]:
    """
    Filter and order the indexed frames.

    Returns references to the indexed Frame records; an empty list is a
    valid "no matches" result.
    """
    tokens = tokenize(filters.query)
    matches = [
        frame
        for frame in index.frames
        if frame_matches(
            index.meta(frame),
            tokens,
            bus=filters.bus,
            module=filters.module,
            enumerated_only=filters.enumerated_only,
        )
    ]
    return sort_frames(matches, index, filters.sort_mode)
