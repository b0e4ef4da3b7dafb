"""
Core domain layer: raw catalog model, indexer, frame/signal query engines,
pager and selection state
"""

from .dataset import Dataset, Frame, FrameKey, PossibleValue, Signal
from .filter_state import FrameFilterState, SortMode
from .frame_query import query_frames
from .indexer import CatalogIndex, build_index, module_name
from .pager import compute_page
from .selection import SelectionState

__all__ = [
    "Dataset",
    "Frame",
    "FrameKey",
    "PossibleValue",
    "Signal",
    "FrameFilterState",
    "SortMode",
    "query_frames",
    "CatalogIndex",
    "build_index",
    "module_name",
    "compute_page",
    "SelectionState",
]
