from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from can_browser.core.dataset import Frame, Signal, signal_key
from can_browser.core.filter_state import FrameFilterState
from can_browser.core.frame_query import query_frames
from can_browser.core.indexer import CatalogIndex, FrameMeta
from can_browser.core.pager import PageWindow, compute_page, navigate
from can_browser.core.selection import SelectionState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignalPage:
    """One rendered page of the selected frame's (filtered) signals."""
    frame: Frame
    meta: FrameMeta
    window: PageWindow
    signals: List[Signal]


class BrowserSession:
    """
    Explicit context for one browsing session: the shared read-only index,
    the active frame filters, the filtered frame list and the selection.

    The UI layer rebuilds one of these per request from its stores instead
    of keeping module-level state.
    """

    def __init__(
            self,
            index: CatalogIndex,
            filters: Optional[FrameFilterState] = None,
            selection: Optional[SelectionState] = None,
    ):
        self.index = index
        self.filters = filters or FrameFilterState()
        self.selection = selection or SelectionState()
        self.filtered_frames: List[Frame] = []
        self.apply_filters(self.filters)

    # ------------------------------------------------------------------
    # Frame list
    # ------------------------------------------------------------------
    def apply_filters(self, filters: FrameFilterState) -> List[Frame]:
        """Re-run the frame query and reconcile the selection against the result."""
        self.filters = filters
        self.filtered_frames = query_frames(self.index, filters)
        changed = self.selection.reconcile(
            self.index.meta(frame).key.token for frame in self.filtered_frames
        )
        if changed:
            logger.debug(
                "Selection moved after filter change",
                extra={"selected_key": self.selection.selected_key, "n_frames": len(self.filtered_frames)},
            )
        return self.filtered_frames

    def select_frame(self, key: str) -> bool:
        """Explicit selection of a known frame; unknown keys are ignored."""
        if self.index.get(key) is None:
            logger.warning("Ignoring selection of unknown frame %r", key)
            return False
        return self.selection.select(key)

    def selected_frame(self) -> Optional[Frame]:
        return self.index.get(self.selection.selected_key)

    def is_selected(self, frame: Frame) -> bool:
        return self.index.meta(frame).key.token == self.selection.selected_key

    # ------------------------------------------------------------------
    # Signal panel
    # ------------------------------------------------------------------
    def matching_signals(self) -> List[Signal]:
        frame = self.selected_frame()
        if frame is None:
            return []
        return self.index.signal_search.filter(frame.signals, self.selection.signal_query)

    def signal_page(self) -> Optional[SignalPage]:
        """
        Current page of the selected frame's signals, or None without a selection.

        The stored page number is clamped to the current match count.
        """
        frame = self.selected_frame()
        if frame is None:
            return None
        signals = self.matching_signals()
        window = compute_page(len(signals), self.selection.signal_page_size, self.selection.signal_page)
        self.selection.signal_page = window.page
        return SignalPage(
            frame=frame,
            meta=self.index.meta(frame),
            window=window,
            signals=signals[window.start:window.end],
        )

    def set_signal_query(self, query: Optional[str]) -> None:
        self.selection.set_signal_query(query)

    def set_page_size(self, size: Any) -> None:
        self.selection.set_page_size(size)

    def navigate_page(self, action: str) -> int:
        page = self.signal_page()
        if page is None:
            return self.selection.signal_page
        self.selection.signal_page = navigate(page.window.page, page.window.total_pages, action)
        return self.selection.signal_page

    def signal_key(self, signal: Signal) -> str:
        return signal_key(self.selection.selected_key or "", signal.signal_index)

    def toggle_signal(self, key: str) -> bool:
        return self.selection.toggle_expanded(key)
