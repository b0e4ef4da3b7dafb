from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Set

from can_browser.core.pager import DEFAULT_PAGE_SIZE, normalise_page_size


@dataclass
class SelectionState:
    """
    Active frame plus the signal-panel state that hangs off it.

    Fields:

    - selected_key: token of the selected frame, None when nothing is selected
    - signal_page: 1-based page of the signal table (clamped at render time)
    - signal_page_size: rows per signal page
    - signal_query: free text filtering the selected frame's signals
    - expanded: signal keys ("<frame-token>:<signal_index>") whose value tables are open

    """

    selected_key: Optional[str] = None
    signal_page: int = 1
    signal_page_size: int = DEFAULT_PAGE_SIZE
    signal_query: str = ""
    expanded: Set[str] = field(default_factory=set)

    @property
    def has_selection(self) -> bool:
        return self.selected_key is not None

    def select(self, key: str) -> bool:
        """
        Explicit user selection. Re-selecting the active frame is a no-op.

        Returns True if the selection changed.
        """
        if key == self.selected_key:
            return False
        self.selected_key = key
        self.signal_page = 1
        self.signal_query = ""
        self.expanded.clear()
        return True

    def reconcile(self, visible_keys: Iterable[str]) -> bool:
        """
        Keep the selection pointing at a frame in the new filtered list.

        - selected frame still visible: nothing changes (page and expansion kept)
        - otherwise the first visible frame is selected, page 1, expansion cleared
        - empty list: no selection

        Returns True if the selection changed.
        """
        keys = list(visible_keys)
        if not keys:
            changed = self.selected_key is not None
            self.selected_key = None
            return changed
        if self.selected_key is not None and self.selected_key in keys:
            return False
        self.selected_key = keys[0]
        self.signal_page = 1
        self.expanded.clear()
        return True

    def toggle_expanded(self, signal_key: str) -> bool:
        """Flip one signal row open/closed; returns True if it is now expanded."""
        if signal_key in self.expanded:
            self.expanded.discard(signal_key)
            return False
        self.expanded.add(signal_key)
        return True

    def is_expanded(self, signal_key: str) -> bool:
        return signal_key in self.expanded

    def set_signal_query(self, query: Optional[str]) -> None:
        self.signal_query = query or ""
        self.signal_page = 1
        self.expanded.clear()

    def set_page_size(self, size: Any) -> None:
        self.signal_page_size = normalise_page_size(size)
        self.signal_page = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selected_key": self.selected_key,
            "signal_page": self.signal_page,
            "signal_page_size": self.signal_page_size,
            "signal_query": self.signal_query,
            "expanded": sorted(self.expanded),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> SelectionState:
        if not isinstance(data, dict):
            return cls()
        try:
            page = max(1, int(data.get("signal_page") or 1))
        except (TypeError, ValueError):
            page = 1
        return cls(
            selected_key=data.get("selected_key") or None,
            signal_page=page,
            signal_page_size=normalise_page_size(data.get("signal_page_size")),
            signal_query=str(data.get("signal_query") or ""),
            expanded=set(data.get("expanded") or []),
        )
