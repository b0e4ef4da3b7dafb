from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any


class SortMode:
    ADDRESS = "address"
    NAME = "name"
    SIGNALS = "signals"
    ENUMS = "enums"
    VAPI = "vapi"

    ALL = (ADDRESS, NAME, SIGNALS, ENUMS, VAPI)
    LABELS = {
        ADDRESS: "Address",
        NAME: "Frame name",
        SIGNALS: "Signal count",
        ENUMS: "Enumerated signals",
        VAPI: "VAPI aliases",
    }


@dataclass
class FrameFilterState:
    """
    Represents the current frame-list filters.

    Fields:

    - query: free text; whitespace-separated tokens, all must match
    - bus: exact bus label "<bus_name> (<bus_id>)", None for any bus
    - module: exact module name, None for any module
    - enumerated_only: keep only frames with at least one enumerated signal
    - sort_mode: one of SortMode.ALL

    """

    query: str = ""
    bus: Optional[str] = None
    module: Optional[str] = None
    enumerated_only: bool = False
    sort_mode: str = SortMode.ADDRESS

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FrameFilterState:
        sort_mode = data.get("sort_mode") or SortMode.ADDRESS
        return cls(
            query=str(data.get("query") or ""),
            bus=data.get("bus") or None,
            module=data.get("module") or None,
            enumerated_only=bool(data.get("enumerated_only", False)),
            sort_mode=sort_mode if sort_mode in SortMode.ALL else SortMode.ADDRESS,
        )
