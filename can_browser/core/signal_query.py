from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from can_browser.core.dataset import Signal
from can_browser.core.tokens import tokenize


def build_signal_blob(signal: Signal) -> str:
    """Lowercase text of a signal's own fields plus every value's codes and label."""
    values = " ".join(
        f"{v.value_dec} {v.value_hex} {v.label or ''}" for v in signal.possible_values
    )
    return (
        f"{signal.signal_name} {signal.enum_map_symbol} {signal.possible_values_note} "
        f"{signal.vapi_alias} {signal.vapi_source} {values}"
    ).lower()


class SignalSearch:
    """
    Token filter over a frame's signals with a lazily filled blob cache.

    Most signals are never searched individually, so blobs are built on first
    use and kept for the lifetime of the owning index.
    """

    def __init__(self) -> None:
        self._blobs: Dict[Signal, str] = {}

    def blob(self, signal: Signal) -> str:
        cached = self._blobs.get(signal)
        if cached is not None:
            return cached
        blob = build_signal_blob(signal)
        self._blobs[signal] = blob
        return blob

    def is_cached(self, signal: Signal) -> bool:
        return signal in self._blobs

    def filter(self, signals: Sequence[Signal], query: Optional[str]) -> List[Signal]:
        """Signals whose blob contains every token, in their original order."""
        tokens = tokenize(query)
        if not tokens:
            return list(signals)
        return [
            signal
            for signal in signals
            if all(token in self.blob(signal) for token in tokens)
        ]
