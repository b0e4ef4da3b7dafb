from __future__ import annotations

from typing import List, Optional


def tokenize(text: Optional[str]) -> List[str]:
    """Lowercase, split on whitespace, drop empties."""
    return str(text or "").lower().split()
