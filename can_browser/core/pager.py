from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

DEFAULT_PAGE_SIZE = 200
PAGE_SIZE_OPTIONS = (50, 100, 200, 500)


class PageAction:
    FIRST = "first"
    PREV = "prev"
    NEXT = "next"
    LAST = "last"

    ALL = (FIRST, PREV, NEXT, LAST)


@dataclass(frozen=True)
class PageWindow:
    """
    Clamped page over a filtered sequence: items[start:end] is the visible slice.
    """
    page: int
    total_pages: int
    page_size: int
    total: int
    start: int
    end: int

    @property
    def first_item(self) -> int:
        """1-based number of the first visible item, 0 when there is nothing to show."""
        return 0 if self.total == 0 else self.start + 1

    @property
    def last_item(self) -> int:
        return 0 if self.total == 0 else self.end

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def total_pages(total: int, page_size: int) -> int:
    return max(1, math.ceil(total / page_size))


def compute_page(total: int, page_size: int = DEFAULT_PAGE_SIZE, requested: int = 1) -> PageWindow:
    """
    Clamp `requested` into [1, total_pages] and return the matching window.

    Call again whenever `total` or `page_size` changes; a page that was valid
    before a narrower filter gets pulled back to the last page.

    Raises:
        ValueError: if total is negative or page_size is not positive
    """
    if total < 0:
        raise ValueError(f"total must be >= 0, got {total}")
    if page_size <= 0:
        raise ValueError(f"page_size must be > 0, got {page_size}")

    pages = total_pages(total, page_size)
    page = min(max(int(requested), 1), pages)
    start = (page - 1) * page_size
    end = min(total, start + page_size)
    return PageWindow(
        page=page,
        total_pages=pages,
        page_size=page_size,
        total=total,
        start=start,
        end=end,
    )


def navigate(page: int, pages: int, action: str) -> int:
    """Apply a first/prev/next/last action and clamp the result."""
    if action == PageAction.FIRST:
        target = 1
    elif action == PageAction.PREV:
        target = page - 1
    elif action == PageAction.NEXT:
        target = page + 1
    elif action == PageAction.LAST:
        target = pages
    else:
        raise ValueError(f"Unknown page action '{action}'")
    return min(max(target, 1), max(pages, 1))


def normalise_page_size(value: Any, default: int = DEFAULT_PAGE_SIZE) -> int:
    """Untrusted UI value -> positive page size, falling back to `default`."""
    if isinstance(value, bool):
        return default
    try:
        size = int(value)
    except (TypeError, ValueError):
        return default
    return size if size > 0 else default
