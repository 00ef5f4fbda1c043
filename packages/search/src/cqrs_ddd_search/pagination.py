"""
Page window and result metadata.

Both calculations are pure. Page parameters usually arrive as raw query
string values, so anything non-numeric or below one falls back to a safe
default rather than failing the request.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Any, NamedTuple

from .config import DEFAULT_SETTINGS, SearchSettings

# Largest offset every supported driver accepts as a bound integer.
_MAX_OFFSET = min(sys.maxsize, 2**63 - 1)


class PageWindow(NamedTuple):
    limit: int
    offset: int
    page: int


@dataclass(frozen=True)
class PaginationMeta:
    """
    Pagination metadata of one result page.

    ``from_`` and ``to`` are 1-based row positions of the first and last
    row of the page; both are 0 when there are no results.
    """

    current_page: int
    last_page: int
    per_page: int
    total: int
    from_: int
    to: int

    def to_dict(self) -> dict[str, int]:
        return {
            "current_page": self.current_page,
            "last_page": self.last_page,
            "per_page": self.per_page,
            "total": self.total,
            "from": self.from_,
            "to": self.to,
        }


def _to_number(raw: Any) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def compute_limits(
    page: Any,
    per_page: Any,
    default_size: int = DEFAULT_SETTINGS.default_page_size,
    max_size: int = DEFAULT_SETTINGS.max_page_size,
) -> PageWindow:
    """
    Normalise raw page parameters into ``limit``/``offset``.

    ``page`` below one or non-numeric becomes 1; ``per_page`` below one or
    non-numeric becomes *default_size*; ``limit`` is clamped to
    ``[1, max_size]``. ``page`` is capped so the offset still fits a 64-bit
    integer.
    """
    size_num = _to_number(per_page)
    size = int(math.floor(size_num)) if size_num is not None and size_num >= 1 else default_size
    limit = max(1, min(size, max_size))

    page_num = _to_number(page)
    current = int(math.floor(page_num)) if page_num is not None and page_num >= 1 else 1
    current = min(current, _MAX_OFFSET // limit)

    return PageWindow(limit=limit, offset=(current - 1) * limit, page=current)


def compute_meta(total: int, page: int, limit: int) -> PaginationMeta:
    """Derive page metadata; ``current_page`` is clamped to ``[1, last_page]``."""
    last_page = max(1, math.ceil(total / limit))
    current = min(max(1, page), last_page)
    from_ = 0 if total == 0 else (current - 1) * limit + 1
    to = min(current * limit, total)
    return PaginationMeta(
        current_page=current,
        last_page=last_page,
        per_page=limit,
        total=total,
        from_=from_,
        to=to,
    )


class PaginationCalculator:
    """``compute_limits``/``compute_meta`` bound to one :class:`SearchSettings`."""

    def __init__(self, settings: SearchSettings = DEFAULT_SETTINGS) -> None:
        self.settings = settings

    def limits(self, page: Any, per_page: Any) -> PageWindow:
        return compute_limits(
            page,
            per_page,
            self.settings.default_page_size,
            self.settings.max_page_size,
        )

    def meta(self, total: int, window: PageWindow) -> PaginationMeta:
        return compute_meta(total, window.page, window.limit)


__all__ = [
    "PageWindow",
    "PaginationCalculator",
    "PaginationMeta",
    "compute_limits",
    "compute_meta",
]
