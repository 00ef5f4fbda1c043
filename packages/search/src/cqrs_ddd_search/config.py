"""SearchSettings: page sizes, default ordering, scoping and strictness."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any

from .sorting import SortOrder

if TYPE_CHECKING:
    from collections.abc import Mapping

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

# Dotted configuration keys accepted by ``SearchSettings.from_mapping``.
_KEYS: dict[str, str] = {
    "pagination.default_page_size": "default_page_size",
    "pagination.defaultPageSize": "default_page_size",
    "pagination.max_page_size": "max_page_size",
    "pagination.maxPageSize": "max_page_size",
    "sort.default_field": "default_sort_field",
    "sort.default_order": "default_sort_order",
    "search.soft_delete_field": "soft_delete_field",
    "search.strict": "strict",
}


@dataclass(frozen=True)
class SearchSettings:
    """
    Immutable engine configuration, shared read-only between requests.

    Attributes:
        default_page_size: Page size used when the client sends none or an
            invalid one.
        max_page_size: Upper bound for the page size.
        default_sort_field: Attribute ordered by when the client sort is
            absent or not allowed.
        default_sort_order: Direction for the default sort.
        soft_delete_field: When set and present on the model, rows where
            this attribute is not NULL are excluded from every search.
        strict: Reject the whole request on the first invalid filter
            (``True``) or skip invalid filters and report them as
            diagnostics (``False``).
    """

    default_page_size: int = 10
    max_page_size: int = 100
    default_sort_field: str = "created_at"
    default_sort_order: SortOrder = SortOrder.DESC
    soft_delete_field: str | None = None
    strict: bool = True

    def __post_init__(self) -> None:
        if self.max_page_size < 1:
            raise ValueError("max_page_size must be at least 1")
        if not 1 <= self.default_page_size <= self.max_page_size:
            raise ValueError(
                "default_page_size must be between 1 and max_page_size "
                f"({self.default_page_size} / {self.max_page_size})"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SearchSettings:
        """
        Build settings from a flat mapping of dotted keys or field names.

        Unknown keys are ignored; missing keys keep their defaults::

            SearchSettings.from_mapping({
                "pagination.default_page_size": "25",
                "pagination.max_page_size": 200,
                "search.strict": "false",
            })
        """
        names = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, raw in data.items():
            name = _KEYS.get(key, key)
            if name not in names or raw is None:
                continue
            kwargs[name] = _convert(name, raw)
        return cls(**kwargs)


def _convert(name: str, raw: Any) -> Any:
    if name in ("default_page_size", "max_page_size"):
        return int(raw)
    if name == "default_sort_order":
        return SortOrder.parse(raw) or SortOrder.DESC
    if name == "strict":
        if isinstance(raw, bool):
            return raw
        text = str(raw).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        raise ValueError(f"Invalid boolean for 'strict': {raw!r}")
    return str(raw)


DEFAULT_SETTINGS = SearchSettings()

__all__ = ["DEFAULT_SETTINGS", "SearchSettings"]
