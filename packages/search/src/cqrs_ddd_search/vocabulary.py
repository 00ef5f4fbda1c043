"""
Filter vocabulary: the closed set of operators a client may request.

Every operator declares the shape of operands it needs (its *arity*).
The validator checks descriptors against that shape before anything is
compiled, and the predicate compiler relies on it afterwards.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping


class FilterOperator(str, Enum):
    """Supported filter operators (values are the wire names)."""

    # Equality
    EQUAL = "equal"
    NOT_EQUAL = "not_equal"

    # Pattern matching
    LIKE = "like"
    ILIKE = "ilike"
    NOT_LIKE = "not_like"
    NOT_ILIKE = "not_ilike"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    CONTAINS = "contains"
    ICONTAINS = "icontains"

    # Ordering comparison
    GREATER_THAN = "greater_than"
    GREATER_EQUAL = "greater_equal"
    LESS_THAN = "less_than"
    LESS_EQUAL = "less_equal"

    # Range
    BETWEEN = "between"
    NOT_BETWEEN = "not_between"

    # Set membership
    IN = "in"
    NOT_IN = "not_in"

    # Null checks
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"

    # Regular expressions
    REGEXP = "regexp"
    IREGEXP = "iregexp"

    # Structured (JSON) values
    JSON_CONTAINS = "json_contains"
    JSON_CONTAINED = "json_contained"
    JSON_EXTRACT = "json_extract"
    JSON_EXTRACT_TEXT = "json_extract_text"

    # Arrays
    ARRAY_CONTAINS = "array_contains"
    ARRAY_OVERLAP = "array_overlap"


class Arity(str, Enum):
    """Operand shape required by an operator."""

    NONE = "none"
    SINGLE = "single-value"
    RANGE = "range"
    LIST = "list"


_ARITY: Mapping[FilterOperator, Arity] = MappingProxyType(
    {
        FilterOperator.EQUAL: Arity.SINGLE,
        FilterOperator.NOT_EQUAL: Arity.SINGLE,
        FilterOperator.LIKE: Arity.SINGLE,
        FilterOperator.ILIKE: Arity.SINGLE,
        FilterOperator.NOT_LIKE: Arity.SINGLE,
        FilterOperator.NOT_ILIKE: Arity.SINGLE,
        FilterOperator.STARTS_WITH: Arity.SINGLE,
        FilterOperator.ENDS_WITH: Arity.SINGLE,
        FilterOperator.CONTAINS: Arity.SINGLE,
        FilterOperator.ICONTAINS: Arity.SINGLE,
        FilterOperator.GREATER_THAN: Arity.SINGLE,
        FilterOperator.GREATER_EQUAL: Arity.SINGLE,
        FilterOperator.LESS_THAN: Arity.SINGLE,
        FilterOperator.LESS_EQUAL: Arity.SINGLE,
        FilterOperator.BETWEEN: Arity.RANGE,
        FilterOperator.NOT_BETWEEN: Arity.RANGE,
        FilterOperator.IN: Arity.LIST,
        FilterOperator.NOT_IN: Arity.LIST,
        FilterOperator.IS_NULL: Arity.NONE,
        FilterOperator.IS_NOT_NULL: Arity.NONE,
        FilterOperator.REGEXP: Arity.SINGLE,
        FilterOperator.IREGEXP: Arity.SINGLE,
        FilterOperator.JSON_CONTAINS: Arity.SINGLE,
        FilterOperator.JSON_CONTAINED: Arity.SINGLE,
        FilterOperator.JSON_EXTRACT: Arity.SINGLE,
        FilterOperator.JSON_EXTRACT_TEXT: Arity.SINGLE,
        FilterOperator.ARRAY_CONTAINS: Arity.SINGLE,
        FilterOperator.ARRAY_OVERLAP: Arity.LIST,
    }
)

# Declared in the vocabulary but never compiled.
UNSUPPORTED_OPERATORS: frozenset[FilterOperator] = frozenset(
    {FilterOperator.JSON_EXTRACT, FilterOperator.JSON_EXTRACT_TEXT}
)

# Tokens that front-ends send when a JS value was stringified by accident.
SENTINEL_TOKENS: frozenset[str] = frozenset({"NaN", "undefined", "null"})


def arity_of(operator: FilterOperator) -> Arity:
    """Return the operand shape *operator* requires."""
    return _ARITY[operator]


def parse_operator(raw: Any) -> FilterOperator | None:
    """Resolve *raw* to a :class:`FilterOperator`, or ``None`` if unknown."""
    if isinstance(raw, FilterOperator):
        return raw
    if not isinstance(raw, str):
        return None
    try:
        return FilterOperator(raw.strip().lower())
    except ValueError:
        return None


def is_usable_name(name: Any) -> bool:
    """``True`` when *name* is a non-blank string and not a sentinel token."""
    return isinstance(name, str) and bool(name.strip()) and name not in SENTINEL_TOKENS


def split_value_list(raw: str | None) -> list[str]:
    """Split a comma-separated list, trimming entries and dropping empties.

    ``"a, b ,c"`` becomes ``["a", "b", "c"]``; order is preserved.
    """
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


__all__ = [
    "Arity",
    "FilterOperator",
    "SENTINEL_TOKENS",
    "UNSUPPORTED_OPERATORS",
    "arity_of",
    "is_usable_name",
    "parse_operator",
    "split_value_list",
]
