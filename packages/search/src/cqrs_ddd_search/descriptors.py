"""
Request models: filter descriptors, sort and page parameters.

``FilterDescriptor`` is what a client sends. It is deliberately loose
(every operand optional) so the validator can report *all* problems at
once. Once validated, a descriptor is narrowed into one of the closed
variants below, each carrying exactly the operands its arity needs.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .exceptions import FilterValidationError
from .vocabulary import (
    Arity,
    FilterOperator,
    arity_of,
    parse_operator,
    split_value_list,
)

OPERANDS_BY_ARITY: dict[Arity, frozenset[str]] = {
    Arity.NONE: frozenset(),
    Arity.SINGLE: frozenset({"value"}),
    Arity.RANGE: frozenset({"range_start", "range_end"}),
    Arity.LIST: frozenset({"value_list"}),
}


def _to_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    return value


class FilterDescriptor(BaseModel):
    """
    One client-requested condition.

    Accepts both the canonical names and the legacy wire names
    (``search_by``, ``filter_type``, ``search_query``, ``start_value``,
    ``end_value``, ``values_list``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field: str = Field(default="", validation_alias=AliasChoices("field", "search_by"))
    operator: str = Field(
        default="", validation_alias=AliasChoices("operator", "filter_type")
    )
    value: str | None = Field(
        default=None, validation_alias=AliasChoices("value", "search_query")
    )
    range_start: str | None = Field(
        default=None, validation_alias=AliasChoices("range_start", "start_value")
    )
    range_end: str | None = Field(
        default=None, validation_alias=AliasChoices("range_end", "end_value")
    )
    value_list: str | None = Field(
        default=None, validation_alias=AliasChoices("value_list", "values_list")
    )

    @field_validator("field", mode="before")
    @classmethod
    def _field_text(cls, v: Any) -> Any:
        return "" if v is None else _to_text(v)

    @field_validator("operator", mode="before")
    @classmethod
    def _operator_text(cls, v: Any) -> Any:
        if isinstance(v, FilterOperator):
            return v.value
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @field_validator("value", mode="before")
    @classmethod
    def _value_text(cls, v: Any) -> Any:
        # Structured payloads for the JSON operators may arrive already decoded.
        if isinstance(v, dict | list):
            return json.dumps(v)
        return _to_text(v)

    @field_validator("range_start", "range_end", mode="before")
    @classmethod
    def _range_text(cls, v: Any) -> Any:
        return _to_text(v)

    @field_validator("value_list", mode="before")
    @classmethod
    def _list_text(cls, v: Any) -> Any:
        if isinstance(v, list | tuple):
            return ",".join(str(_to_text(item)) for item in v if item is not None)
        return _to_text(v)

    # -- derived views ------------------------------------------------------

    @property
    def kind(self) -> FilterOperator | None:
        """The vocabulary operator, or ``None`` if the client sent an unknown one."""
        return parse_operator(self.operator)

    @property
    def values(self) -> list[str]:
        """``value_list`` split on commas, trimmed, empties dropped."""
        return split_value_list(self.value_list)

    def present_operands(self) -> set[str]:
        """Names of the operand fields the client actually filled in."""
        present: set[str] = set()
        if self.value:
            present.add("value")
        if self.range_start:
            present.add("range_start")
        if self.range_end:
            present.add("range_end")
        if self.values:
            present.add("value_list")
        return present

    def to_variant(self) -> FilterVariant:
        """
        Narrow into the closed variant for this operator.

        Raises:
            FilterValidationError: If the operator is unknown or the
                operands do not match its arity.
        """
        op = self.kind
        if op is None:
            raise FilterValidationError(f"Unknown filter type '{self.operator}'")
        arity = arity_of(op)
        missing = OPERANDS_BY_ARITY[arity] - self.present_operands()
        if missing:
            raise FilterValidationError(
                f"'{op.value}' filter on '{self.field}' is missing "
                f"{', '.join(sorted(missing))}"
            )
        if arity is Arity.SINGLE:
            return ValueFilter(self.field, op, self.value or "")
        if arity is Arity.RANGE:
            return RangeFilter(self.field, op, self.range_start or "", self.range_end or "")
        if arity is Arity.LIST:
            return ListFilter(self.field, op, tuple(self.values))
        return NullFilter(self.field, op)


# ---------------------------------------------------------------------------
# Closed filter variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ValueFilter:
    """Operator with exactly one operand."""

    field: str
    operator: FilterOperator
    value: str


@dataclass(frozen=True)
class RangeFilter:
    """Operator with a start and an end operand."""

    field: str
    operator: FilterOperator
    start: str
    end: str


@dataclass(frozen=True)
class ListFilter:
    """Operator with a non-empty ordered list of operands."""

    field: str
    operator: FilterOperator
    values: tuple[str, ...]


@dataclass(frozen=True)
class NullFilter:
    """Operator without operands."""

    field: str
    operator: FilterOperator


FilterVariant = Union[ValueFilter, RangeFilter, ListFilter, NullFilter]


# ---------------------------------------------------------------------------
# Sort / page / whole request
# ---------------------------------------------------------------------------


class SortRequest(BaseModel):
    """Client sort parameters; both optional."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field: str | None = Field(
        default=None, validation_alias=AliasChoices("field", "sort_by")
    )
    order: str | None = Field(
        default=None, validation_alias=AliasChoices("order", "sort_order")
    )


class PaginationRequest(BaseModel):
    """Client page parameters, kept raw; normalised by ``compute_limits``."""

    model_config = ConfigDict(frozen=True)

    page: int | float | str | None = None
    per_page: int | float | str | None = None


class SearchRequest(BaseModel):
    """Filters, sort and page parameters of one search request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    filters: list[FilterDescriptor] = Field(default_factory=list)
    sort_by: str | None = None
    sort_order: str | None = None
    page: int | float | str | None = None
    per_page: int | float | str | None = None

    @field_validator("filters", mode="before")
    @classmethod
    def _filters_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def sort(self) -> SortRequest:
        return SortRequest(field=self.sort_by, order=self.sort_order)

    @property
    def pagination(self) -> PaginationRequest:
        return PaginationRequest(page=self.page, per_page=self.per_page)

    @classmethod
    def from_query_params(
        cls,
        params: dict[str, Any],
        *,
        syntax: Any = None,
        filter_key: str = "filters",
    ) -> SearchRequest:
        """
        Build a request from flat query parameters.

        ``filters`` may already be a list of dicts, or a string parsed by
        *syntax* (defaults to :class:`~cqrs_ddd_search.syntax.JsonFilterSyntax`).
        """
        from .syntax import JsonFilterSyntax

        raw_filters = params.get(filter_key)
        if isinstance(raw_filters, str):
            parser = syntax or JsonFilterSyntax()
            filters: Any = parser.parse_filters(raw_filters)
        else:
            filters = raw_filters or []
        return cls(
            filters=filters,
            sort_by=params.get("sort_by"),
            sort_order=params.get("sort_order"),
            page=params.get("page"),
            per_page=params.get("per_page"),
        )


__all__ = [
    "OPERANDS_BY_ARITY",
    "FilterDescriptor",
    "FilterVariant",
    "ListFilter",
    "NullFilter",
    "PaginationRequest",
    "RangeFilter",
    "SearchRequest",
    "SortRequest",
    "ValueFilter",
]
