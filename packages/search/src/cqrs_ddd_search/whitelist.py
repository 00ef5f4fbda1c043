"""FieldWhitelist: per-resource searchable/sortable fields and operators."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .vocabulary import FilterOperator, is_usable_name, parse_operator

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Mapping


class FieldWhitelist:
    """
    Per-resource allow-lists.

    Every field is immutable once built, so one instance can be shared by
    all concurrent requests against a resource.

    Args:
        searchable_fields: Field names clients may filter on.
        sortable_fields: Field names clients may order by.
        field_operators: Optional per-field restriction of operators; a
            field missing from this mapping accepts every operator.
    """

    def __init__(
        self,
        *,
        searchable_fields: Iterable[str] = (),
        sortable_fields: Iterable[str] = (),
        field_operators: Mapping[str, Iterable[FilterOperator | str]] | None = None,
    ) -> None:
        self.searchable_fields: frozenset[str] = frozenset(searchable_fields)
        self.sortable_fields: frozenset[str] = frozenset(sortable_fields)
        restrictions: dict[str, frozenset[FilterOperator]] = {}
        for field, ops in (field_operators or {}).items():
            parsed = {parse_operator(op) for op in ops}
            if None in parsed:
                raise ValueError(f"Unknown operator in restriction for {field!r}")
            restrictions[field] = frozenset(op for op in parsed if op is not None)
        self._field_operators = restrictions

    @classmethod
    def coerce(
        cls, allowed: FieldWhitelist | Collection[str], *, sortable: bool = False
    ) -> FieldWhitelist:
        """Wrap a plain collection of names; pass a whitelist through."""
        if isinstance(allowed, FieldWhitelist):
            return allowed
        if sortable:
            return cls(sortable_fields=allowed)
        return cls(searchable_fields=allowed)

    def is_searchable(self, field: str) -> bool:
        return is_usable_name(field) and field in self.searchable_fields

    def is_sortable(self, field: str | None) -> bool:
        return is_usable_name(field) and field in self.sortable_fields

    def allows_operator(self, field: str, operator: FilterOperator) -> bool:
        allowed = self._field_operators.get(field)
        return allowed is None or operator in allowed


__all__ = ["FieldWhitelist"]
