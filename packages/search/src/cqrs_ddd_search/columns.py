"""
Column references resolved from a mapped entity.

Field names coming from clients are never placed into query text. A name
is first checked against the allow-list and then looked up among the
mapped column attributes of the (aliased) entity; the resulting ORM
attribute is what predicates and ORDER BY clauses are built from.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import aliased

from .exceptions import FieldNotFoundError, FilterValidationError

if TYPE_CHECKING:
    from .whitelist import FieldWhitelist


@dataclass(frozen=True)
class ColumnRef:
    """A mapped attribute of the search entity, bound to its alias."""

    name: str
    alias: str
    expression: Any

    @property
    def qualified_name(self) -> str:
        return f"{self.alias}.{self.name}"


class ColumnResolver:
    """
    Resolve field names to :class:`ColumnRef` objects for one entity.

    Args:
        model: Mapped SQLAlchemy model class.
        alias: Name of the alias the search statement selects from.
    """

    def __init__(self, model: type[Any], alias: str = "entity") -> None:
        self.model = model
        self.alias = alias
        self.entity: Any = aliased(model, name=alias)
        mapper = sa_inspect(model)
        self._names: frozenset[str] = frozenset(
            attr.key for attr in mapper.column_attrs
        )

    @property
    def mapped_names(self) -> frozenset[str]:
        return self._names

    def has(self, field: str) -> bool:
        return field in self._names

    def lookup(self, field: str) -> ColumnRef:
        """
        Resolve *field* without an allow-list check.

        Used for server-side configured names (default sort, soft delete).

        Raises:
            FieldNotFoundError: If *field* is not a mapped column attribute.
        """
        if field not in self._names:
            raise FieldNotFoundError(field, self.model.__name__, sorted(self._names))
        return ColumnRef(field, self.alias, getattr(self.entity, field))

    def resolve(self, field: str, whitelist: FieldWhitelist) -> ColumnRef:
        """
        Resolve a client-supplied *field* for filtering.

        Raises:
            FilterValidationError: If the field is not searchable.
            FieldNotFoundError: If it is allow-listed but not mapped.
        """
        if not whitelist.is_searchable(field):
            raise FilterValidationError(f"'{field}' is not an allowed search field")
        return self.lookup(field)


__all__ = ["ColumnRef", "ColumnResolver"]
