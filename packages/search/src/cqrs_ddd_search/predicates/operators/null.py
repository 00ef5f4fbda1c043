"""Null check predicates for SQLAlchemy."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from ...descriptors import NullFilter
from ...vocabulary import FilterOperator
from ..strategy import CompiledPredicate, PredicateOperator

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement

    from ...columns import ColumnRef
    from ...descriptors import FilterVariant


class IsNullOperator(PredicateOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IS_NULL

    def compile(
        self, column: ColumnRef, spec: FilterVariant, param: str
    ) -> CompiledPredicate:
        self._expect(spec, NullFilter)
        return CompiledPredicate(cast("ColumnElement[bool]", column.expression.is_(None)))


class IsNotNullOperator(PredicateOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IS_NOT_NULL

    def compile(
        self, column: ColumnRef, spec: FilterVariant, param: str
    ) -> CompiledPredicate:
        self._expect(spec, NullFilter)
        return CompiledPredicate(
            cast("ColumnElement[bool]", column.expression.is_not(None))
        )
