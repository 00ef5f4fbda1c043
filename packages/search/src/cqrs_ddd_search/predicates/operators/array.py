"""Array column predicates (PostgreSQL ``@>`` and ``&&``)."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import String, bindparam
from sqlalchemy.dialects.postgresql import ARRAY

from ...descriptors import ListFilter, ValueFilter
from ...vocabulary import FilterOperator
from ..strategy import CompiledPredicate, PredicateOperator

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement

    from ...columns import ColumnRef
    from ...descriptors import FilterVariant


class ArrayContainsOperator(PredicateOperator):
    """``column @> ARRAY[value]``"""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.ARRAY_CONTAINS

    def compile(
        self, column: ColumnRef, spec: FilterVariant, param: str
    ) -> CompiledPredicate:
        items = [self._expect(spec, ValueFilter).value]
        clause = column.expression.op("@>", is_comparison=True)(
            bindparam(param, items, type_=ARRAY(String))
        )
        return CompiledPredicate(cast("ColumnElement[bool]", clause), {param: items})


class ArrayOverlapOperator(PredicateOperator):
    """``column && ARRAY[values]``"""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.ARRAY_OVERLAP

    def compile(
        self, column: ColumnRef, spec: FilterVariant, param: str
    ) -> CompiledPredicate:
        items = list(self._expect(spec, ListFilter).values)
        clause = column.expression.op("&&", is_comparison=True)(
            bindparam(param, items, type_=ARRAY(String))
        )
        return CompiledPredicate(cast("ColumnElement[bool]", clause), {param: items})
