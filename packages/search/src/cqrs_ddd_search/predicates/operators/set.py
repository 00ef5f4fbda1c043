"""Range and set-membership predicates: between, not_between, in, not_in."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import bindparam

from ...descriptors import ListFilter, RangeFilter
from ...vocabulary import FilterOperator
from ..strategy import CompiledPredicate, PredicateOperator

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement

    from ...columns import ColumnRef
    from ...descriptors import FilterVariant


class BetweenOperator(PredicateOperator):
    """Inclusive range; binds ``start_<param>`` and ``end_<param>``."""

    negated = False

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.BETWEEN

    def compile(
        self, column: ColumnRef, spec: FilterVariant, param: str
    ) -> CompiledPredicate:
        rng = self._expect(spec, RangeFilter)
        start_name, end_name = f"start_{param}", f"end_{param}"
        clause = column.expression.between(
            bindparam(start_name, rng.start), bindparam(end_name, rng.end)
        )
        if self.negated:
            clause = ~clause
        return CompiledPredicate(
            cast("ColumnElement[bool]", clause),
            {start_name: rng.start, end_name: rng.end},
        )


class NotBetweenOperator(BetweenOperator):
    negated = True

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_BETWEEN


class InOperator(PredicateOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IN

    def compile(
        self, column: ColumnRef, spec: FilterVariant, param: str
    ) -> CompiledPredicate:
        values = list(self._expect(spec, ListFilter).values)
        clause = column.expression.in_(bindparam(param, values, expanding=True))
        return CompiledPredicate(cast("ColumnElement[bool]", clause), {param: values})


class NotInOperator(PredicateOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_IN

    def compile(
        self, column: ColumnRef, spec: FilterVariant, param: str
    ) -> CompiledPredicate:
        values = list(self._expect(spec, ListFilter).values)
        clause = column.expression.not_in(bindparam(param, values, expanding=True))
        return CompiledPredicate(cast("ColumnElement[bool]", clause), {param: values})
