"""Pattern-matching predicates: LIKE family and regular expressions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import bindparam, func

from ...descriptors import ValueFilter
from ...vocabulary import FilterOperator
from ..strategy import CompiledPredicate, PredicateOperator

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement

    from ...columns import ColumnRef
    from ...descriptors import FilterVariant


class _PatternOperator(PredicateOperator):
    """
    Wrap ``value`` with wildcards and match it against the column.

    Subclasses set the wildcard placement and whether the match is
    case-insensitive or negated.
    """

    prefix: str = "%"
    suffix: str = "%"
    insensitive: bool = False
    negated: bool = False

    def compile(
        self, column: ColumnRef, spec: FilterVariant, param: str
    ) -> CompiledPredicate:
        pattern = f"{self.prefix}{self._expect(spec, ValueFilter).value}{self.suffix}"
        bound = bindparam(param, pattern)
        col: Any = column.expression
        if self.insensitive:
            clause = col.not_ilike(bound) if self.negated else col.ilike(bound)
        else:
            clause = col.not_like(bound) if self.negated else col.like(bound)
        return CompiledPredicate(cast("ColumnElement[bool]", clause), {param: pattern})


class LikeOperator(_PatternOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LIKE


class ILikeOperator(_PatternOperator):
    insensitive = True

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.ILIKE


class NotLikeOperator(_PatternOperator):
    negated = True

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_LIKE


class NotILikeOperator(_PatternOperator):
    insensitive = True
    negated = True

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_ILIKE


class StartsWithOperator(_PatternOperator):
    prefix = ""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.STARTS_WITH


class EndsWithOperator(_PatternOperator):
    suffix = ""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.ENDS_WITH


class ContainsOperator(_PatternOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.CONTAINS


class IContainsOperator(_PatternOperator):
    insensitive = True

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.ICONTAINS


class RegexOperator(PredicateOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.REGEXP

    def compile(
        self, column: ColumnRef, spec: FilterVariant, param: str
    ) -> CompiledPredicate:
        value = self._expect(spec, ValueFilter).value
        clause = column.expression.regexp_match(bindparam(param, value))
        return CompiledPredicate(cast("ColumnElement[bool]", clause), {param: value})


class IRegexOperator(PredicateOperator):
    """Both sides lower-cased, so it also works where regex flags are not."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IREGEXP

    def compile(
        self, column: ColumnRef, spec: FilterVariant, param: str
    ) -> CompiledPredicate:
        value = self._expect(spec, ValueFilter).value
        clause = func.lower(column.expression).regexp_match(
            func.lower(bindparam(param, value))
        )
        return CompiledPredicate(cast("ColumnElement[bool]", clause), {param: value})
