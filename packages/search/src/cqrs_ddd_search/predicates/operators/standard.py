"""Equality and ordering comparison predicates."""

from __future__ import annotations

import operator as op_module
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import bindparam

from ...descriptors import ValueFilter
from ...vocabulary import FilterOperator
from ..strategy import CompiledPredicate, PredicateOperator

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.sql.elements import ColumnElement

    from ...columns import ColumnRef
    from ...descriptors import FilterVariant


class _ComparisonOperator(PredicateOperator):
    """Direct bind of ``value``; ordering semantics are the column's own."""

    _compare: Callable[[Any, Any], Any]

    def compile(
        self, column: ColumnRef, spec: FilterVariant, param: str
    ) -> CompiledPredicate:
        value = self._expect(spec, ValueFilter).value
        clause = type(self)._compare(column.expression, bindparam(param, value))
        return CompiledPredicate(cast("ColumnElement[bool]", clause), {param: value})


class EqualOperator(_ComparisonOperator):
    _compare = op_module.eq

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.EQUAL


class NotEqualOperator(_ComparisonOperator):
    _compare = op_module.ne

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_EQUAL


class GreaterThanOperator(_ComparisonOperator):
    _compare = op_module.gt

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GREATER_THAN


class GreaterEqualOperator(_ComparisonOperator):
    _compare = op_module.ge

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GREATER_EQUAL


class LessThanOperator(_ComparisonOperator):
    _compare = op_module.lt

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LESS_THAN


class LessEqualOperator(_ComparisonOperator):
    _compare = op_module.le

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LESS_EQUAL
