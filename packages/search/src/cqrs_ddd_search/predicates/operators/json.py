"""JSON document predicates.

Containment uses the PostgreSQL JSONB operators ``@>`` and ``<@``. The
value is decoded client-side and bound as a JSONB parameter; it is never
spliced into the statement text.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import bindparam
from sqlalchemy.dialects.postgresql import JSONB

from ...descriptors import ValueFilter
from ...exceptions import MalformedValueError, UnsupportedOperatorError
from ...vocabulary import FilterOperator
from ..strategy import CompiledPredicate, PredicateOperator

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement

    from ...columns import ColumnRef
    from ...descriptors import FilterVariant


class _JsonContainmentOperator(PredicateOperator):
    sql_operator: str = "@>"

    def compile(
        self, column: ColumnRef, spec: FilterVariant, param: str
    ) -> CompiledPredicate:
        flt = self._expect(spec, ValueFilter)
        document = self._decode(flt)
        clause = column.expression.op(self.sql_operator, is_comparison=True)(
            bindparam(param, document, type_=JSONB)
        )
        return CompiledPredicate(cast("ColumnElement[bool]", clause), {param: document})

    def _decode(self, flt: ValueFilter) -> Any:
        try:
            return json.loads(flt.value)
        except json.JSONDecodeError as e:
            raise MalformedValueError(
                flt.field, flt.operator.value, flt.value, f"invalid JSON ({e.msg})"
            ) from e


class JsonContainsOperator(_JsonContainmentOperator):
    """``column @> :param``"""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.JSON_CONTAINS


class JsonContainedOperator(_JsonContainmentOperator):
    """``column <@ :param``"""

    sql_operator = "<@"

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.JSON_CONTAINED


class _PathExtractionOperator(PredicateOperator):
    """Path extraction has no agreed value shape yet; always refused."""

    def compile(
        self, column: ColumnRef, spec: FilterVariant, param: str
    ) -> CompiledPredicate:
        raise UnsupportedOperatorError(self.name.value, spec.field)


class JsonExtractOperator(_PathExtractionOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.JSON_EXTRACT


class JsonExtractTextOperator(_PathExtractionOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.JSON_EXTRACT_TEXT
