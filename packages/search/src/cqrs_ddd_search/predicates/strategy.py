"""
Predicate compilation strategy.

Provides the ``PredicateOperator`` interface, a registry keyed by
:class:`FilterOperator`, and the ``CompiledPredicate`` result type.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from ..exceptions import FilterValidationError, UnsupportedOperatorError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy import ColumnElement

    from ..columns import ColumnRef
    from ..descriptors import FilterVariant
    from ..vocabulary import FilterOperator

V = TypeVar("V")


@dataclass(frozen=True)
class CompiledPredicate:
    """
    One parameterized boolean condition.

    ``clause`` only ever references the resolved column and named bind
    parameters; ``params`` maps each placeholder name to its bound value.
    """

    clause: ColumnElement[bool]
    params: Mapping[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str:
        """The fragment with named placeholders (default dialect)."""
        return str(self.clause.compile())


class PredicateOperator(ABC):
    """
    Strategy interface for compiling one filter variant into a
    :class:`CompiledPredicate`.
    """

    @property
    @abstractmethod
    def name(self) -> FilterOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def compile(
        self,
        column: ColumnRef,
        spec: FilterVariant,
        param: str,
    ) -> CompiledPredicate:
        """
        Build the predicate.

        Args:
            column: Resolved column reference.
            spec: Validated filter variant for this operator.
            param: Fresh bind-parameter name reserved for this filter.
        """
        ...

    def _expect(self, spec: FilterVariant, kind: type[V]) -> V:
        # The validator guarantees the shape; a mismatch here is a caller bug.
        if not isinstance(spec, kind):
            raise FilterValidationError(
                f"'{self.name.value}' filter on '{spec.field}' expects "
                f"{kind.__name__}, got {type(spec).__name__}"
            )
        return spec


class PredicateRegistry:
    """Registry of ``PredicateOperator`` instances keyed by operator."""

    def __init__(self) -> None:
        self._operators: dict[FilterOperator, PredicateOperator] = {}

    def register(self, operator: PredicateOperator) -> None:
        self._operators[operator.name] = operator

    def register_all(self, *operators: PredicateOperator) -> None:
        for op in operators:
            self.register(op)

    def get(self, name: FilterOperator) -> PredicateOperator | None:
        return self._operators.get(name)

    def has(self, name: FilterOperator) -> bool:
        return name in self._operators

    @property
    def supported_operators(self) -> set[FilterOperator]:
        return set(self._operators.keys())

    def compile(
        self,
        column: ColumnRef,
        spec: FilterVariant,
        param: str,
    ) -> CompiledPredicate:
        """
        Look up the operator and compile.

        Raises:
            UnsupportedOperatorError: If no strategy is registered.
        """
        op = self.get(spec.operator)
        if op is None:
            raise UnsupportedOperatorError(spec.operator.value, spec.field)
        return op.compile(column, spec, param)
