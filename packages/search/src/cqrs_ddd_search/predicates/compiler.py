"""
Compile validated filters into parameterized SQLAlchemy predicates.

Uses the strategy pattern: each operator is an isolated class in
``operators/``, registered in a ``PredicateRegistry``. ``build_predicate``
narrows a descriptor into its closed variant and delegates to the
registry.

Bind names
----------
Filter ``i`` (0-based position in the request) reserves ``param_<i>``;
range operators derive ``start_param_<i>`` and ``end_param_<i>`` from it.
Names are therefore unique within one assembled statement.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, true

from ..descriptors import FilterDescriptor
from .operators import DEFAULT_PREDICATE_REGISTRY

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy import ColumnElement

    from ..columns import ColumnRef
    from ..descriptors import FilterVariant
    from .strategy import CompiledPredicate, PredicateRegistry


def param_name(index: int) -> str:
    return f"param_{index}"


def build_predicate(
    column: ColumnRef,
    descriptor: FilterDescriptor | FilterVariant,
    param: str,
    registry: PredicateRegistry | None = None,
) -> CompiledPredicate:
    """
    Build one predicate for an already validated filter.

    Args:
        column: Column reference resolved from the allow-listed field.
        descriptor: Client descriptor or its closed variant.
        param: Bind-parameter name reserved for this filter.
        registry: Optional custom operator registry. Falls back to
            ``DEFAULT_PREDICATE_REGISTRY``.

    Raises:
        FilterValidationError: If the operand shape does not match.
        UnsupportedOperatorError: If the operator has no compiled form.
        MalformedValueError: If a structured operand cannot be decoded.
    """
    variant = (
        descriptor.to_variant()
        if isinstance(descriptor, FilterDescriptor)
        else descriptor
    )
    reg = registry or DEFAULT_PREDICATE_REGISTRY
    return reg.compile(column, variant, param)


def conjoin(predicates: Iterable[CompiledPredicate]) -> ColumnElement[bool]:
    """AND every clause together; an empty input yields ``true()``."""
    clauses = [p.clause for p in predicates]
    if not clauses:
        return true()
    if len(clauses) == 1:
        return clauses[0]
    return and_(*clauses)


def merged_params(predicates: Iterable[CompiledPredicate]) -> dict[str, Any]:
    params: dict[str, Any] = {}
    for p in predicates:
        params.update(p.params)
    return params
