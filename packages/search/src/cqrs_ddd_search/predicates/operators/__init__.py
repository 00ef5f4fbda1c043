"""
Predicate operator implementations and default registry.

Usage::

    from cqrs_ddd_search.predicates.operators import DEFAULT_PREDICATE_REGISTRY

    predicate = DEFAULT_PREDICATE_REGISTRY.compile(column, variant, "param_0")
"""

from __future__ import annotations

from ..strategy import PredicateRegistry
from .array import ArrayContainsOperator, ArrayOverlapOperator
from .json import (
    JsonContainedOperator,
    JsonContainsOperator,
    JsonExtractOperator,
    JsonExtractTextOperator,
)
from .null import IsNotNullOperator, IsNullOperator
from .set import BetweenOperator, InOperator, NotBetweenOperator, NotInOperator
from .standard import (
    EqualOperator,
    GreaterEqualOperator,
    GreaterThanOperator,
    LessEqualOperator,
    LessThanOperator,
    NotEqualOperator,
)
from .string import (
    ContainsOperator,
    EndsWithOperator,
    IContainsOperator,
    ILikeOperator,
    IRegexOperator,
    LikeOperator,
    NotILikeOperator,
    NotLikeOperator,
    RegexOperator,
    StartsWithOperator,
)


def build_default_predicate_registry() -> PredicateRegistry:
    """Create a registry with every vocabulary operator."""
    registry = PredicateRegistry()
    registry.register_all(
        # Standard comparison
        EqualOperator(),
        NotEqualOperator(),
        GreaterThanOperator(),
        GreaterEqualOperator(),
        LessThanOperator(),
        LessEqualOperator(),
        # Set / range
        InOperator(),
        NotInOperator(),
        BetweenOperator(),
        NotBetweenOperator(),
        # String
        LikeOperator(),
        NotLikeOperator(),
        ILikeOperator(),
        NotILikeOperator(),
        ContainsOperator(),
        IContainsOperator(),
        StartsWithOperator(),
        EndsWithOperator(),
        RegexOperator(),
        IRegexOperator(),
        # Null
        IsNullOperator(),
        IsNotNullOperator(),
        # JSON
        JsonContainsOperator(),
        JsonContainedOperator(),
        JsonExtractOperator(),
        JsonExtractTextOperator(),
        # Array
        ArrayContainsOperator(),
        ArrayOverlapOperator(),
    )
    return registry


DEFAULT_PREDICATE_REGISTRY: PredicateRegistry = build_default_predicate_registry()

__all__ = [
    "DEFAULT_PREDICATE_REGISTRY",
    "PredicateRegistry",
    "build_default_predicate_registry",
]
