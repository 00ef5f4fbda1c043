"""Predicate compilation: operator strategies, registry and builder."""

from __future__ import annotations

from .compiler import build_predicate, conjoin, merged_params, param_name
from .operators import DEFAULT_PREDICATE_REGISTRY, build_default_predicate_registry
from .strategy import CompiledPredicate, PredicateOperator, PredicateRegistry

__all__ = [
    "DEFAULT_PREDICATE_REGISTRY",
    "CompiledPredicate",
    "PredicateOperator",
    "PredicateRegistry",
    "build_default_predicate_registry",
    "build_predicate",
    "conjoin",
    "merged_params",
    "param_name",
]
