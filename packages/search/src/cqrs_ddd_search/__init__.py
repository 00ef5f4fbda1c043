"""Declarative filter, sort and pagination queries over SQLAlchemy models."""

from __future__ import annotations

from .assembler import AssembledQuery, QueryAssembler, SearchPage
from .columns import ColumnRef, ColumnResolver
from .config import DEFAULT_SETTINGS, SearchSettings
from .descriptors import (
    FilterDescriptor,
    FilterVariant,
    ListFilter,
    NullFilter,
    PaginationRequest,
    RangeFilter,
    SearchRequest,
    SortRequest,
    ValueFilter,
)
from .diagnostics import (
    CollectingDiagnosticSink,
    Diagnostic,
    DiagnosticSink,
    LoggingDiagnosticSink,
    NullDiagnosticSink,
)
from .exceptions import (
    FieldNotFoundError,
    FilterValidationError,
    MalformedValueError,
    SearchError,
    StorageExecutionError,
    UnsupportedOperatorError,
)
from .pagination import (
    PageWindow,
    PaginationCalculator,
    PaginationMeta,
    compute_limits,
    compute_meta,
)
from .predicates import (
    DEFAULT_PREDICATE_REGISTRY,
    CompiledPredicate,
    PredicateOperator,
    PredicateRegistry,
    build_predicate,
)
from .response import (
    ResponseCode,
    build_response,
    error_response,
    extract_error_messages,
    get_message,
    paginate_response,
)
from .sorting import SortCompiler, SortOrder, SortSpec, resolve_sort
from .syntax import ColonSeparatedSyntax, FilterSyntax, JsonFilterSyntax
from .validation import FilterValidator, validate_filters
from .vocabulary import Arity, FilterOperator, arity_of, parse_operator, split_value_list
from .whitelist import FieldWhitelist

__all__ = [
    "DEFAULT_PREDICATE_REGISTRY",
    "DEFAULT_SETTINGS",
    "Arity",
    "AssembledQuery",
    "ColonSeparatedSyntax",
    "CollectingDiagnosticSink",
    "ColumnRef",
    "ColumnResolver",
    "CompiledPredicate",
    "Diagnostic",
    "DiagnosticSink",
    "FieldNotFoundError",
    "FieldWhitelist",
    "FilterDescriptor",
    "FilterOperator",
    "FilterSyntax",
    "FilterValidationError",
    "FilterValidator",
    "FilterVariant",
    "JsonFilterSyntax",
    "ListFilter",
    "LoggingDiagnosticSink",
    "MalformedValueError",
    "NullDiagnosticSink",
    "NullFilter",
    "PageWindow",
    "PaginationCalculator",
    "PaginationMeta",
    "PaginationRequest",
    "PredicateOperator",
    "PredicateRegistry",
    "QueryAssembler",
    "RangeFilter",
    "ResponseCode",
    "SearchError",
    "SearchPage",
    "SearchRequest",
    "SearchSettings",
    "SortCompiler",
    "SortOrder",
    "SortRequest",
    "SortSpec",
    "StorageExecutionError",
    "UnsupportedOperatorError",
    "ValueFilter",
    "arity_of",
    "build_predicate",
    "build_response",
    "compute_limits",
    "compute_meta",
    "error_response",
    "extract_error_messages",
    "get_message",
    "paginate_response",
    "parse_operator",
    "resolve_sort",
    "split_value_list",
    "validate_filters",
]
