"""
QueryAssembler: filters, sort and page parameters to one executed page.

The assembler combines the other components into a single statement::

    SELECT entity.* FROM users AS entity
    WHERE entity.deleted_at IS NULL          -- scope
      AND entity.status = :param_0           -- filter 1
      AND entity.created_at BETWEEN :start_param_1 AND :end_param_1
    ORDER BY entity.created_at DESC
    LIMIT :page_limit OFFSET :page_offset

The total is counted over the same filtered statement without ordering
or paging, in the same session as the row query.

Execution accepts either a caller-managed ``AsyncSession`` or a session
factory; a session opened from the factory is always closed again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from sqlalchemy import bindparam, func, select
from sqlalchemy.exc import SQLAlchemyError

from .columns import ColumnResolver
from .config import DEFAULT_SETTINGS
from .diagnostics import (
    FILTER_MALFORMED_VALUE,
    FILTER_SKIPPED,
    FILTER_UNSUPPORTED,
    CollectingDiagnosticSink,
    Diagnostic,
    LoggingDiagnosticSink,
)
from .exceptions import (
    FilterValidationError,
    MalformedValueError,
    StorageExecutionError,
    UnsupportedOperatorError,
)
from .pagination import PaginationCalculator
from .predicates import (
    DEFAULT_PREDICATE_REGISTRY,
    build_predicate,
    conjoin,
    merged_params,
    param_name,
)
from .sorting import SortCompiler
from .validation import FilterValidator
from .whitelist import FieldWhitelist

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Sequence

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from .config import SearchSettings
    from .descriptors import FilterDescriptor, SearchRequest
    from .diagnostics import DiagnosticSink
    from .pagination import PageWindow, PaginationMeta
    from .predicates import CompiledPredicate, PredicateRegistry
    from .sorting import SortSpec

    AsyncSessionFactory = Callable[[], Any]
    ScopeCallable = Callable[["Select[Any]", Any], "Select[Any]"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssembledQuery:
    """Statements ready to execute, for callers that run them themselves."""

    stmt: Select[Any]
    count_stmt: Select[Any]
    window: PageWindow
    sort: SortSpec
    params: dict[str, Any] = field(default_factory=dict)
    diagnostics: tuple[Diagnostic, ...] = ()


@dataclass(frozen=True)
class SearchPage:
    """One page of results."""

    rows: list[Any]
    meta: PaginationMeta
    diagnostics: tuple[Diagnostic, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.rows, "meta": self.meta.to_dict()}


class QueryAssembler:
    """
    Search one mapped model.

    Args:
        model: Mapped SQLAlchemy model class.
        allowed_search_fields: Field names (or a ``FieldWhitelist``) clients
            may filter on.
        allowed_sort_fields: Field names (or a ``FieldWhitelist``) clients
            may order by.
        alias: Alias of the entity in the generated statement.
        settings: Page sizes, default sort, soft delete and strictness.
        registry: Predicate registry; defaults to every built-in operator.
        diagnostics: Sink receiving non-fatal outcomes; defaults to the
            ``cqrs_ddd.search`` logger.
        strict: Overrides ``settings.strict`` when given.
        scope: Callables ``(stmt, entity) -> stmt`` applied before the
            client filters, e.g. tenant restrictions.
    """

    def __init__(
        self,
        model: type[Any],
        *,
        allowed_search_fields: FieldWhitelist | Collection[str],
        allowed_sort_fields: FieldWhitelist | Collection[str],
        alias: str = "entity",
        settings: SearchSettings | None = None,
        registry: PredicateRegistry | None = None,
        diagnostics: DiagnosticSink | None = None,
        strict: bool | None = None,
        scope: Sequence[ScopeCallable] | None = None,
    ) -> None:
        self.model = model
        self.settings = settings or DEFAULT_SETTINGS
        self.resolver = ColumnResolver(model, alias)
        self.search_whitelist = FieldWhitelist.coerce(allowed_search_fields)
        self.registry = registry or DEFAULT_PREDICATE_REGISTRY
        self.diagnostics = diagnostics or LoggingDiagnosticSink()
        self.strict = self.settings.strict if strict is None else strict
        self.scope = list(scope or ())
        self.validator = FilterValidator()
        self.sort_compiler = SortCompiler(
            allowed_sort_fields, self.settings, self.diagnostics
        )
        self.pagination = PaginationCalculator(self.settings)

    @property
    def entity(self) -> Any:
        """The aliased entity every statement selects from."""
        return self.resolver.entity

    # -- statement building -------------------------------------------------

    def build_statement(
        self,
        request: SearchRequest,
        *,
        base_query: Select[Any] | None = None,
        sink: DiagnosticSink | None = None,
    ) -> AssembledQuery:
        """
        Build the paged row statement and its count statement.

        Raises:
            FilterValidationError: In strict mode, if any filter is invalid.
            UnsupportedOperatorError: In strict mode, for path extraction.
            MalformedValueError: In strict mode, for undecodable operands.
            FieldNotFoundError: If an allow-listed or configured field is
                not mapped on the model.
        """
        collector = CollectingDiagnosticSink(forward_to=sink or self.diagnostics)

        stmt = base_query if base_query is not None else select(self.entity)
        stmt = self._apply_scope(stmt)

        predicates = self._compile_filters(request.filters, collector)
        if predicates:
            stmt = stmt.where(conjoin(predicates))
        params = merged_params(predicates)

        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())

        sort = self.sort_compiler.resolve(request.sort, collector)
        stmt = self.sort_compiler.apply(stmt, self.resolver, sort)

        page = request.pagination
        window = self.pagination.limits(page.page, page.per_page)
        # Named so they cannot collide with the anonymous "param_N" binds.
        stmt = stmt.limit(bindparam("page_limit", window.limit)).offset(
            bindparam("page_offset", window.offset)
        )

        return AssembledQuery(
            stmt=stmt,
            count_stmt=count_stmt,
            window=window,
            sort=sort,
            params=params,
            diagnostics=tuple(collector.diagnostics),
        )

    def _apply_scope(self, stmt: Select[Any]) -> Select[Any]:
        soft_delete = self.settings.soft_delete_field
        if soft_delete:
            if self.resolver.has(soft_delete):
                stmt = stmt.where(self.resolver.lookup(soft_delete).expression.is_(None))
            else:
                logger.debug(
                    "Soft delete field %r not mapped on %s; not applied",
                    soft_delete,
                    self.model.__name__,
                )
        for scope in self.scope:
            stmt = scope(stmt, self.entity)
        return stmt

    def _compile_filters(
        self,
        filters: Sequence[FilterDescriptor],
        sink: DiagnosticSink,
    ) -> list[CompiledPredicate]:
        if self.strict:
            errors = self.validator.validate(filters, self.search_whitelist)
            if errors:
                raise FilterValidationError(errors)
            return [
                build_predicate(
                    self.resolver.resolve(descriptor.field, self.search_whitelist),
                    descriptor,
                    param_name(index),
                    self.registry,
                )
                for index, descriptor in enumerate(filters)
            ]

        predicates: list[CompiledPredicate] = []
        for index, item in enumerate(filters):
            predicate = self._compile_lenient(index, item, sink)
            if predicate is not None:
                predicates.append(predicate)
        return predicates

    def _compile_lenient(
        self, index: int, item: Any, sink: DiagnosticSink
    ) -> CompiledPredicate | None:
        position = index + 1
        try:
            descriptor = self.validator.coerce(item)
        except ValidationError:
            self._skip(sink, FILTER_SKIPPED, position, "malformed filter descriptor")
            return None

        problems = self.validator.check(position, descriptor, self.search_whitelist)
        if problems:
            self._skip(sink, FILTER_SKIPPED, position, "; ".join(problems), descriptor)
            return None

        column = self.resolver.resolve(descriptor.field, self.search_whitelist)
        try:
            return build_predicate(column, descriptor, param_name(index), self.registry)
        except UnsupportedOperatorError as e:
            self._skip(sink, FILTER_UNSUPPORTED, position, str(e), descriptor)
        except MalformedValueError as e:
            self._skip(sink, FILTER_MALFORMED_VALUE, position, str(e), descriptor)
        return None

    @staticmethod
    def _skip(
        sink: DiagnosticSink,
        code: str,
        position: int,
        reason: str,
        descriptor: FilterDescriptor | None = None,
    ) -> None:
        context: dict[str, Any] = {"filter_index": position}
        if descriptor is not None:
            context["field"] = descriptor.field
            context["operator"] = descriptor.operator
        sink.emit(
            Diagnostic(
                code,
                f"Skipped filter {position}: {reason}",
                level=logging.WARNING,
                context=context,
            )
        )

    # -- execution ----------------------------------------------------------

    async def execute(
        self,
        request: SearchRequest,
        *,
        session: AsyncSession | None = None,
        session_factory: AsyncSessionFactory | None = None,
        base_query: Select[Any] | None = None,
    ) -> SearchPage:
        """
        Run the search and return one page.

        Exactly one of *session* (left open for the caller) or
        *session_factory* (opened and closed here) must be given.

        Raises:
            StorageExecutionError: If the database rejects either query.
        """
        if (session is None) == (session_factory is None):
            raise ValueError("Pass exactly one of 'session' or 'session_factory'")

        assembled = self.build_statement(request, base_query=base_query)

        if session is not None:
            rows, total = await self._run(session, assembled)
        else:
            assert session_factory is not None
            async with session_factory() as owned:
                rows, total = await self._run(owned, assembled)

        meta = self.pagination.meta(total, assembled.window)
        return SearchPage(rows=rows, meta=meta, diagnostics=assembled.diagnostics)

    async def _run(
        self, session: AsyncSession, assembled: AssembledQuery
    ) -> tuple[list[Any], int]:
        try:
            total = (await session.execute(assembled.count_stmt)).scalar_one()
            result = await session.execute(assembled.stmt)
            if len(assembled.stmt.column_descriptions) == 1:
                rows = list(result.scalars().all())
            else:
                rows = list(result.all())
        except SQLAlchemyError as e:
            logger.error("Search on %s failed: %s", self.model.__name__, e)
            raise StorageExecutionError() from e
        return rows, int(total)


__all__ = ["AssembledQuery", "QueryAssembler", "SearchPage"]
