"""
Sort resolution: client sort parameters to one ORDER BY clause.

A client may only order by an allow-listed field. Anything else (no field,
an unknown field, a sentinel token) falls back to the configured default,
which is reported as a diagnostic instead of an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlalchemy import asc, desc

from .diagnostics import SORT_DEFAULT_APPLIED, Diagnostic, LoggingDiagnosticSink
from .whitelist import FieldWhitelist

if TYPE_CHECKING:
    from collections.abc import Collection

    from sqlalchemy import Select

    from .columns import ColumnResolver
    from .config import SearchSettings
    from .descriptors import SortRequest
    from .diagnostics import DiagnosticSink


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, raw: Any) -> SortOrder | None:
        """Case-insensitive match against ``asc``/``desc``; ``None`` otherwise."""
        if isinstance(raw, SortOrder):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class SortSpec:
    field: str
    order: SortOrder
    is_default: bool = False


def resolve_sort(
    sort_field: str | None,
    sort_order: str | None,
    allowed_sort_fields: FieldWhitelist | Collection[str],
    *,
    default_field: str,
    default_order: SortOrder = SortOrder.DESC,
) -> SortSpec:
    """
    Pick the field and direction to order by. Never raises.

    An allowed field keeps the client's direction (ascending unless
    ``desc`` was asked for); otherwise the default field and order apply.
    """
    whitelist = FieldWhitelist.coerce(allowed_sort_fields, sortable=True)
    if sort_field is not None and whitelist.is_sortable(sort_field):
        return SortSpec(sort_field, SortOrder.parse(sort_order) or SortOrder.ASC)
    return SortSpec(default_field, default_order, is_default=True)


class SortCompiler:
    """Resolve a :class:`SortRequest` and apply it to a statement."""

    def __init__(
        self,
        allowed_sort_fields: FieldWhitelist | Collection[str],
        settings: SearchSettings,
        diagnostics: DiagnosticSink | None = None,
    ) -> None:
        self.whitelist = FieldWhitelist.coerce(allowed_sort_fields, sortable=True)
        self.settings = settings
        self.diagnostics = diagnostics or LoggingDiagnosticSink()

    def resolve(
        self, request: SortRequest, sink: DiagnosticSink | None = None
    ) -> SortSpec:
        """Resolve *request*; a fallback is reported to *sink* (or the default)."""
        spec = resolve_sort(
            request.field,
            request.order,
            self.whitelist,
            default_field=self.settings.default_sort_field,
            default_order=self.settings.default_sort_order,
        )
        if spec.is_default:
            (sink or self.diagnostics).emit(
                Diagnostic(
                    SORT_DEFAULT_APPLIED,
                    f"Sorting by default '{spec.field}' {spec.order.value}",
                    level=logging.DEBUG,
                    context={"requested_sort": request.field},
                )
            )
        return spec

    def apply(
        self, stmt: Select[Any], resolver: ColumnResolver, spec: SortSpec
    ) -> Select[Any]:
        """
        Order *stmt* by the resolved column.

        Raises:
            FieldNotFoundError: If the field is not mapped on the model.
        """
        column = resolver.lookup(spec.field).expression
        clause = desc(column) if spec.order is SortOrder.DESC else asc(column)
        return stmt.order_by(clause)


__all__ = ["SortCompiler", "SortOrder", "SortSpec", "resolve_sort"]
