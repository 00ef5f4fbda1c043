"""Tests for sort resolution."""

from __future__ import annotations

import logging

import pytest
from sqlalchemy import select

from cqrs_ddd_search import (
    CollectingDiagnosticSink,
    ColumnResolver,
    FieldNotFoundError,
    SearchSettings,
    SortCompiler,
    SortOrder,
    SortRequest,
    SortSpec,
    resolve_sort,
)
from cqrs_ddd_search.diagnostics import SORT_DEFAULT_APPLIED

ALLOWED = ["name", "email", "createdAt"]


def test_allowed_field_with_order() -> None:
    spec = resolve_sort("name", "DESC", ALLOWED, default_field="createdAt")
    assert spec == SortSpec("name", SortOrder.DESC)


def test_allowed_field_defaults_to_ascending() -> None:
    assert resolve_sort("name", None, ALLOWED, default_field="createdAt").order is SortOrder.ASC
    assert resolve_sort("name", "sideways", ALLOWED, default_field="createdAt").order is SortOrder.ASC


@pytest.mark.parametrize("field", [None, "", "password", "NaN", "undefined"])
def test_fallback_to_default_without_raising(field: str | None) -> None:
    spec = resolve_sort(field, "asc", ALLOWED, default_field="createdAt")
    assert spec == SortSpec("createdAt", SortOrder.DESC, is_default=True)


def test_sort_order_parse() -> None:
    assert SortOrder.parse("Asc") is SortOrder.ASC
    assert SortOrder.parse(" desc ") is SortOrder.DESC
    assert SortOrder.parse("up") is None
    assert SortOrder.parse(None) is None


def test_compiler_reports_fallback(user_model) -> None:
    sink = CollectingDiagnosticSink()
    compiler = SortCompiler(ALLOWED, SearchSettings(default_sort_field="createdAt"), sink)
    spec = compiler.resolve(SortRequest(sort_by="password"))
    assert spec.is_default
    assert sink.codes() == [SORT_DEFAULT_APPLIED]
    assert sink.diagnostics[0].level == logging.DEBUG
    assert sink.diagnostics[0].context == {"requested_sort": "password"}


def test_compiler_is_silent_for_allowed_sort(user_model) -> None:
    sink = CollectingDiagnosticSink()
    compiler = SortCompiler(ALLOWED, SearchSettings(default_sort_field="createdAt"), sink)
    compiler.resolve(SortRequest(sort_by="email", sort_order="asc"))
    assert sink.diagnostics == []


def test_compiler_orders_by_resolved_column(user_model) -> None:
    resolver = ColumnResolver(user_model)
    compiler = SortCompiler(ALLOWED, SearchSettings(default_sort_field="createdAt"))
    stmt = compiler.apply(
        select(resolver.entity), resolver, SortSpec("createdAt", SortOrder.DESC)
    )
    assert str(stmt.compile()).endswith("ORDER BY entity.created_at DESC")

    stmt = compiler.apply(select(resolver.entity), resolver, SortSpec("name", SortOrder.ASC))
    assert str(stmt.compile()).endswith("ORDER BY entity.name ASC")


def test_unmapped_default_field_is_a_configuration_error(user_model) -> None:
    resolver = ColumnResolver(user_model)
    compiler = SortCompiler(ALLOWED, SearchSettings())
    spec = compiler.resolve(SortRequest())
    with pytest.raises(FieldNotFoundError) as exc_info:
        compiler.apply(select(resolver.entity), resolver, spec)
    assert exc_info.value.invalid_field == "created_at"
    assert "createdAt" in exc_info.value.suggestions
