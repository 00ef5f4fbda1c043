"""Tests for allow-lists and column resolution."""

from __future__ import annotations

import pytest

from cqrs_ddd_search import (
    ColumnResolver,
    FieldNotFoundError,
    FieldWhitelist,
    FilterOperator,
    FilterValidationError,
)


def test_whitelist_coerce_plain_collections() -> None:
    search = FieldWhitelist.coerce(["name"])
    sort = FieldWhitelist.coerce({"name"}, sortable=True)
    assert search.is_searchable("name")
    assert not search.is_sortable("name")
    assert sort.is_sortable("name")
    assert FieldWhitelist.coerce(search) is search


def test_whitelist_operator_restrictions() -> None:
    wl = FieldWhitelist(
        searchable_fields=["status", "name"],
        field_operators={"status": [FilterOperator.EQUAL, "in"]},
    )
    assert wl.allows_operator("status", FilterOperator.IN)
    assert not wl.allows_operator("status", FilterOperator.LIKE)
    assert wl.allows_operator("name", FilterOperator.LIKE)


def test_whitelist_rejects_unknown_restriction() -> None:
    with pytest.raises(ValueError, match="status"):
        FieldWhitelist(field_operators={"status": ["fuzzy"]})


def test_resolver_uses_mapped_attribute_names(user_model) -> None:
    resolver = ColumnResolver(user_model, alias="u")
    assert "createdAt" in resolver.mapped_names
    ref = resolver.lookup("createdAt")
    assert ref.qualified_name == "u.createdAt"
    assert str(ref.expression.compile()) == "u.created_at"


def test_resolver_refuses_fields_outside_allow_list(user_model) -> None:
    resolver = ColumnResolver(user_model)
    with pytest.raises(FilterValidationError, match="password"):
        resolver.resolve("password", FieldWhitelist(searchable_fields=["name"]))


def test_resolver_reports_unmapped_allow_listed_field(user_model) -> None:
    resolver = ColumnResolver(user_model)
    with pytest.raises(FieldNotFoundError) as exc_info:
        resolver.resolve("emial", FieldWhitelist(searchable_fields=["emial"]))
    assert "email" in exc_info.value.suggestions
    assert exc_info.value.to_dict()["error"] == "FIELD_NOT_FOUND"
