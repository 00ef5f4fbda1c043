"""Compiled predicate text and bound parameters per operator."""

from __future__ import annotations

from typing import Any

import pytest
from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, psycopg2
from sqlalchemy.orm import DeclarativeBase

from cqrs_ddd_search import (
    ColumnResolver,
    FieldWhitelist,
    FilterDescriptor,
    FilterOperator,
    FilterValidationError,
    MalformedValueError,
    PredicateRegistry,
    UnsupportedOperatorError,
    ValueFilter,
    build_predicate,
)
from cqrs_ddd_search.predicates import (
    DEFAULT_PREDICATE_REGISTRY,
    conjoin,
    merged_params,
    param_name,
)
from cqrs_ddd_search.vocabulary import FilterOperator as Op


class Base(DeclarativeBase):
    pass


class DocumentRecord(Base):
    __tablename__ = "documents"
    id = Column(Integer, primary_key=True)
    title = Column(String)
    status = Column(String)
    created_at = Column(DateTime)
    deleted_at = Column(DateTime)
    payload = Column(JSONB)
    tags = Column(ARRAY(String))


FIELDS = FieldWhitelist(
    searchable_fields=["id", "title", "status", "created_at", "deleted_at", "payload", "tags"]
)


def _compile(data: dict[str, Any], index: int = 0):
    descriptor = FilterDescriptor.model_validate(data)
    column = ColumnResolver(DocumentRecord).resolve(descriptor.field, FIELDS)
    return build_predicate(column, descriptor, param_name(index))


def _pg(predicate) -> str:
    return str(predicate.clause.compile(dialect=psycopg2.dialect()))


def test_default_registry_covers_the_vocabulary() -> None:
    assert DEFAULT_PREDICATE_REGISTRY.supported_operators == set(FilterOperator)


def test_equal() -> None:
    p = _compile({"field": "status", "operator": "equal", "value": "active"})
    assert p.text == "entity.status = :param_0"
    assert p.params == {"param_0": "active"}


def test_bind_name_follows_filter_position() -> None:
    p = _compile({"field": "status", "operator": "not_equal", "value": "x"}, index=3)
    assert p.text == "entity.status != :param_3"
    assert p.params == {"param_3": "x"}


@pytest.mark.parametrize(
    ("op", "symbol"),
    [
        ("greater_than", ">"),
        ("greater_equal", ">="),
        ("less_than", "<"),
        ("less_equal", "<="),
    ],
)
def test_ordering_comparisons(op: str, symbol: str) -> None:
    p = _compile({"field": "id", "operator": op, "value": "5"})
    assert p.text == f"entity.id {symbol} :param_0"
    assert p.params == {"param_0": "5"}


@pytest.mark.parametrize(
    ("op", "sql", "bound"),
    [
        ("like", "entity.title LIKE :param_0", "%jo%"),
        ("not_like", "entity.title NOT LIKE :param_0", "%jo%"),
        ("contains", "entity.title LIKE :param_0", "%jo%"),
        ("starts_with", "entity.title LIKE :param_0", "jo%"),
        ("ends_with", "entity.title LIKE :param_0", "%jo"),
        ("ilike", "lower(entity.title) LIKE lower(:param_0)", "%jo%"),
        ("not_ilike", "lower(entity.title) NOT LIKE lower(:param_0)", "%jo%"),
        ("icontains", "lower(entity.title) LIKE lower(:param_0)", "%jo%"),
    ],
)
def test_pattern_operators(op: str, sql: str, bound: str) -> None:
    p = _compile({"field": "title", "operator": op, "value": "jo"})
    assert p.text == sql
    assert p.params == {"param_0": bound}


def test_regexp() -> None:
    p = _compile({"field": "title", "operator": "regexp", "value": "^J"})
    assert _pg(p) == "entity.title ~ %(param_0)s"
    assert p.params == {"param_0": "^J"}


def test_iregexp_lowers_both_sides() -> None:
    p = _compile({"field": "title", "operator": "iregexp", "value": "^J"})
    assert _pg(p) == "lower(entity.title) ~ lower(%(param_0)s)"


def test_between_uses_start_and_end_params() -> None:
    p = _compile(
        {
            "field": "created_at",
            "operator": "between",
            "range_start": "2025-01-01",
            "range_end": "2025-12-31",
        },
        index=1,
    )
    assert p.text == "entity.created_at BETWEEN :start_param_1 AND :end_param_1"
    assert p.params == {"start_param_1": "2025-01-01", "end_param_1": "2025-12-31"}


def test_not_between() -> None:
    p = _compile(
        {"field": "created_at", "operator": "not_between", "range_start": "a", "range_end": "b"}
    )
    assert "NOT BETWEEN :start_param_0 AND :end_param_0" in p.text


def test_in_binds_the_split_list() -> None:
    p = _compile({"field": "status", "operator": "in", "value_list": "a, b ,c"})
    assert p.text.startswith("entity.status IN")
    assert "param_0" in p.text
    assert p.params == {"param_0": ["a", "b", "c"]}


def test_not_in() -> None:
    p = _compile({"field": "status", "operator": "not_in", "value_list": "a"})
    assert p.text.startswith("(entity.status NOT IN") or p.text.startswith(
        "entity.status NOT IN"
    )
    assert p.params == {"param_0": ["a"]}


def test_null_checks_bind_nothing() -> None:
    p = _compile({"field": "deleted_at", "operator": "is_null"})
    assert p.text == "entity.deleted_at IS NULL"
    assert p.params == {}
    p = _compile({"field": "deleted_at", "operator": "is_not_null"})
    assert p.text == "entity.deleted_at IS NOT NULL"


def test_json_contains_binds_decoded_document() -> None:
    p = _compile({"field": "payload", "operator": "json_contains", "value": '{"a": 1}'})
    assert _pg(p) == "entity.payload @> %(param_0)s"
    assert p.params == {"param_0": {"a": 1}}


def test_json_contained() -> None:
    p = _compile({"field": "payload", "operator": "json_contained", "value": "[1, 2]"})
    assert _pg(p) == "entity.payload <@ %(param_0)s"
    assert p.params == {"param_0": [1, 2]}


def test_json_contains_rejects_invalid_json() -> None:
    with pytest.raises(MalformedValueError) as exc_info:
        _compile({"field": "payload", "operator": "json_contains", "value": "{nope"})
    assert exc_info.value.field == "payload"
    assert "invalid JSON" in str(exc_info.value)


@pytest.mark.parametrize("op", ["json_extract", "json_extract_text"])
def test_path_extraction_is_unsupported(op: str) -> None:
    with pytest.raises(UnsupportedOperatorError, match=op):
        _compile({"field": "payload", "operator": op, "value": "a.b"})


def test_array_contains() -> None:
    p = _compile({"field": "tags", "operator": "array_contains", "value": "red"})
    assert _pg(p) == "entity.tags @> %(param_0)s"
    assert p.params == {"param_0": ["red"]}


def test_array_overlap() -> None:
    p = _compile({"field": "tags", "operator": "array_overlap", "value_list": "red, blue"})
    assert _pg(p) == "entity.tags && %(param_0)s"
    assert p.params == {"param_0": ["red", "blue"]}


def test_caller_text_never_reaches_statement() -> None:
    hostile = "x'; DROP TABLE documents; --"
    p = _compile({"field": "title", "operator": "equal", "value": hostile})
    assert hostile not in p.text
    assert p.params == {"param_0": hostile}


def test_unregistered_operator_raises() -> None:
    column = ColumnResolver(DocumentRecord).lookup("title")
    with pytest.raises(UnsupportedOperatorError):
        build_predicate(
            column, ValueFilter("title", Op.EQUAL, "x"), "param_0", PredicateRegistry()
        )


def test_operand_shape_mismatch_raises() -> None:
    column = ColumnResolver(DocumentRecord).lookup("created_at")
    with pytest.raises(FilterValidationError, match="RangeFilter"):
        build_predicate(column, ValueFilter("created_at", Op.BETWEEN, "x"), "param_0")


def test_conjoin_combines_with_and() -> None:
    a = _compile({"field": "status", "operator": "equal", "value": "a"}, 0)
    b = _compile({"field": "title", "operator": "like", "value": "b"}, 1)
    text = str(conjoin([a, b]).compile())
    assert text == "entity.status = :param_0 AND entity.title LIKE :param_1"


def test_merged_params_collects_every_bind() -> None:
    a = _compile({"field": "status", "operator": "equal", "value": "a"}, 0)
    b = _compile(
        {
            "field": "created_at",
            "operator": "between",
            "range_start": "2025-01-01",
            "range_end": "2025-02-01",
        },
        1,
    )
    assert merged_params([a, b]) == {
        "param_0": "a",
        "start_param_1": "2025-01-01",
        "end_param_1": "2025-02-01",
    }
    assert merged_params([]) == {}
