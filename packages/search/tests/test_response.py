"""Tests for the response envelope and error flattening."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from cqrs_ddd_search import (
    FilterValidationError,
    MalformedValueError,
    PaginationMeta,
    ResponseCode,
    SearchPage,
    SearchRequest,
    StorageExecutionError,
    UnsupportedOperatorError,
    build_response,
    error_response,
    extract_error_messages,
    get_message,
    paginate_response,
    validate_filters,
)


def test_default_messages() -> None:
    assert get_message(ResponseCode.SUCCESS) == "Success"
    assert get_message(ResponseCode.BAD_REQUEST) == "Bad Request Exception"
    assert get_message(ResponseCode.INVALID_FIELD_FORMAT) == "Invalid Field Format"
    assert get_message(418) == "Unknown error"


def test_success_envelope_carries_data() -> None:
    assert build_response(ResponseCode.CREATED, {"id": 1}) == {
        "response_code": 201,
        "response_message": "Created successfully",
        "data": {"id": 1},
    }
    assert build_response(ResponseCode.SUCCESS)["data"] == {}


def test_error_envelope_flattens_and_splits_messages() -> None:
    response = build_response(
        ResponseCode.BAD_REQUEST,
        {"error": ["first, second", ["third"]]},
        message="Nope",
    )
    assert response == {
        "response_code": 400,
        "response_message": "Nope",
        "error": ["first", "second", "third"],
    }


def test_error_envelope_without_messages_has_no_error_key() -> None:
    assert "error" not in build_response(ResponseCode.NOT_FOUND, None)


def test_extract_error_messages_shapes() -> None:
    assert extract_error_messages(None) == []
    assert extract_error_messages("boom") == ["boom"]
    assert extract_error_messages(["a", ["b", ["c"]], 3]) == ["a", "b", "c"]
    assert extract_error_messages({"message": "m"}) == ["m"]
    assert extract_error_messages({"errors": ["x", "y"]}) == ["x", "y"]
    assert extract_error_messages({"error": {"message": "nested"}}) == ["nested"]
    assert extract_error_messages(RuntimeError("bad")) == ["bad"]
    assert extract_error_messages(FilterValidationError(["e1", "e2"])) == ["e1", "e2"]


def test_extract_error_messages_from_pydantic() -> None:
    with pytest.raises(ValidationError) as exc_info:
        SearchRequest.model_validate({"filters": "not-a-list"})
    messages = extract_error_messages(exc_info.value)
    assert messages
    assert all(m.startswith("filters") for m in messages)


def test_paginate_response() -> None:
    meta = PaginationMeta(current_page=1, last_page=1, per_page=10, total=2, from_=1, to=2)
    page = SearchPage(rows=[{"id": 1}, {"id": 2}], meta=meta)
    assert paginate_response(page, extra={"filters_applied": 1}) == {
        "response_code": 200,
        "response_message": "Success",
        "data": [{"id": 1}, {"id": 2}],
        "meta": {
            "current_page": 1,
            "last_page": 1,
            "per_page": 10,
            "total": 2,
            "from": 1,
            "to": 2,
        },
        "filters_applied": 1,
    }


@pytest.mark.parametrize(
    "exc",
    [
        FilterValidationError(["Filter 1: 'x' is not an allowed search field"]),
        UnsupportedOperatorError("json_extract", "meta"),
        MalformedValueError("meta", "json_contains", "{", "invalid JSON"),
    ],
)
def test_client_errors_map_to_400(exc: Exception) -> None:
    response = error_response(exc)
    assert response["response_code"] == 400
    assert response["error"]


def test_filter_validation_messages_reach_the_client() -> None:
    response = error_response(
        FilterValidationError(["Filter 2: 'password' is not an allowed search field"])
    )
    assert response["error"] == ["Filter 2: 'password' is not an allowed search field"]


def test_request_body_errors_map_to_422() -> None:
    with pytest.raises(ValidationError) as exc_info:
        SearchRequest.model_validate({"filters": [{"field": ["x"]}]})
    assert error_response(exc_info.value)["response_code"] == 422


def test_storage_errors_map_to_500_and_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="cqrs_ddd_search.response"):
        response = error_response(StorageExecutionError())
    assert response == {
        "response_code": 500,
        "response_message": "Internal Server Error",
        "error": ["Query execution failed"],
    }
    assert "Search failed" in caplog.text


def test_unknown_errors_use_default_message() -> None:
    response = error_response(RuntimeError(), default_message="Could not list users")
    assert response["error"] == ["Could not list users"]


def test_validator_messages_with_commas_stay_whole() -> None:
    errors = validate_filters(
        [
            {
                "field": "status",
                "operator": "equal",
                "value": "a",
                "range_start": "1",
                "range_end": "2",
            }
        ],
        ["status"],
    )
    response = error_response(FilterValidationError(errors))
    assert response["error"] == errors
    assert response["error"] == [
        "Filter 1: unexpected operand(s) range_end, range_start for equal filter"
    ]


def test_free_text_errors_are_still_split_on_commas() -> None:
    response = error_response(RuntimeError("disk full, retry later"))
    assert response["error"] == ["disk full", "retry later"]
