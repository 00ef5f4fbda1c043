"""
Search exception hierarchy.

All exceptions inherit from ``SearchError`` and provide ``to_dict()`` and
``errors`` (a flat list of human-readable messages) for API responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class SearchError(Exception):
    """Base exception for all search errors."""

    @property
    def errors(self) -> list[str]:
        return [str(self)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class FilterValidationError(SearchError):
    """
    Client input was malformed: disallowed field, wrong operand shape or
    unknown operator.

    Carries every offending filter, one message per problem.
    """

    def __init__(self, errors: list[str] | str) -> None:
        self._errors = [errors] if isinstance(errors, str) else list(errors)
        super().__init__(f"Invalid filters: {', '.join(self._errors)}")

    @property
    def errors(self) -> list[str]:
        return list(self._errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "VALIDATION_ERROR",
            "errors": self.errors,
        }


class UnsupportedOperatorError(SearchError):
    """Operator is part of the vocabulary but has no compiled form."""

    def __init__(self, operator: str, field: str | None = None) -> None:
        self.operator = operator
        self.field = field
        message = f"Filter type '{operator}' is not supported"
        if field:
            message += f" (field '{field}')"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNSUPPORTED_OPERATOR",
            "operator": self.operator,
            "field": self.field,
        }


class MalformedValueError(SearchError):
    """A filter operand could not be parsed (e.g. invalid JSON document)."""

    def __init__(self, field: str, operator: str, value: Any, reason: str) -> None:
        self.field = field
        self.operator = operator
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid value for '{operator}' filter on '{field}': {reason}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "MALFORMED_VALUE",
            "field": self.field,
            "operator": self.operator,
            "reason": self.reason,
        }


class FieldNotFoundError(SearchError):
    """
    An allow-listed field name has no mapped attribute on the model.

    This is a configuration mistake on the server side, not client input;
    the message lists close matches to help spot typos.
    """

    def __init__(
        self,
        invalid_field: str,
        model_name: str,
        available_fields: list[str],
        cutoff: float = 0.6,
    ) -> None:
        self.invalid_field = invalid_field
        self.model_name = model_name
        self.available_fields = available_fields
        self.suggestions = get_close_matches(
            invalid_field, available_fields, n=3, cutoff=cutoff
        )

        message = f"Field '{invalid_field}' is not a mapped attribute of '{model_name}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FIELD_NOT_FOUND",
            "field": self.invalid_field,
            "model": self.model_name,
            "suggestions": self.suggestions,
            "available_fields": sorted(self.available_fields),
        }


class StorageExecutionError(SearchError):
    """The underlying query execution failed. Never retried here."""

    def __init__(self, message: str = "Query execution failed") -> None:
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "QUERY_EXECUTION_FAILED",
            "message": str(self),
        }


__all__: list[str] = [
    "FieldNotFoundError",
    "FilterValidationError",
    "MalformedValueError",
    "SearchError",
    "StorageExecutionError",
    "UnsupportedOperatorError",
]
