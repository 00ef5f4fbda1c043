"""FilterSyntax: pluggable query-string syntaxes (JSON, colon-separated)."""

from __future__ import annotations

import json
from typing import Any

from .exceptions import FilterValidationError
from .vocabulary import Arity, FilterOperator, arity_of, parse_operator

# Short names accepted in the colon syntax, mapped to vocabulary operators.
_OP_ALIASES: dict[str, FilterOperator] = {
    "eq": FilterOperator.EQUAL,
    "=": FilterOperator.EQUAL,
    "ne": FilterOperator.NOT_EQUAL,
    "!=": FilterOperator.NOT_EQUAL,
    "gt": FilterOperator.GREATER_THAN,
    ">": FilterOperator.GREATER_THAN,
    "gte": FilterOperator.GREATER_EQUAL,
    ">=": FilterOperator.GREATER_EQUAL,
    "lt": FilterOperator.LESS_THAN,
    "<": FilterOperator.LESS_THAN,
    "lte": FilterOperator.LESS_EQUAL,
    "<=": FilterOperator.LESS_EQUAL,
    "startswith": FilterOperator.STARTS_WITH,
    "endswith": FilterOperator.ENDS_WITH,
    "null": FilterOperator.IS_NULL,
    "not_null": FilterOperator.IS_NOT_NULL,
    "regex": FilterOperator.REGEXP,
    "iregex": FilterOperator.IREGEXP,
}


class FilterSyntax:
    """Base for filter syntax parsers."""

    def parse_filters(self, raw: Any) -> list[dict[str, Any]]:
        """Parse raw input into a list of filter descriptor dicts."""
        raise NotImplementedError


class JsonFilterSyntax(FilterSyntax):
    """Parse a JSON array of descriptor objects (or one object)."""

    def parse_filters(self, raw: Any) -> list[dict[str, Any]]:
        if raw is None or raw == "":
            return []
        data = raw
        if isinstance(raw, str):
            try:
                data = json.loads(raw)
            except json.JSONDecodeError as e:
                raise FilterValidationError(f"filters is not valid JSON: {e.msg}") from e
        if isinstance(data, dict):
            return [data]
        if isinstance(data, list) and all(isinstance(item, dict) for item in data):
            return list(data)
        raise FilterValidationError("filters must be a JSON object or array of objects")


class ColonSeparatedSyntax(FilterSyntax):
    """
    Parse ``field:op:value`` clauses joined by commas (AND).

    Commas inside a value are kept with that value, so list and range
    operands read naturally::

        status:in:active,pending,createdAt:between:2025-01-01,2025-12-31
    """

    def parse_filters(self, raw: Any) -> list[dict[str, Any]]:
        if not raw or not isinstance(raw, str):
            return []
        out: list[dict[str, Any]] = []
        for part in self._smart_split(raw):
            tokens = part.split(":", 2)
            if len(tokens) == 2:
                tokens.append("")
            if len(tokens) != 3:
                raise FilterValidationError(f"Expected field:op:value, got: {part!r}")
            field, op, value = (t.strip() for t in tokens)
            out.append(self._descriptor(field, op, value))
        return out

    def _descriptor(self, field: str, op: str, value: str) -> dict[str, Any]:
        operator = _OP_ALIASES.get(op.lower()) or parse_operator(op)
        if operator is None:
            # Leave it to the validator to report, with the filter's position.
            return {"field": field, "operator": op, "value": value or None}
        arity = arity_of(operator)
        data: dict[str, Any] = {"field": field, "operator": operator.value}
        if arity is Arity.RANGE:
            start, _, end = value.partition(",")
            data["range_start"] = start.strip() or None
            data["range_end"] = end.strip() or None
        elif arity is Arity.LIST:
            data["value_list"] = value or None
        elif arity is Arity.SINGLE:
            data["value"] = value or None
        return data

    def _smart_split(self, raw: str) -> list[str]:
        """
        Split by commas, gluing segments without a ``field:op`` prefix
        back onto the previous clause.
        """
        clauses: list[str] = []
        for segment in raw.split(","):
            stripped = segment.strip()
            if not stripped:
                continue
            if not clauses or self._starts_clause(stripped):
                clauses.append(stripped)
            else:
                clauses[-1] += "," + stripped
        return clauses

    def _starts_clause(self, segment: str) -> bool:
        tokens = segment.split(":", 2)
        if len(tokens) < 2:
            return False
        op = tokens[1].strip()
        return op.lower() in _OP_ALIASES or parse_operator(op) is not None


__all__ = ["ColonSeparatedSyntax", "FilterSyntax", "JsonFilterSyntax"]
