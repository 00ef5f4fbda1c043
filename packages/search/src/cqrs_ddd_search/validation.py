"""
FilterValidator: check client filters against the allow-list and the
operand shape of each operator.

Validation reports every problem it finds instead of stopping at the
first one. Messages carry the 1-based position of the offending filter so
clients can point at it::

    Filter 2: 'password' is not an allowed search field
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from .descriptors import OPERANDS_BY_ARITY, FilterDescriptor
from .exceptions import FilterValidationError
from .vocabulary import Arity, arity_of
from .whitelist import FieldWhitelist

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable


class FilterValidator:
    """Stateless validator; one instance can serve every request."""

    def validate(
        self,
        filters: Iterable[FilterDescriptor | dict[str, Any]],
        allowed_fields: FieldWhitelist | Collection[str],
    ) -> list[str]:
        """
        Return one message per problem; an empty list means all valid.

        Never raises and never mutates *filters*.
        """
        whitelist = FieldWhitelist.coerce(allowed_fields)
        errors: list[str] = []
        for position, item in enumerate(filters, start=1):
            try:
                descriptor = self.coerce(item)
            except ValidationError:
                errors.append(f"Filter {position}: malformed filter descriptor")
                continue
            errors.extend(self.check(position, descriptor, whitelist))
        return errors

    def validate_or_raise(
        self,
        filters: Iterable[FilterDescriptor | dict[str, Any]],
        allowed_fields: FieldWhitelist | Collection[str],
    ) -> None:
        errors = self.validate(filters, allowed_fields)
        if errors:
            raise FilterValidationError(errors)

    def check(
        self, position: int, descriptor: FilterDescriptor, whitelist: FieldWhitelist
    ) -> list[str]:
        """Problems of one filter at 1-based *position*."""
        prefix = f"Filter {position}:"
        errors: list[str] = []
        if not whitelist.is_searchable(descriptor.field):
            errors.append(f"{prefix} '{descriptor.field}' is not an allowed search field")

        op = descriptor.kind
        if op is None:
            errors.append(f"{prefix} Unknown filter type '{descriptor.operator}'")
            return errors

        if not whitelist.allows_operator(descriptor.field, op):
            errors.append(
                f"{prefix} Filter type '{op.value}' is not allowed "
                f"for field '{descriptor.field}'"
            )

        arity = arity_of(op)
        present = descriptor.present_operands()
        required = OPERANDS_BY_ARITY[arity]
        if required - present:
            errors.append(f"{prefix} {_missing_message(arity, op.value)}")
        extra = present - required
        if extra:
            errors.append(
                f"{prefix} unexpected operand(s) {', '.join(sorted(extra))} "
                f"for {op.value} filter"
            )
        return errors

    @staticmethod
    def coerce(item: FilterDescriptor | dict[str, Any]) -> FilterDescriptor:
        if isinstance(item, FilterDescriptor):
            return item
        return FilterDescriptor.model_validate(item)


def _missing_message(arity: Arity, op: str) -> str:
    if arity is Arity.RANGE:
        return f"'range_start' and 'range_end' are required for {op} filter"
    if arity is Arity.LIST:
        return f"'value_list' is required for {op} filter"
    return f"'value' is required for {op} filter"


_default_validator = FilterValidator()


def validate_filters(
    filters: Iterable[FilterDescriptor | dict[str, Any]],
    allowed_fields: FieldWhitelist | Collection[str],
) -> list[str]:
    """Shortcut for ``FilterValidator().validate``."""
    return _default_validator.validate(filters, allowed_fields)


__all__ = ["FilterValidator", "validate_filters"]
