"""
Diagnostic sinks: where the engine reports what it skipped or defaulted.

The engine never prints. Components that need to tell the caller about a
non-fatal outcome (a default sort was applied, a filter was skipped in
lenient mode) emit a :class:`Diagnostic` to an injectable sink. The default
sink forwards to the ``cqrs_ddd.search`` logger.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger("cqrs_ddd.search")

SORT_DEFAULT_APPLIED = "sort.default_applied"
FILTER_SKIPPED = "filter.skipped"
FILTER_MALFORMED_VALUE = "filter.malformed_value"
FILTER_UNSUPPORTED = "filter.unsupported"


@dataclass(frozen=True)
class Diagnostic:
    """A single non-fatal outcome."""

    code: str
    message: str
    level: int = logging.INFO
    context: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class DiagnosticSink(Protocol):
    """Receives diagnostics emitted during one search request."""

    def emit(self, diagnostic: Diagnostic) -> None:
        """Record *diagnostic*."""
        ...


class LoggingDiagnosticSink:
    """Forward diagnostics to a :mod:`logging` logger."""

    def __init__(self, logger_: logging.Logger | None = None) -> None:
        self._log = logger_ or logger

    def emit(self, diagnostic: Diagnostic) -> None:
        self._log.log(
            diagnostic.level,
            "%s: %s",
            diagnostic.code,
            diagnostic.message,
            extra={"search_diagnostic": diagnostic.code, **diagnostic.context},
        )


class CollectingDiagnosticSink:
    """Keep diagnostics in memory; optionally forward to another sink."""

    def __init__(self, forward_to: DiagnosticSink | None = None) -> None:
        self.diagnostics: list[Diagnostic] = []
        self._forward_to = forward_to

    def emit(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        if self._forward_to is not None:
            self._forward_to.emit(diagnostic)

    def codes(self) -> list[str]:
        return [d.code for d in self.diagnostics]


class NullDiagnosticSink:
    """Discard everything."""

    def emit(self, diagnostic: Diagnostic) -> None:
        return None


__all__ = [
    "CollectingDiagnosticSink",
    "Diagnostic",
    "DiagnosticSink",
    "FILTER_MALFORMED_VALUE",
    "FILTER_SKIPPED",
    "FILTER_UNSUPPORTED",
    "LoggingDiagnosticSink",
    "NullDiagnosticSink",
    "SORT_DEFAULT_APPLIED",
]
