"""
Structured error types for plan-ledger.

The ledger itself almost never fails: recording a message is how the
surrounding automation reports problems. The few caller-visible failures
(bad severity names, missing result data) are raised as typed
:class:`LedgerError` subclasses so callers can route them by category.

Architecture:
    ::

        ┌─────────────────────────────────────────────┐
        │                 LedgerError                  │
        │        (category, context, cause)            │
        ├─────────────────────────────────────────────┤
        │  ValidationError      ConfigError            │
        │       │                                      │
        │  InvalidSeverityError                        │
        │                                              │
        │  NotFoundError                               │
        │       │                                      │
        │  ResultDataNotFoundError                     │
        └─────────────────────────────────────────────┘

Examples:
    >>> error = ResultDataNotFoundError("spider.urlsFound")
    >>> error.category
    <ErrorCategory.NOT_FOUND: 'NOT_FOUND'>
    >>> error.with_context(run_id="abc").context.run_id
    'abc'

Tags:
    error-handling, exception-hierarchy, error-context, plan-ledger

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories for classification and routing."""

    VALIDATION = "VALIDATION"  # Bad argument values
    CONFIG = "CONFIG"  # Missing/invalid settings
    NOT_FOUND = "NOT_FOUND"  # Lookup of an absent entry
    INTERNAL = "INTERNAL"  # Bugs, unexpected state
    UNKNOWN = "UNKNOWN"  # Uncategorized errors


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        run_id: Identifier of the automation run (ledger) involved
        job: Name of the job involved, if any
        key: Result-data key involved, if any
        metadata: Additional key-value pairs
    """

    run_id: str | None = None
    job: str | None = None
    key: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for name in ["run_id", "job", "key"]:
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class LedgerError(Exception):
    """
    Base exception for all plan-ledger errors.

    Subclasses set ``default_category`` so callers get a sensible
    classification without passing one explicitly.

    Args:
        message: Human-readable description
        category: Override for the class default category
        context: Structured metadata
        cause: Underlying exception, kept for root cause analysis
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> LedgerError:
        """Add context fields, returning self for chaining.

        Known :class:`ErrorContext` fields are set directly; anything else
        lands in ``context.metadata``.
        """
        for name, value in kwargs.items():
            if name != "metadata" and hasattr(self.context, name):
                setattr(self.context, name, value)
            else:
                self.context.metadata[name] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logging."""
        result: dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
            "context": self.context.to_dict(),
        }
        if self.cause is not None:
            result["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# Validation
# =============================================================================


class ValidationError(LedgerError):
    """An argument value was rejected."""

    default_category = ErrorCategory.VALIDATION


class InvalidSeverityError(ValidationError):
    """A severity name could not be parsed."""

    def __init__(self, value: Any):
        super().__init__(f"Unknown message severity: {value!r}")
        self.value = value


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(LedgerError):
    """Invalid ledger configuration."""

    default_category = ErrorCategory.CONFIG


# =============================================================================
# Lookups
# =============================================================================


class NotFoundError(LedgerError):
    """A requested entry does not exist."""

    default_category = ErrorCategory.NOT_FOUND


class ResultDataNotFoundError(NotFoundError):
    """No job result data is stored under the requested key."""

    def __init__(self, key: str):
        super().__init__(
            f"No job result data for key: {key}",
            context=ErrorContext(key=key),
        )
        self.key = key


def categorize_error(error: BaseException) -> ErrorCategory:
    """Best-effort category for an arbitrary exception."""
    if isinstance(error, LedgerError):
        return error.category
    if isinstance(error, (ValueError, TypeError)):
        return ErrorCategory.VALIDATION
    if isinstance(error, (KeyError, LookupError)):
        return ErrorCategory.NOT_FOUND
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "LedgerError",
    "ValidationError",
    "InvalidSeverityError",
    "ConfigError",
    "NotFoundError",
    "ResultDataNotFoundError",
    "categorize_error",
]
