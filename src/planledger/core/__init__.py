"""plan-ledger core -- errors, logging, settings and events.

Architecture::

    errors.py      Structured error hierarchy (LedgerError and subclasses)
    logging.py     structlog configuration and context binding
    settings.py    LedgerSettings (pydantic-settings, PLANLEDGER_ env prefix)
    events/        Event model, EventBus protocol, in-memory bus
"""

from planledger.core.errors import (
    ConfigError,
    ErrorCategory,
    ErrorContext,
    InvalidSeverityError,
    LedgerError,
    NotFoundError,
    ResultDataNotFoundError,
    ValidationError,
)
from planledger.core.logging import configure_logging, get_logger
from planledger.core.settings import LedgerSettings, get_settings, load_settings

__all__ = [
    "ConfigError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidSeverityError",
    "LedgerError",
    "NotFoundError",
    "ResultDataNotFoundError",
    "ValidationError",
    "configure_logging",
    "get_logger",
    "LedgerSettings",
    "get_settings",
    "load_settings",
]
