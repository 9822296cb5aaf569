"""Message severities and the immutable message record."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from planledger.core.errors import InvalidSeverityError

# Event topics, one per severity
PLAN_ERROR_MESSAGE = "error-message"
PLAN_WARNING_MESSAGE = "warning-message"
PLAN_INFO_MESSAGE = "info-message"


class Severity(str, Enum):
    """Classification of a recorded message."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    @property
    def topic(self) -> str:
        """Event topic messages of this severity are published on."""
        return _TOPICS[self]

    @classmethod
    def parse(cls, value: Any) -> Severity:
        """Coerce a :class:`Severity` or a case-insensitive name.

        ``"warn"`` is accepted as an alias for ``WARNING``.

        Raises:
            InvalidSeverityError: if *value* names no severity
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().upper()
            if name == "WARN":
                name = "WARNING"
            try:
                return cls(name)
            except ValueError:
                pass
        raise InvalidSeverityError(value)


_TOPICS = {
    Severity.ERROR: PLAN_ERROR_MESSAGE,
    Severity.WARNING: PLAN_WARNING_MESSAGE,
    Severity.INFO: PLAN_INFO_MESSAGE,
}


@dataclass(frozen=True, slots=True)
class Message:
    """One recorded message, in emission order within the combined stream."""

    severity: Severity
    text: str

    def __str__(self) -> str:
        return self.text
