"""Tests for planledger.automation.messages — Severity parsing and topics."""

import pytest

from planledger.automation.messages import (
    PLAN_ERROR_MESSAGE,
    PLAN_INFO_MESSAGE,
    PLAN_WARNING_MESSAGE,
    Message,
    Severity,
)
from planledger.core.errors import ErrorCategory, InvalidSeverityError, ValidationError


class TestSeverityParse:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (Severity.ERROR, Severity.ERROR),
            ("ERROR", Severity.ERROR),
            ("error", Severity.ERROR),
            ("warn", Severity.WARNING),
            ("Warning", Severity.WARNING),
            (" info ", Severity.INFO),
        ],
    )
    def test_accepted_values(self, value, expected):
        assert Severity.parse(value) is expected

    @pytest.mark.parametrize("value", ["fatal", "", None, 3])
    def test_rejected_values(self, value):
        with pytest.raises(InvalidSeverityError) as exc_info:
            Severity.parse(value)

        assert isinstance(exc_info.value, ValidationError)
        assert exc_info.value.category == ErrorCategory.VALIDATION
        assert exc_info.value.value == value


class TestSeverityTopics:
    def test_topic_names(self):
        assert Severity.ERROR.topic == PLAN_ERROR_MESSAGE == "error-message"
        assert Severity.WARNING.topic == PLAN_WARNING_MESSAGE == "warning-message"
        assert Severity.INFO.topic == PLAN_INFO_MESSAGE == "info-message"


class TestMessage:
    def test_frozen(self):
        msg = Message(Severity.INFO, "hello")
        with pytest.raises(AttributeError):
            msg.text = "changed"  # type: ignore[misc]

    def test_str_is_text(self):
        assert str(Message(Severity.ERROR, "boom")) == "boom"

    def test_value_equality(self):
        assert Message(Severity.ERROR, "boom") == Message(Severity.ERROR, "boom")
        assert Message(Severity.ERROR, "boom") != Message(Severity.WARNING, "boom")
