"""Tests for planledger.automation.sinks — console and collecting sinks."""

import io

from rich.console import Console

from planledger.automation.messages import Message, Severity
from planledger.automation.sinks import CollectingSink, ConsoleSink, MessageSink


def _console(buffer: io.StringIO) -> Console:
    return Console(file=buffer, force_terminal=False, color_system=None, width=200)


class TestConsoleSink:
    def test_errors_go_to_error_console(self):
        out, err = io.StringIO(), io.StringIO()
        sink = ConsoleSink(console=_console(out), err_console=_console(err))

        sink.write(Severity.ERROR, "Failed to access URL")

        assert err.getvalue() == "Failed to access URL\n"
        assert out.getvalue() == ""

    def test_warnings_and_infos_go_to_console(self):
        out, err = io.StringIO(), io.StringIO()
        sink = ConsoleSink(console=_console(out), err_console=_console(err))

        sink.write(Severity.WARNING, "W1")
        sink.write(Severity.INFO, "I1")

        assert out.getvalue() == "W1\nI1\n"
        assert err.getvalue() == ""

    def test_markup_is_not_interpreted(self):
        out = io.StringIO()
        sink = ConsoleSink(console=_console(out), err_console=_console(io.StringIO()))

        sink.write(Severity.INFO, "[bold]not bold[/bold]")

        assert out.getvalue() == "[bold]not bold[/bold]\n"

    def test_satisfies_protocol(self):
        assert isinstance(ConsoleSink(), MessageSink)


class TestCollectingSink:
    def test_collects_in_order(self):
        sink = CollectingSink()
        sink.write(Severity.INFO, "I1")
        sink.write(Severity.ERROR, "E1")
        sink.write(Severity.WARNING, "W1")

        assert sink.messages == [
            Message(Severity.INFO, "I1"),
            Message(Severity.ERROR, "E1"),
            Message(Severity.WARNING, "W1"),
        ]
        assert sink.error_lines == ["E1"]
        assert sink.info_lines == ["I1", "W1"]

    def test_satisfies_protocol(self):
        assert isinstance(CollectingSink(), MessageSink)
