"""
Mirrored output sinks.

When mirroring is on, the ledger writes every recorded message to a
``MessageSink`` as well as storing it. Errors go to the sink's error
channel; warnings and infos to its info channel.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from rich.console import Console

from planledger.automation.messages import Message, Severity

__all__ = ["MessageSink", "ConsoleSink", "CollectingSink"]


@runtime_checkable
class MessageSink(Protocol):
    """Write target for mirrored messages."""

    def write(self, severity: Severity, text: str) -> None:
        ...


class ConsoleSink:
    """Mirror messages to the terminal.

    Errors are printed to stderr, warnings and infos to stdout. Message text
    is printed verbatim (no rich markup or highlighting).
    """

    def __init__(
        self,
        console: Console | None = None,
        err_console: Console | None = None,
    ) -> None:
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    def write(self, severity: Severity, text: str) -> None:
        if severity is Severity.ERROR:
            self.err_console.print(text, style="red", markup=False, highlight=False)
        elif severity is Severity.WARNING:
            self.console.print(text, style="yellow", markup=False, highlight=False)
        else:
            self.console.print(text, markup=False, highlight=False)


class CollectingSink:
    """Keep mirrored messages in memory, split by channel."""

    def __init__(self) -> None:
        self.messages: list[Message] = []

    def write(self, severity: Severity, text: str) -> None:
        self.messages.append(Message(severity, text))

    @property
    def error_lines(self) -> list[str]:
        return [m.text for m in self.messages if m.severity is Severity.ERROR]

    @property
    def info_lines(self) -> list[str]:
        return [m.text for m in self.messages if m.severity is not Severity.ERROR]
