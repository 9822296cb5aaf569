"""
plan-ledger - diagnostics ledger for multi-step automation runs.

Records error, warning and info messages emitted while a plan's jobs run
and attributes each message to the job that produced it.
"""

__version__ = "0.1.0"

from planledger.automation import (  # noqa: E402
    AutomationProgress,
    JobHandle,
    JobResultData,
    JobResults,
    Severity,
)

__all__ = [
    "AutomationProgress",
    "JobHandle",
    "JobResultData",
    "JobResults",
    "Severity",
    "__version__",
]
