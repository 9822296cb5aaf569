"""
plan-ledger automation - diagnostics ledger for multi-job automation runs.

ARCHITECTURE
────────────
::

    AutomationProgress      ─ the ledger: record, attribute, query
      ├── Severity/Message  ─ ERROR / WARNING / INFO records
      ├── JobHandle         ─ opaque job identity (id-based equality)
      ├── JobResults        ─ per-job snapshot of attributed messages
      ├── JobResultData     ─ keyed result artifacts for run summaries
      └── MessageSink       ─ optional console mirroring

MODULE MAP
──────────
1. messages.py  ─ Severity, Message, event topic names
2. jobs.py      ─ JobHandle
3. results.py   ─ JobResults, JobResultData
4. sinks.py     ─ ConsoleSink, CollectingSink
5. progress.py  ─ AutomationProgress
"""

from planledger.automation.jobs import JobHandle
from planledger.automation.messages import (
    PLAN_ERROR_MESSAGE,
    PLAN_INFO_MESSAGE,
    PLAN_WARNING_MESSAGE,
    Message,
    Severity,
)
from planledger.automation.progress import AutomationProgress
from planledger.automation.results import JobResultData, JobResults
from planledger.automation.sinks import CollectingSink, ConsoleSink, MessageSink

__all__ = [
    "AutomationProgress",
    "JobHandle",
    "JobResults",
    "JobResultData",
    "Message",
    "Severity",
    "MessageSink",
    "ConsoleSink",
    "CollectingSink",
    "PLAN_ERROR_MESSAGE",
    "PLAN_WARNING_MESSAGE",
    "PLAN_INFO_MESSAGE",
]
