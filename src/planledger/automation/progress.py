"""
Automation progress - the diagnostics ledger of one automation run.

Jobs in a plan share one message stream and have no way of tagging their
own output. The ledger attributes messages to jobs by position instead:
every time the orchestration loop closes a job boundary, the messages
recorded since the previous close are snapshotted as that job's results.

ARCHITECTURE
────────────
::

    record(ERROR, "E1") ──► errors   [E1]          ──► sink (stderr)
    record(WARNING, "W1") ► warnings [W1]          ──► sink (stdout)
                            all      [E1, W1]      ──► bus "error-message" ...
                                 │
    close_job_boundary(A) ──────►│ slice [mark, len) per severity
                                 ▼
                            results[A] = JobResults(errors=(E1,), warnings=(W1,))
                            run list   = [A]
                            marks      = (1, 1, 0)

PRECONDITION
────────────
Between two consecutive boundary closes only the job about to be closed may
record messages. A job that keeps recording after its close, or two jobs
recording at the same time, get their messages attributed to whichever job
is closed next. The ledger does not detect this.

Every mutation and every multi-field read holds one lock, so concurrent
callers never lose or double count messages across snapshots. Console
mirroring and event publication happen after the lock is released and
their failures are logged, never raised.

Example::

    from planledger.automation import AutomationProgress, JobHandle

    progress = AutomationProgress()
    spider = JobHandle.create("spider")

    with progress.job_scope(spider):
        progress.error("Failed to access URL")
        progress.info("Found 12 URLs")

    progress.errors_for(spider)   # ['Failed to access URL']
    progress.to_map()             # {'errors.count': '1', 'warnings.count': '0', 'infos.count': '1'}

Tags:
    plan-ledger, automation, diagnostics, attribution, watermark

Doc-Types:
    api-reference
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from planledger.automation.jobs import JobHandle
from planledger.automation.messages import Message, Severity
from planledger.automation.results import JobResultData, JobResults, count_map
from planledger.automation.sinks import ConsoleSink, MessageSink
from planledger.core.errors import ResultDataNotFoundError
from planledger.core.events import EventBus, publish_event
from planledger.core.logging import LogContext, get_logger
from planledger.core.settings import LedgerSettings, get_settings

__all__ = ["AutomationProgress"]

log = get_logger(__name__)

EVENT_SOURCE = "automation"


class AutomationProgress:
    """
    Diagnostics ledger for one automation run.

    Create one per run and pass it to every job; discard it when the run
    ends.

    Args:
        settings: Ledger settings (defaults to the cached environment settings)
        sink: Mirror target used when ``output_to_stdout`` is on
            (defaults to a :class:`ConsoleSink`)
        event_bus: Bus for message events (defaults to the global bus)
        run_id: Run identifier (generated if not provided)
    """

    def __init__(
        self,
        *,
        settings: LedgerSettings | None = None,
        sink: MessageSink | None = None,
        event_bus: EventBus | None = None,
        run_id: str | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._sink = sink
        self._event_bus = event_bus
        self.run_id = run_id or str(uuid.uuid4())
        self._output_to_stdout = self._settings.mirror_to_stdout

        self._lock = threading.Lock()
        self._errors: list[str] = []
        self._warnings: list[str] = []
        self._infos: list[str] = []
        self._all_messages: list[Message] = []
        self._run_jobs: list[JobHandle] = []
        self._job_results: dict[JobHandle, JobResults] = {}
        self._job_result_data: dict[str, JobResultData] = {}

        # Message counts at the last job boundary close
        self._error_mark = 0
        self._warning_mark = 0
        self._info_mark = 0

    # =========================================================================
    # Recording
    # =========================================================================

    def record(self, severity: Severity | str, text: str) -> None:
        """Record a message and mirror/publish it.

        Raises:
            InvalidSeverityError: if *severity* names no severity
        """
        severity = Severity.parse(severity)

        with self._lock:
            self._sequence(severity).append(text)
            self._all_messages.append(Message(severity, text))

        if self._output_to_stdout:
            self._mirror(severity, text)
        if self._settings.publish_events:
            publish_event(
                severity.topic,
                EVENT_SOURCE,
                {"message": text},
                correlation_id=self.run_id,
                bus=self._event_bus,
                timeout=self._settings.publish_timeout,
            )

    def error(self, text: str) -> None:
        self.record(Severity.ERROR, text)

    def warn(self, text: str) -> None:
        self.record(Severity.WARNING, text)

    def info(self, text: str) -> None:
        self.record(Severity.INFO, text)

    def _sequence(self, severity: Severity) -> list[str]:
        if severity is Severity.ERROR:
            return self._errors
        if severity is Severity.WARNING:
            return self._warnings
        return self._infos

    def _mirror(self, severity: Severity, text: str) -> None:
        if self._sink is None:
            self._sink = ConsoleSink()
        try:
            self._sink.write(severity, text)
        except Exception as e:
            log.warning(
                "message_mirror_failed",
                run_id=self.run_id,
                severity=severity.value,
                error=str(e),
            )

    # =========================================================================
    # Mirroring toggle
    # =========================================================================

    @property
    def output_to_stdout(self) -> bool:
        return self._output_to_stdout

    @output_to_stdout.setter
    def output_to_stdout(self, value: bool) -> None:
        self._output_to_stdout = bool(value)

    # =========================================================================
    # Global queries
    # =========================================================================

    @property
    def errors(self) -> list[str]:
        with self._lock:
            return list(self._errors)

    @property
    def warnings(self) -> list[str]:
        with self._lock:
            return list(self._warnings)

    @property
    def infos(self) -> list[str]:
        with self._lock:
            return list(self._infos)

    @property
    def all_messages(self) -> list[str]:
        """All message texts in emission order, across severities."""
        with self._lock:
            return [m.text for m in self._all_messages]

    @property
    def messages(self) -> list[Message]:
        """All messages with their severities, in emission order."""
        with self._lock:
            return list(self._all_messages)

    def has_errors(self) -> bool:
        return len(self._errors) > 0

    def has_warnings(self) -> bool:
        return len(self._warnings) > 0

    def to_map(self) -> dict[str, str]:
        """Run-wide counts keyed ``errors.count``, ``warnings.count``, ``infos.count``."""
        with self._lock:
            return count_map(len(self._errors), len(self._warnings), len(self._infos))

    # =========================================================================
    # Job attribution
    # =========================================================================

    def close_job_boundary(self, job: JobHandle) -> JobResults:
        """Attribute every message recorded since the last close to *job*.

        Call once per job, right after it finishes. Closing the same handle
        again replaces its stored results with the newer slice and lists the
        handle a second time in :meth:`all_closed_jobs`.

        Returns:
            The results snapshot stored for *job*.
        """
        with self._lock:
            results = JobResults.of(
                self._errors[self._error_mark:],
                self._warnings[self._warning_mark:],
                self._infos[self._info_mark:],
            )
            self._job_results[job] = results
            self._run_jobs.append(job)

            self._error_mark = len(self._errors)
            self._warning_mark = len(self._warnings)
            self._info_mark = len(self._infos)

        log.info(
            "job_boundary_closed",
            run_id=self.run_id,
            job=job.name,
            job_id=job.job_id,
            errors=len(results.errors),
            warnings=len(results.warnings),
            infos=len(results.infos),
        )
        return results

    @contextmanager
    def job_scope(self, job: JobHandle) -> Iterator[AutomationProgress]:
        """Run a block as *job*, closing its boundary on exit.

        The boundary is closed even if the block raises; the exception
        propagates unchanged.
        """
        with LogContext(run_id=self.run_id, job=job.name, job_id=job.job_id):
            try:
                yield self
            finally:
                self.close_job_boundary(job)

    def all_closed_jobs(self) -> list[JobHandle]:
        """Jobs in the order their boundaries were closed, duplicates included."""
        with self._lock:
            return list(self._run_jobs)

    def results_for(self, job: JobHandle) -> JobResults:
        """Results attributed to *job*; empty if it was never closed."""
        with self._lock:
            results = self._job_results.get(job)
        return results if results is not None else JobResults.empty()

    def errors_for(self, job: JobHandle) -> list[str]:
        return list(self.results_for(job).errors)

    def warnings_for(self, job: JobHandle) -> list[str]:
        return list(self.results_for(job).warnings)

    def infos_for(self, job: JobHandle) -> list[str]:
        return list(self.results_for(job).infos)

    # =========================================================================
    # Job result data
    # =========================================================================

    def put_result_data(self, entry: JobResultData) -> None:
        """Insert or overwrite the entry stored under ``entry.key``."""
        with self._lock:
            self._job_result_data[entry.key] = entry

    def put_all_result_data(self, entries: Iterable[JobResultData]) -> None:
        """Store entries in order; later entries win on duplicate keys."""
        with self._lock:
            for entry in entries:
                self._job_result_data[entry.key] = entry

    def get_result_data(self, key: str) -> JobResultData | None:
        with self._lock:
            return self._job_result_data.get(key)

    def require_result_data(self, key: str) -> JobResultData:
        """Like :meth:`get_result_data` but raises when *key* is absent.

        Raises:
            ResultDataNotFoundError: if nothing is stored under *key*
        """
        entry = self.get_result_data(key)
        if entry is None:
            raise ResultDataNotFoundError(key).with_context(run_id=self.run_id)
        return entry

    def all_result_data(self) -> list[JobResultData]:
        """Current entries. Order is unspecified."""
        with self._lock:
            return list(self._job_result_data.values())

    def summary(self) -> dict[str, Any]:
        """Run-wide counts plus per-job results, in closing order."""
        with self._lock:
            jobs = [
                {**job.to_dict(), **self._job_results[job].to_map()}
                for job in dict.fromkeys(self._run_jobs)
            ]
            counts = count_map(len(self._errors), len(self._warnings), len(self._infos))
        return {"run_id": self.run_id, **counts, "jobs": jobs}
