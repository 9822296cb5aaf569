"""
Job handles - opaque identities for executed plan steps.

A job handle is compared by its ``job_id`` only: two handles built for
jobs with the same name are still different jobs. Ids come from a
process-wide monotonically increasing counter so that handles created by
concurrent runs in one process never collide.

Example::

    from planledger.automation import JobHandle

    spider = JobHandle.create("spider", job_type="spider")
    again = JobHandle.create("spider", job_type="spider")
    assert spider != again
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any

_job_ids = itertools.count(1)


def _next_job_id() -> int:
    return next(_job_ids)


@dataclass(frozen=True)
class JobHandle:
    """
    Identity of one job in an automation run.

    Attributes:
        name: Display name of the job (e.g. ``"spider"``, ``"passiveScan-wait"``)
        job_type: Job type, used by convention to namespace result-data keys
        job_id: Unique id assigned at creation
    """

    # Identity is the id alone
    name: str = field(compare=False)
    job_type: str = field(default="", compare=False)
    job_id: int = field(default_factory=_next_job_id)

    @classmethod
    def create(cls, name: str, job_type: str = "") -> JobHandle:
        """Create a handle with a fresh id."""
        return cls(name=name, job_type=job_type)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logs and reports."""
        return {"job_id": self.job_id, "name": self.name, "job_type": self.job_type}
