"""
Per-job results and keyed job result data.

``JobResults`` is the snapshot of messages attributed to one job when its
boundary was closed. ``JobResultData`` is a keyed artifact a job hands to
the run summary (e.g. the number of URLs a spider found).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any


def count_map(errors: int, warnings: int, infos: int) -> dict[str, str]:
    """Summary map with string-encoded severity counts."""
    return {
        "errors.count": str(errors),
        "warnings.count": str(warnings),
        "infos.count": str(infos),
    }


@dataclass(frozen=True)
class JobResults:
    """
    Messages attributed to one job.

    Attributes:
        errors: Error texts emitted by the job, in order
        warnings: Warning texts emitted by the job, in order
        infos: Info texts emitted by the job, in order
    """

    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    infos: tuple[str, ...] = ()

    @classmethod
    def of(
        cls,
        errors: Iterable[str] = (),
        warnings: Iterable[str] = (),
        infos: Iterable[str] = (),
    ) -> JobResults:
        """Build from any iterables, freezing them as tuples."""
        return cls(tuple(errors), tuple(warnings), tuple(infos))

    @classmethod
    def empty(cls) -> JobResults:
        return cls()

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def message_count(self) -> int:
        return len(self.errors) + len(self.warnings) + len(self.infos)

    def to_map(self) -> dict[str, str]:
        """Counts keyed ``errors.count``, ``warnings.count``, ``infos.count``."""
        return count_map(len(self.errors), len(self.warnings), len(self.infos))

    def to_dict(self) -> dict[str, Any]:
        """Serialize for reports."""
        return {
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "infos": list(self.infos),
        }


@dataclass(frozen=True)
class JobResultData:
    """
    A keyed result artifact contributed by a job.

    Keys are global to the ledger; prefix them with the job type
    (``"spider.urlsFound"``) to avoid clobbering another job's data.

    Attributes:
        key: Store key
        data: Opaque payload
        name: Human-readable label, defaults to the key
    """

    key: str
    data: Any = None
    name: str = field(default="")

    def __post_init__(self):
        if not self.name:
            object.__setattr__(self, "name", self.key)
