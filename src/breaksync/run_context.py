"""Identity and timing of one reconciliation job run."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class RunContext:
    """Names a job run in logs and reports.

    ``run_id`` is the start time as an ISO-8601 UTC timestamp with
    millisecond precision, e.g. ``2024-01-01T00:00:00.000Z``.
    """

    job_name: str
    started_at: datetime

    @property
    def run_id(self) -> str:
        return (
            self.started_at.astimezone(timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )

    def elapsed_seconds(self, now: datetime | None = None) -> float:
        now = now or datetime.now(timezone.utc)
        return (now - self.started_at).total_seconds()

    @classmethod
    def create(cls, job_name: str) -> "RunContext":
        return cls(job_name=job_name, started_at=datetime.now(timezone.utc))


__all__ = ["RunContext"]
