"""Reconciliation jobs: configured file sources driven through a Synchronization."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .config import JobConfig
from .readers import build_keyer, ensure_ordered, open_records
from .rupture import Rupture, identity, truncate
from .run_context import RunContext
from .source import Source
from .sync import Synchronization

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepRecord:
    number: int
    key: str
    synchronized: Tuple[str, ...]
    breaks: Tuple[str, ...]


@dataclass
class JobReport:
    """Counters collected over one job run."""

    job_name: str
    run_id: str
    source_names: Tuple[str, ...]
    rupture_names: Tuple[str, ...]
    steps: int = 0
    matched: int = 0
    elapsed_seconds: float = 0.0
    synchronized: Dict[str, int] = field(default_factory=dict)
    breaks: Dict[str, int] = field(default_factory=dict)
    step_records: List[StepRecord] = field(default_factory=list)


def build_synchronization(config: JobConfig) -> Tuple[Synchronization, Tuple[str, ...]]:
    ruptures = {
        rupture.name: Rupture(
            rupture.name,
            identity if rupture.width is None else truncate(rupture.width),
        )
        for rupture in config.ruptures
    }
    # Declaration order is the cascade order: earlier ruptures are outer groups.
    synchronization = Synchronization().add_ruptures(*ruptures.values())
    names = []
    for source_config in config.sources:
        keyer = build_keyer(source_config.key)
        records = open_records(source_config)
        if config.check_order:
            records = ensure_ordered(records, keyer, source_config.name)
        rupture = ruptures[source_config.rupture] if source_config.rupture else None
        synchronization.add_sources(Source.from_iterable(records, keyer, rupture))
        names.append(source_config.name)
    return synchronization, tuple(names)


def run_job(
    config: JobConfig,
    run_context: Optional[RunContext] = None,
    keep_steps: bool = False,
) -> JobReport:
    run_context = run_context or RunContext.create(config.name)
    synchronization, names = build_synchronization(config)
    report = JobReport(
        job_name=run_context.job_name,
        run_id=run_context.run_id,
        source_names=names,
        rupture_names=tuple(rupture.name for rupture in synchronization.ruptures),
        synchronized={name: 0 for name in names},
    )
    report.breaks = {name: 0 for name in report.rupture_names}
    logger.info("Running job %s run_id=%s", run_context.job_name, run_context.run_id)

    for step in synchronization.steps():
        report.steps += 1
        if step.all_synchronized:
            report.matched += 1
        synced = tuple(name for index, name in enumerate(names) if step.is_synchronized(index))
        for name in synced:
            report.synchronized[name] += 1
        broken = tuple(
            name for name, (_, last) in zip(report.rupture_names, step.edges) if last
        )
        for name in broken:
            report.breaks[name] += 1
        if keep_steps:
            report.step_records.append(
                StepRecord(number=step.number, key=str(step.key), synchronized=synced, breaks=broken)
            )

    report.elapsed_seconds = run_context.elapsed_seconds()
    logger.info(
        "Job %s complete | steps=%s matched=%s run_id=%s elapsed=%.3fs",
        run_context.job_name,
        report.steps,
        report.matched,
        run_context.run_id,
        report.elapsed_seconds,
    )
    return report


__all__ = ["JobReport", "StepRecord", "build_synchronization", "run_job"]
