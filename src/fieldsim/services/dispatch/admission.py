"""Moves jobs from the backlog pool into the active queue."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime

from ...models.domain import Job
from .queue import ActiveQueue

logger = logging.getLogger(__name__)


def seconds_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds())


@dataclass(slots=True)
class AdmissionReport:
    """What happened to the backlog during one tick."""

    queued: list[Job] = field(default_factory=list)
    idled: list[Job] = field(default_factory=list)
    promoted: Job | None = None


def admit_jobs(
    now: datetime,
    job_pool: list[Job],
    idle_jobs: deque[Job],
    queue: ActiveQueue,
    units_free: int,
) -> AdmissionReport:
    """Apply one tick of admission rules.

    Due jobs (``created_at <= now``) are visited in pool order. With no free
    unit they go to the idle backlog. With a free unit and a non-empty idle
    backlog, the head of the backlog is promoted instead and admission stops
    for the tick, leaving the arriving job in the pool. At most one idle job is
    promoted per tick.
    """
    report = AdmissionReport()
    leaving: set[int] = set()

    # The pool is ordered by creation time, so the first future job ends the scan.
    for job in job_pool:
        if job.created_at > now:
            break
        if units_free == 0:
            idle_jobs.append(job)
            leaving.add(id(job))
            report.idled.append(job)
            continue
        if idle_jobs:
            break
        job.idle_seconds = seconds_between(job.created_at, now)
        queue.push(job)
        leaving.add(id(job))
        report.queued.append(job)

    if units_free > 0 and idle_jobs:
        promoted = idle_jobs.popleft()
        promoted.idle_seconds = seconds_between(promoted.created_at, now)
        queue.push(promoted)
        report.promoted = promoted
        logger.debug(f"Job {promoted.job_id} promoted from idle backlog after {promoted.idle_seconds}s")

    if leaving:
        job_pool[:] = [job for job in job_pool if id(job) not in leaving]
    return report
