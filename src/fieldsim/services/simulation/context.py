"""State owned by a single simulation run."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable

from ...models.domain import CompletedJobRecord, Job, Unit
from ..dispatch.queue import ActiveQueue


@dataclass
class SimulationContext:
    """Pools, queues and counters for one run; nothing here is shared between runs."""

    job_pool: list[Job]
    all_units: tuple[Unit, ...]
    idle_jobs: deque[Job] = field(default_factory=deque)
    queue: ActiveQueue = field(default_factory=ActiveQueue)
    available_units: list[Unit] = field(default_factory=list)
    busy_units: list[Unit] = field(default_factory=list)
    on_duty: set[str] = field(default_factory=set)
    completed: list[CompletedJobRecord] = field(default_factory=list)
    compliant_jobs: int = 0
    total_travel_seconds: int = 0

    @classmethod
    def create(cls, jobs: Iterable[Job], units: Iterable[Unit]) -> "SimulationContext":
        return cls(
            job_pool=sorted(jobs, key=lambda job: job.created_at),
            all_units=tuple(units),
        )

    @property
    def is_drained(self) -> bool:
        return not (self.job_pool or self.idle_jobs or len(self.queue) or self.busy_units)

    @property
    def incomplete_jobs(self) -> int:
        return len(self.idle_jobs) + len(self.queue)
