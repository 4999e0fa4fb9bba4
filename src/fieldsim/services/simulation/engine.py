"""Second-by-second dispatch simulation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional

from ...config import settings
from ...exceptions import SimulationAborted
from ...models.domain import CompletedJobRecord, Coordinate, Job, Unit, UnitStatus
from ...schemas.simulation import SimulationSummary
from ..dispatch.admission import admit_jobs, seconds_between
from ..dispatch.lifecycle import mark_busy, release_finished_units
from ..dispatch.matching import DispatchStatus, Dispatcher
from ..routing.client import RoutingProvider
from .context import SimulationContext

logger = logging.getLogger(__name__)

ONE_SECOND = timedelta(seconds=1)

TickObserver = Callable[[datetime, SimulationContext], None]


@dataclass(slots=True)
class SimulationResult:
    context: SimulationContext
    summary: Optional[SimulationSummary]
    started_at: datetime
    finished_at: datetime
    ticks: int


class Simulation:
    """Runs the dispatch loop over a ``SimulationContext``.

    Each tick refreshes the roster at the start of day, admits jobs, dispatches
    every unassigned queued job, reaps finished jobs, releases finished units
    and advances the clock by one second.
    """

    def __init__(
        self,
        context: SimulationContext,
        routing: RoutingProvider,
        roster: Callable[[date], list[Unit]],
        *,
        compliance_seconds: int | None = None,
        day_start: time | None = None,
        max_distance: float | None = None,
        observer: TickObserver | None = None,
    ) -> None:
        self.context = context
        self.roster = roster
        self.compliance_seconds = compliance_seconds or settings.compliance_seconds
        self.day_start = day_start or settings.day_start
        self.dispatcher = Dispatcher(
            routing,
            time_budget_seconds=self.compliance_seconds,
            max_distance=max_distance,
        )
        self.observer = observer
        self._next_day: date | None = None

    def run(self, start: datetime, end: datetime) -> SimulationResult:
        ctx = self.context
        # A run starting before day_start still refreshes at that boundary on the same date.
        if start.time() >= self.day_start:
            self._next_day = start.date() + timedelta(days=1)
        else:
            self._next_day = start.date()
        self._load_roster(start.date())
        logger.info(
            f"Simulating {len(ctx.job_pool)} jobs with {len(ctx.available_units)} units "
            f"from {start:%Y-%m-%d %H:%M:%S} to {end:%Y-%m-%d %H:%M:%S}"
        )

        now = start
        ticks = 0
        while now < end:
            if now.time() == self.day_start:
                self._check_day(now.date())
            admit_jobs(now, ctx.job_pool, ctx.idle_jobs, ctx.queue, len(ctx.available_units))
            self._dispatch_pending(now)
            self._reap_completed(now)
            release_finished_units(now, ctx.available_units, ctx.busy_units, ctx.on_duty)
            if self.observer is not None:
                self.observer(now, ctx)

            now += ONE_SECOND
            ticks += 1
            if ctx.is_drained:
                end = now

        summary = self._summarise(start, now, ticks)
        return SimulationResult(context=ctx, summary=summary, started_at=start, finished_at=now, ticks=ticks)

    def _load_roster(self, day: date) -> None:
        ctx = self.context
        ctx.available_units.clear()
        ctx.on_duty.clear()
        for unit in self.roster(day):
            ctx.on_duty.add(unit.unit_id)
            if unit.status is UnitStatus.BUSY:
                continue
            ctx.available_units.append(unit)

    def _check_day(self, today: date) -> None:
        if today == self._next_day:
            self._load_roster(today)
            self._next_day = today + timedelta(days=1)
            logger.info(f"Roster refreshed for {today:%Y-%m-%d}: {len(self.context.available_units)} units available")

    def _dispatch_pending(self, now: datetime) -> None:
        ctx = self.context
        for job in ctx.queue.pending():
            if not ctx.available_units:
                break
            outcome = self.dispatcher.dispatch(job, now, ctx.available_units)
            if outcome.status is DispatchStatus.ROUTING_FAILED:
                raise SimulationAborted(f"Routing failed for job {job.job_id}") from outcome.error
            if outcome.status is DispatchStatus.NO_MATCH:
                logger.debug(f"No eligible unit for job {job.job_id}")
                continue
            self._assign(job, outcome.unit, now, outcome.travel_seconds, outcome.location)

    def _assign(
        self, job: Job, unit: Unit, now: datetime, travel_seconds: int, location: Coordinate | None = None
    ) -> None:
        ctx = self.context
        # Backlog idle time is fixed at admission; anything beyond it was spent waiting in the queue.
        job.queue_wait_seconds = max(0, seconds_between(job.created_at, now) - job.idle_seconds)
        job.location = location
        job.travel_seconds = travel_seconds
        job.assigned_unit = unit
        job.end_at = job.compute_end()
        # The unit drives back to its standby position after the job.
        mark_busy(unit, job.end_at + timedelta(seconds=travel_seconds), ctx.available_units, ctx.busy_units)
        ctx.total_travel_seconds += travel_seconds
        if travel_seconds + job.idle_seconds < self.compliance_seconds:
            ctx.compliant_jobs += 1

    def _reap_completed(self, now: datetime) -> None:
        ctx = self.context
        for job in ctx.queue.pop_completed(now):
            unit = job.assigned_unit
            ctx.completed.append(CompletedJobRecord(unit=unit, job=job))
            unit.jobs_today.append(job)
            logger.debug(f"Job {job.job_id} completed by unit {unit.unit_id}")

    def _summarise(self, start: datetime, finished: datetime, ticks: int) -> Optional[SimulationSummary]:
        ctx = self.context
        completed = len(ctx.completed)
        if completed == 0:
            logger.warning("No completed jobs")
            return None
        incomplete = ctx.incomplete_jobs
        return SimulationSummary(
            jobs_completed=completed,
            incomplete_jobs=incomplete,
            compliant_jobs=ctx.compliant_jobs,
            average_travel_seconds=ctx.total_travel_seconds // completed,
            compliance_rate=ctx.compliant_jobs / (completed + incomplete) * 100,
            started_at=start,
            finished_at=finished,
            ticks=ticks,
        )


def default_window(jobs: list[Job], day_start: time | None = None) -> tuple[datetime, datetime]:
    """Start at the day-start time on the first job's date; end a day after the last job."""
    if not jobs:
        raise ValueError("Cannot derive a simulation window from an empty job pool.")
    ordered = sorted(jobs, key=lambda job: job.created_at)
    start = datetime.combine(ordered[0].created_at.date(), day_start or settings.day_start)
    end = ordered[-1].created_at + timedelta(days=1)
    return start, end


def run_simulation(
    jobs: list[Job],
    units: list[Unit],
    routing: RoutingProvider,
    roster: Callable[[date], list[Unit]],
    *,
    start: datetime | None = None,
    end: datetime | None = None,
    **kwargs,
) -> SimulationResult:
    context = SimulationContext.create(jobs, units)
    default_start, default_end = default_window(context.job_pool, kwargs.get("day_start"))
    simulation = Simulation(context, routing, roster, **kwargs)
    return simulation.run(start or default_start, end or default_end)
