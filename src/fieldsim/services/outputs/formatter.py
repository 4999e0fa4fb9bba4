"""Utilities to serialize simulation results into CSV/JSON artifacts."""

from __future__ import annotations

import csv
import io
from typing import Sequence

from ...config import settings
from ...models.domain import CompletedJobRecord, Job, Unit
from ...schemas.simulation import SimulationSummary
from ..geospatial import haversine_km

JOB_REPORT_FIELDS = [
    "job_id",
    "job_type",
    "activity_type",
    "priority",
    "created_at",
    "duration_minutes",
    "suburb",
    "postcode",
    "unit_id",
    "unit_district",
    "idle_seconds",
    "queue_wait_seconds",
    "travel_minutes",
    "straight_line_km",
    "end_at",
    "compliant",
]


def _format_km(value: float | None) -> str:
    return "" if value is None else f"{value:.2f}"


def summary_to_json(summary: SimulationSummary) -> dict:
    return summary.model_dump(mode="json")


def completed_jobs_to_csv(
    records: Sequence[CompletedJobRecord],
    summary: SimulationSummary,
    compliance_seconds: int | None = None,
) -> str:
    """One row per completed job followed by the run's summary lines."""
    window = compliance_seconds or settings.compliance_seconds
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=JOB_REPORT_FIELDS, lineterminator="\n")
    writer.writeheader()
    for record in records:
        job, unit = record.job, record.unit
        writer.writerow(
            {
                "job_id": job.job_id,
                "job_type": job.job_type,
                "activity_type": job.activity_type,
                "priority": job.priority,
                "created_at": job.created_at.isoformat(sep=" "),
                "duration_minutes": job.duration_minutes,
                "suburb": job.suburb,
                "postcode": job.postcode,
                "unit_id": unit.unit_id,
                "unit_district": unit.district or "",
                "idle_seconds": job.idle_seconds,
                "queue_wait_seconds": job.queue_wait_seconds,
                "travel_minutes": job.travel_seconds // 60,
                "straight_line_km": _format_km(_straight_line_km(unit, job)),
                "end_at": job.end_at.isoformat(sep=" ") if job.end_at else "",
                "compliant": job.travel_seconds + job.idle_seconds < window,
            }
        )

    plain = csv.writer(buffer, lineterminator="\n")
    plain.writerow([f"Compliance Rate: {summary.compliance_rate:.0f}%"])
    plain.writerow([f"Average Travel Time Mins: {summary.average_travel_minutes}"])
    plain.writerow([f"Incomplete Jobs: {summary.incomplete_jobs}"])
    return buffer.getvalue()


def _straight_line_km(unit: Unit, job: Job) -> float | None:
    location = job.location
    if location is None:
        return None
    return haversine_km(unit.latitude, unit.longitude, location.latitude, location.longitude)


def units_to_csv(units: Sequence[Unit]) -> str:
    """Per-unit workload for the simulated day."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["unit_id", "district", "jobs_completed", "job_ids", "total_straight_line_km"])
    for unit in units:
        distances = [_straight_line_km(unit, job) for job in unit.jobs_today]
        writer.writerow(
            [
                unit.unit_id,
                unit.district or "",
                len(unit.jobs_today),
                ";".join(job.job_id for job in unit.jobs_today),
                f"{sum(d for d in distances if d is not None):.2f}",
            ]
        )
    return buffer.getvalue()
