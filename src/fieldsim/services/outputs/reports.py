"""Persist the artifacts of a finished simulation run."""

from __future__ import annotations

import logging
from pathlib import Path

from ...persistence.filesystem import FileStorage
from ..simulation.engine import SimulationResult
from .formatter import completed_jobs_to_csv, summary_to_json, units_to_csv

logger = logging.getLogger(__name__)


def write_reports(
    result: SimulationResult,
    job_report: Path,
    unit_report: Path,
    *,
    compliance_seconds: int | None = None,
    storage: FileStorage | None = None,
) -> list[Path]:
    """Write the job report, its JSON summary and the unit report.

    Returns the written paths. Nothing is written for a run without completions.
    """
    if result.summary is None:
        logger.warning("No completed jobs; skipping report generation")
        return []

    storage = storage or FileStorage()
    context = result.context
    written = [
        storage.write_csv(job_report, completed_jobs_to_csv(context.completed, result.summary, compliance_seconds)),
        storage.write_json(job_report.with_suffix(".summary.json"), summary_to_json(result.summary)),
        storage.write_csv(unit_report, units_to_csv(context.all_units)),
    ]
    logger.info(f"Run successful. Output written to {written[0]} and {written[2]}")
    return written
