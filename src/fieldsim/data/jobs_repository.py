"""Data access helpers for loading the job backlog."""

from __future__ import annotations

import csv
import logging
from datetime import datetime, time
from pathlib import Path
from typing import Optional, Sequence

from ..config import settings
from ..models.domain import Job

logger = logging.getLogger(__name__)

# Positional layout of the job extract.
JOB_COLUMNS = (
    "job_id",
    "job_type",
    "job_description",
    "issue_code",
    "issue_description",
    "activity_type",
    "activity_description",
    "date",
    "time",
    "priority",
    "suburb",
    "street",
    "house_number",
    "house_number_2",
    "postcode",
    "district",
    "duration_minutes",
)


def parse_created_at(date_token: str, time_token: str) -> datetime:
    """Combine a ``YYYYMMDD`` date token and an ``HH:MM[:SS]`` time token."""
    day = datetime.strptime(date_token.strip(), "%Y%m%d").date()
    return datetime.combine(day, time.fromisoformat(time_token.strip()))


def parse_job_row(row: Sequence[str]) -> Job:
    if len(row) < len(JOB_COLUMNS):
        raise ValueError(f"expected {len(JOB_COLUMNS)} columns, found {len(row)}")
    values = dict(zip(JOB_COLUMNS, (cell.strip() for cell in row)))
    if not values["job_id"]:
        raise ValueError("job id is empty")
    return Job(
        job_id=values["job_id"],
        created_at=parse_created_at(values["date"], values["time"]),
        duration_minutes=int(values["duration_minutes"]),
        priority=int(values["priority"]),
        job_type=values["job_type"],
        job_description=values["job_description"],
        issue_code=values["issue_code"],
        issue_description=values["issue_description"],
        activity_type=values["activity_type"],
        activity_description=values["activity_description"],
        suburb=values["suburb"],
        street=values["street"],
        house_number=values["house_number"],
        house_number_2=values["house_number_2"],
        postcode=values["postcode"],
        district=values["district"] or None,
    )


def load_jobs(source: Optional[Path] = None) -> tuple[Job, ...]:
    """Load jobs from the configured CSV file, ordered by creation time.

    Rows that fail to parse are skipped with a warning.
    """

    csv_path = source or settings.job_file
    if not csv_path.exists():
        raise FileNotFoundError(f"Job file not found: {csv_path}")

    jobs: list[Job] = []
    skipped = 0
    with csv_path.open(mode="r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.reader(handle)
        header = next(reader, None)
        if header is None:
            raise ValueError(f"Job file '{csv_path}' is missing a header row.")
        for line_number, row in enumerate(reader, start=2):
            if not any(cell.strip() for cell in row):
                continue
            try:
                jobs.append(parse_job_row(row))
            except ValueError as e:
                skipped += 1
                logger.warning(f"Skipping job record on line {line_number} of {csv_path.name}: {e}")

    logger.info(f"Loaded {len(jobs)} jobs from {csv_path} ({skipped} skipped)")
    return tuple(sorted(jobs, key=lambda job: job.created_at))
