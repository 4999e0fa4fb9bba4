"""Dispatch building blocks: admission, matching and unit lifecycle."""

from .admission import AdmissionReport, admit_jobs
from .lifecycle import mark_busy, release_finished_units
from .matching import (
    DispatchOutcome,
    DispatchStatus,
    Dispatcher,
    MatchResult,
    find_best_unit,
    find_unit_by_straight_line_distance,
)
from .queue import ActiveQueue

__all__ = [
    "ActiveQueue",
    "AdmissionReport",
    "DispatchOutcome",
    "DispatchStatus",
    "Dispatcher",
    "MatchResult",
    "admit_jobs",
    "find_best_unit",
    "find_unit_by_straight_line_distance",
    "mark_busy",
    "release_finished_units",
]
