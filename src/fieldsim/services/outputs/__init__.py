"""Report serialization helpers."""

from .formatter import completed_jobs_to_csv, summary_to_json, units_to_csv

__all__ = ["completed_jobs_to_csv", "summary_to_json", "units_to_csv"]
