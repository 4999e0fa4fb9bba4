"""
Command-line interface for the dispatch compliance simulation.

Usage:
    fieldsim                                         # Run with configured defaults
    fieldsim jobs.csv gsts.csv jobs_out.csv gst_out.csv
    fieldsim --verbose

All four paths must be given together; otherwise every path falls back to
its configured default.

Exit Codes:
    0: Success (including runs with no completed jobs)
    1: Data loading or configuration error
    2: Simulation aborted by a routing failure
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import settings
from .data.jobs_repository import load_jobs
from .data.units_repository import DailyRoster, load_units
from .exceptions import SimulationAborted
from .services.outputs.reports import write_reports
from .services.routing.client import AzureMapsClient, RoutingProvider
from .services.simulation.engine import SimulationResult, run_simulation

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fieldsim",
        description="Simulate field unit dispatch against a compliance window.",
    )
    parser.add_argument("job_file", nargs="?", type=Path, help="Job backlog CSV")
    parser.add_argument("unit_file", nargs="?", type=Path, help="Unit roster CSV")
    parser.add_argument("job_report", nargs="?", type=Path, help="Completed job report output")
    parser.add_argument("unit_report", nargs="?", type=Path, help="Per-unit report output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def resolve_paths(args: argparse.Namespace) -> tuple[Path, Path, Path, Path]:
    paths = (args.job_file, args.unit_file, args.job_report, args.unit_report)
    if all(path is not None for path in paths):
        # Relative arguments are taken from the working directory, not the data root.
        return tuple(path.resolve() for path in paths)
    if any(path is not None for path in paths):
        logger.warning("All four file arguments are required to override paths; using configured defaults")
    return settings.job_file, settings.unit_file, settings.job_report_file, settings.unit_report_file


def print_summary(result: SimulationResult) -> None:
    summary = result.summary
    print("\n" + "=" * 60)
    print("SIMULATION SUMMARY")
    print("=" * 60)
    print(f"  Simulated:        {result.started_at:%Y-%m-%d %H:%M:%S} -> {result.finished_at:%Y-%m-%d %H:%M:%S}")
    print(f"  Jobs completed:   {summary.jobs_completed}")
    print(f"  Incomplete jobs:  {summary.incomplete_jobs}")
    print(f"  Compliance rate:  {summary.compliance_rate:.0f}%")
    print(f"  Avg travel time:  {summary.average_travel_minutes} min")
    print("=" * 60)


def main(argv: Optional[Sequence[str]] = None, routing: RoutingProvider | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    job_file, unit_file, job_report, unit_report = resolve_paths(args)

    try:
        jobs = load_jobs(job_file)
        units = load_units(unit_file)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Failed to load input data: {e}")
        return 1
    if not jobs:
        logger.error(f"No usable jobs found in {job_file}")
        return 1

    try:
        routing = routing or AzureMapsClient()
    except ValueError as e:
        logger.error(f"Routing client initialization failed: {e}")
        return 1

    try:
        result = run_simulation(list(jobs), list(units), routing, DailyRoster(units).units_for)
    except SimulationAborted as e:
        logger.error(f"Simulation aborted: {e} ({e.__cause__})")
        return 2

    if result.summary is None:
        print("No Completed Jobs", file=sys.stderr)
        return 0

    write_reports(result, job_report, unit_report)
    print_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
