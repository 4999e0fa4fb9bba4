"""Data access helpers for field units and the daily roster."""

from __future__ import annotations

import csv
import logging
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from ..config import settings
from ..models.domain import Unit

logger = logging.getLogger(__name__)

WEEKDAY_CODES = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")


def _coerce_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    try:
        return float(value.replace(",", ""))
    except ValueError as exc:
        raise ValueError(f"Unable to parse float from value '{value}'") from exc


def _parse_days(value: Optional[str]) -> tuple[str, ...]:
    if not value or not value.strip():
        return ()
    days = tuple(part.strip().upper()[:3] for part in value.replace(",", ";").split(";") if part.strip())
    unknown = set(days) - set(WEEKDAY_CODES)
    if unknown:
        raise ValueError(f"Unknown roster day(s): {', '.join(sorted(unknown))}")
    return days


def parse_unit_row(row: dict) -> Unit:
    unit_id = (row.get("GSTId") or row.get("unit_id") or row.get("UnitId") or "").strip()
    if not unit_id:
        raise ValueError("unit id is empty")
    lat = _coerce_float(row.get("Latitude") or row.get("latitude"))
    lon = _coerce_float(row.get("Longitude") or row.get("longitude"))
    if lat is None or lon is None:
        raise ValueError(f"unit {unit_id} has no coordinates")
    return Unit(
        unit_id=unit_id,
        latitude=lat,
        longitude=lon,
        district=(row.get("District") or row.get("district") or "").strip() or None,
        working_days=_parse_days(row.get("Days") or row.get("days")),
    )


def load_units(source: Optional[Path] = None) -> tuple[Unit, ...]:
    """Load field units from the configured CSV file."""

    csv_path = source or settings.unit_file
    if not csv_path.exists():
        raise FileNotFoundError(f"Unit file not found: {csv_path}")

    units: list[Unit] = []
    with csv_path.open(mode="r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            raise ValueError(f"Unit file '{csv_path}' is missing a header row.")
        for line_number, row in enumerate(reader, start=2):
            try:
                units.append(parse_unit_row(row))
            except ValueError as e:
                logger.warning(f"Skipping unit record on line {line_number} of {csv_path.name}: {e}")

    logger.info(f"Loaded {len(units)} units from {csv_path}")
    return tuple(units)


class DailyRoster:
    """Answers which units are on duty for a calendar date."""

    def __init__(self, units: Iterable[Unit]) -> None:
        self.units = tuple(units)

    def units_for(self, day: date) -> list[Unit]:
        code = WEEKDAY_CODES[day.weekday()]
        return [unit for unit in self.units if not unit.working_days or code in unit.working_days]
