"""Domain models for jobs, field units and completed job records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional, Tuple


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A (latitude, longitude) pair."""

    latitude: float
    longitude: float


Polygon = List[Coordinate]


class UnitStatus(Enum):
    AVAILABLE = "AVAILABLE"
    BUSY = "BUSY"


@dataclass(slots=True, eq=False)
class Unit:
    """A field technician (GST) stationed at a fixed location."""

    unit_id: str
    latitude: float
    longitude: float
    district: Optional[str] = None
    working_days: Tuple[str, ...] = ()
    status: UnitStatus = UnitStatus.AVAILABLE
    finish_at: Optional[datetime] = None
    jobs_today: List["Job"] = field(default_factory=list, repr=False)

    @property
    def location(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)

    @property
    def is_available(self) -> bool:
        return self.status is UnitStatus.AVAILABLE


@dataclass(slots=True, eq=False)
class Job:
    """A service job read from the backlog, enriched with simulation outcomes."""

    job_id: str
    created_at: datetime
    duration_minutes: int
    priority: int
    job_type: str = ""
    job_description: str = ""
    issue_code: str = ""
    issue_description: str = ""
    activity_type: str = ""
    activity_description: str = ""
    suburb: str = ""
    street: str = ""
    house_number: str = ""
    house_number_2: str = ""
    postcode: str = ""
    district: Optional[str] = None
    idle_seconds: int = 0
    queue_wait_seconds: int = 0
    travel_seconds: int = 0
    assigned_unit: Optional[Unit] = field(default=None, repr=False)
    location: Optional[Coordinate] = None
    end_at: Optional[datetime] = None

    @property
    def is_assigned(self) -> bool:
        return self.assigned_unit is not None

    def address_query(self, state: str = "NSW") -> str:
        street = " ".join(part for part in (self.house_number, self.street) if part)
        return f"{street}, {self.suburb}, {state} {self.postcode}".strip()

    def compute_end(self) -> datetime:
        return self.created_at + timedelta(
            minutes=self.duration_minutes,
            seconds=self.travel_seconds + self.idle_seconds + self.queue_wait_seconds,
        )


@dataclass(frozen=True, slots=True)
class CompletedJobRecord:
    """Immutable pairing of a finished job with the unit that serviced it."""

    unit: Unit
    job: Job
