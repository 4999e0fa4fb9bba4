"""Nearest-unit selection using travel-time isochrones with a distance fallback."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Sequence

from ...config import settings
from ...exceptions import RoutingError
from ...models.domain import Coordinate, Job, Polygon, Unit
from ..geospatial import is_point_in_polygon, planar_distance, polygon_from_boundary
from ..routing.client import RoutingProvider

logger = logging.getLogger(__name__)

DEFAULT_MAX_DISTANCE = 200.0


@dataclass(frozen=True, slots=True)
class MatchResult:
    unit: Unit
    inside_isochrone: bool


class DispatchStatus(Enum):
    ASSIGNED = "ASSIGNED"
    NO_MATCH = "NO_MATCH"
    ROUTING_FAILED = "ROUTING_FAILED"


@dataclass(frozen=True, slots=True)
class DispatchOutcome:
    """Tagged result of one dispatch attempt; the caller picks the abort policy."""

    status: DispatchStatus
    unit: Unit | None = None
    location: Coordinate | None = None
    inside_isochrone: bool = False
    travel_seconds: int = 0
    error: RoutingError | None = None


def find_unit_by_straight_line_distance(
    location: Coordinate,
    units: Sequence[Unit],
    max_distance: float = DEFAULT_MAX_DISTANCE,
) -> Unit | None:
    """Closest unit strictly within ``max_distance``; ties keep the earlier unit."""
    closest: Unit | None = None
    min_distance = max_distance
    for unit in units:
        distance = planar_distance(location, unit.location)
        if distance < min_distance:
            min_distance = distance
            closest = unit
    return closest


def find_units_in_isochrone(polygon: Polygon, units: Sequence[Unit]) -> list[Unit]:
    return [unit for unit in units if is_point_in_polygon(polygon, unit.location)]


def find_best_unit(
    location: Coordinate,
    time_budget_seconds: int,
    departure: datetime,
    available_units: Sequence[Unit],
    routing: RoutingProvider,
    max_distance: float = DEFAULT_MAX_DISTANCE,
) -> MatchResult | None:
    """Pick a unit for a job location.

    Units inside the isochrone for ``time_budget_seconds`` are preferred; when
    none qualifies the whole pool is searched by straight-line distance.
    Raises ``RoutingError`` if the isochrone cannot be fetched.
    """
    polygon = polygon_from_boundary(routing.isochrone(location, time_budget_seconds, departure))
    nearby = find_units_in_isochrone(polygon, available_units)
    logger.debug(f"Units in isochrone: {[unit.unit_id for unit in nearby]}")

    unit = find_unit_by_straight_line_distance(location, nearby, max_distance)
    if unit is not None:
        return MatchResult(unit=unit, inside_isochrone=True)

    logger.debug("No unit found in isochrone")
    unit = find_unit_by_straight_line_distance(location, available_units, max_distance)
    if unit is not None:
        return MatchResult(unit=unit, inside_isochrone=False)
    return None


class Dispatcher:
    """Geocodes a job, selects a unit and prices the route to it."""

    def __init__(
        self,
        routing: RoutingProvider,
        time_budget_seconds: int | None = None,
        max_distance: float | None = None,
        address_state: str | None = None,
    ) -> None:
        self.routing = routing
        self.time_budget_seconds = time_budget_seconds or settings.compliance_seconds
        self.max_distance = max_distance if max_distance is not None else settings.max_match_distance
        self.address_state = address_state or settings.address_state

    def dispatch(self, job: Job, now: datetime, available_units: Sequence[Unit]) -> DispatchOutcome:
        try:
            query = job.address_query(self.address_state)
            logger.debug(f"Job {job.job_id} location: {query}")
            location = self.routing.geocode(query)
            match = find_best_unit(
                location,
                self.time_budget_seconds,
                job.created_at,
                available_units,
                self.routing,
                self.max_distance,
            )
            if match is None:
                return DispatchOutcome(status=DispatchStatus.NO_MATCH)
            travel_seconds = self.routing.route_time(match.unit.location, location, now)
        except RoutingError as e:
            logger.error(f"Routing failed while dispatching job {job.job_id}: {e}")
            return DispatchOutcome(status=DispatchStatus.ROUTING_FAILED, error=e)

        where = "in" if match.inside_isochrone else "outside"
        logger.info(
            f"Found the closest unit {match.unit.unit_id} {where} the {self.time_budget_seconds // 60}min "
            f"isochrone for job {job.job_id}; travel time {travel_seconds // 60:02d} minutes"
        )
        return DispatchOutcome(
            status=DispatchStatus.ASSIGNED,
            unit=match.unit,
            location=location,
            inside_isochrone=match.inside_isochrone,
            travel_seconds=travel_seconds,
        )
