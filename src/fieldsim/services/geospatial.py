"""Geospatial helper functions."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from shapely.geometry import Polygon as ShapelyPolygon

from ..models.domain import Coordinate, Polygon

EARTH_RADIUS_KM = 6371.0
# Latitude used as the far end of the ray; well outside any real coordinate range.
RAY_SENTINEL = 10000.0

COLLINEAR = 0
CLOCKWISE = 1
COUNTERCLOCKWISE = 2

logger = logging.getLogger(__name__)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def planar_distance(a: Coordinate, b: Coordinate) -> float:
    """Straight-line distance in raw coordinate units (degrees)."""

    return math.sqrt((a.latitude - b.latitude) ** 2 + (a.longitude - b.longitude) ** 2)


def on_segment(p: Coordinate, q: Coordinate, r: Coordinate) -> bool:
    """Given collinear p, q, r, return True if q lies within the bounding box of segment pr."""

    return (
        min(p.latitude, r.latitude) <= q.latitude <= max(p.latitude, r.latitude)
        and min(p.longitude, r.longitude) <= q.longitude <= max(p.longitude, r.longitude)
    )


def orientation(p: Coordinate, q: Coordinate, r: Coordinate) -> int:
    """Orientation of the ordered triplet (p, q, r): COLLINEAR, CLOCKWISE or COUNTERCLOCKWISE."""

    value = (q.longitude - p.longitude) * (r.latitude - q.latitude) - (q.latitude - p.latitude) * (
        r.longitude - q.longitude
    )
    if value == 0:
        return COLLINEAR
    return CLOCKWISE if value > 0 else COUNTERCLOCKWISE


def segments_intersect(p1: Coordinate, q1: Coordinate, p2: Coordinate, q2: Coordinate) -> bool:
    """Return True if segment p1q1 intersects segment p2q2."""

    o1 = orientation(p1, q1, p2)
    o2 = orientation(p1, q1, q2)
    o3 = orientation(p2, q2, p1)
    o4 = orientation(p2, q2, q1)

    if o1 != o2 and o3 != o4:
        return True

    # Collinear cases: an endpoint of one segment lies on the other.
    if o1 == COLLINEAR and on_segment(p1, p2, q1):
        return True
    if o2 == COLLINEAR and on_segment(p1, q2, q1):
        return True
    if o3 == COLLINEAR and on_segment(p2, p1, q2):
        return True
    if o4 == COLLINEAR and on_segment(p2, q1, q2):
        return True
    return False


def is_point_in_polygon(polygon: Sequence[Coordinate], point: Coordinate) -> bool:
    """Ray-casting membership test. Points on the boundary count as inside.

    The polygon is implicitly closed; it must not repeat its first vertex.
    """

    n = len(polygon)
    if n < 3:
        return False

    extreme = Coordinate(RAY_SENTINEL, point.longitude)
    count = 0
    for i in range(n):
        current, nxt = polygon[i], polygon[(i + 1) % n]
        if segments_intersect(current, nxt, point, extreme):
            if orientation(current, point, nxt) == COLLINEAR:
                return on_segment(current, point, nxt)
            count += 1
    return count % 2 == 1


def polygon_from_boundary(points: Sequence[Coordinate]) -> Polygon:
    """Normalise a boundary ring returned by the routing service.

    Drops a repeated closing vertex and warns when the ring is not a valid
    simple polygon, since the membership test assumes one.
    """

    ring = list(points)
    if len(ring) > 1 and ring[0] == ring[-1]:
        ring.pop()
    if len(ring) >= 3:
        shape = ShapelyPolygon([(c.longitude, c.latitude) for c in ring])
        if not shape.is_valid:
            logger.warning(f"Isochrone boundary with {len(ring)} vertices is not a simple polygon")
    return ring
