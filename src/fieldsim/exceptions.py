"""Exception types raised across the simulator."""

from __future__ import annotations


class RoutingError(RuntimeError):
    """Raised when the routing/geocoding service fails or returns an unusable payload."""


class UnitStateError(RuntimeError):
    """Raised on an illegal unit availability transition."""


class SimulationAborted(RuntimeError):
    """Raised when a run cannot continue, e.g. after a routing failure."""
