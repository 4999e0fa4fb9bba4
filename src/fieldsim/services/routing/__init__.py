"""Routing service exports."""

from .client import AzureMapsClient, RoutingProvider, check_health

__all__ = ["AzureMapsClient", "RoutingProvider", "check_health"]
