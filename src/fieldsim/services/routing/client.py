"""HTTP client for the geocoding, isochrone and route-time service."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any, Protocol

import httpx

from ...config import settings
from ...exceptions import RoutingError
from ...models.domain import Coordinate

logger = logging.getLogger(__name__)


class RoutingProvider(Protocol):
    """Operations the dispatcher needs from a routing backend."""

    def geocode(self, query: str) -> Coordinate: ...

    def isochrone(self, origin: Coordinate, time_budget_seconds: int, depart_at: datetime) -> list[Coordinate]: ...

    def route_time(self, origin: Coordinate, destination: Coordinate, depart_at: datetime) -> int: ...


def _format_point(coordinate: Coordinate) -> str:
    return f"{coordinate.latitude},{coordinate.longitude}"


class AzureMapsClient:
    """Azure Maps REST client covering address search, reachable range and directions."""

    def __init__(
        self,
        base_url: str | None = None,
        subscription_key: str | None = None,
        api_version: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.routing_base_url).rstrip("/")
        self.subscription_key = subscription_key or settings.routing_subscription_key
        if not self.subscription_key:
            raise ValueError("Routing service subscription key is not configured.")
        self.api_version = api_version or settings.routing_api_version
        self.timeout = timeout if timeout is not None else settings.routing_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.routing_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.routing_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self._transport,
        )

    def _get_json(self, path: str, params: dict[str, Any]) -> dict:
        """GET a JSON document, retrying transport failures up to ``max_retries`` times."""
        url = f"{self.base_url}/{path}"
        query = {"api-version": self.api_version, "subscription-key": self.subscription_key, **params}

        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=query)
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise RoutingError(
                            f"Routing request to {path} failed with HTTP {e.response.status_code}"
                        ) from e
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise RoutingError(f"Routing request to {path} timed out: {e}") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Routing timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except httpx.HTTPError as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise RoutingError(f"Failed to reach routing service at {self.base_url}: {e}") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Routing network error, retrying in {wait_time:.1f}s: {e}")
                    time.sleep(wait_time)
                except ValueError as e:
                    raise RoutingError(f"Routing service returned malformed JSON for {path}") from e
        finally:
            client.close()

    def geocode(self, query: str) -> Coordinate:
        data = self._get_json("search/address/json", {"query": query, "limit": 1})
        try:
            position = data["results"][0]["position"]
            return Coordinate(float(position["lat"]), float(position["lon"]))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise RoutingError(f"No geocoding result for '{query}'") from e

    def isochrone(self, origin: Coordinate, time_budget_seconds: int, depart_at: datetime) -> list[Coordinate]:
        data = self._get_json(
            "route/range/json",
            {
                "query": _format_point(origin),
                "timeBudgetInSec": time_budget_seconds,
                "departAt": depart_at.isoformat(),
            },
        )
        try:
            boundary = data["reachableRange"]["boundary"]
            return [Coordinate(float(p["latitude"]), float(p["longitude"])) for p in boundary]
        except (KeyError, TypeError, ValueError) as e:
            raise RoutingError("Isochrone response is missing a reachable range boundary") from e

    def route_time(self, origin: Coordinate, destination: Coordinate, depart_at: datetime) -> int:
        data = self._get_json(
            "route/directions/json",
            {
                "query": f"{_format_point(origin)}:{_format_point(destination)}",
                "departAt": depart_at.isoformat(),
            },
        )
        try:
            return int(data["routes"][0]["summary"]["travelTimeInSeconds"])
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise RoutingError("Route response is missing a travel time") from e


def check_health(client: AzureMapsClient | None = None) -> bool:
    """Probe the routing service with a single geocoding request."""
    try:
        routing = client or AzureMapsClient()
        routing.geocode("Sydney NSW 2000")
        return True
    except (RoutingError, ValueError) as e:
        logger.warning(f"Routing health check failed: {e}")
        return False
