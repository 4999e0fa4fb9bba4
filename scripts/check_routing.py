#!/usr/bin/env python3
"""Verify routing service connectivity before a simulation run."""

import sys
from datetime import datetime, timedelta

from fieldsim.config import settings
from fieldsim.exceptions import RoutingError
from fieldsim.services.routing.client import AzureMapsClient, check_health


def main():
    print("=" * 60)
    print("Routing Service Connection Test")
    print("=" * 60)
    print()

    print("1. Checking routing configuration...")
    if not settings.routing_subscription_key:
        print("   [ERROR] Routing subscription key is not configured")
        print("   Please set FIELDSIM_ROUTING_SUBSCRIPTION_KEY in your .env file")
        return 1
    print(f"   [OK] Routing Base URL: {settings.routing_base_url}")
    print(f"   [OK] API version: {settings.routing_api_version}")
    print()

    print("2. Testing geocoding...")
    client = AzureMapsClient()
    if not check_health(client):
        print("   [ERROR] Routing service is not responding")
        return 1
    print("   [OK] Geocoding request successful!")
    print()

    print("3. Testing isochrone and route time...")
    depart_at = datetime.now() + timedelta(hours=1)
    try:
        origin = client.geocode(f"1 Macquarie St, Sydney, {settings.address_state} 2000")
        boundary = client.isochrone(origin, settings.compliance_seconds, depart_at)
        destination = client.geocode(f"1 Darling Dr, Sydney, {settings.address_state} 2000")
        seconds = client.route_time(origin, destination, depart_at)
    except RoutingError as e:
        print(f"   [ERROR] {e}")
        return 1
    print(f"   [OK] Isochrone boundary with {len(boundary)} vertices")
    print(f"   [OK] Sample travel time: {seconds} seconds")
    print()

    print("=" * 60)
    print("[SUCCESS] Routing service is connected and working!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
