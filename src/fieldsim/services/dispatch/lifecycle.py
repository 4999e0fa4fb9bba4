"""Unit availability transitions."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Container

from ...exceptions import UnitStateError
from ...models.domain import Unit, UnitStatus

logger = logging.getLogger(__name__)


def mark_busy(unit: Unit, finish_at: datetime, available: list[Unit], busy: list[Unit]) -> None:
    """Move an available unit into the busy pool until ``finish_at``."""
    if unit.status is not UnitStatus.AVAILABLE or not any(u is unit for u in available):
        raise UnitStateError(f"Unit {unit.unit_id} cannot be assigned while {unit.status.value}")
    unit.status = UnitStatus.BUSY
    unit.finish_at = finish_at
    available[:] = [u for u in available if u is not unit]
    busy.append(unit)


def release_finished_units(
    now: datetime,
    available: list[Unit],
    busy: list[Unit],
    on_duty: Container[str] | None = None,
) -> list[Unit]:
    """Return busy units whose finish time is ``now`` to the available pool.

    When ``on_duty`` is given, units missing from it are released but stay out
    of the pool until a roster that includes them is loaded.
    """
    released = [unit for unit in busy if unit.finish_at == now]
    if not released:
        return []
    busy[:] = [unit for unit in busy if unit.finish_at != now]
    for unit in released:
        unit.finish_at = None
        unit.status = UnitStatus.AVAILABLE
        if on_duty is not None and unit.unit_id not in on_duty:
            logger.debug(f"Unit {unit.unit_id} finished off roster at {now:%Y-%m-%d %H:%M:%S}")
            continue
        available.append(unit)
        logger.debug(f"Unit {unit.unit_id} available again at {now:%Y-%m-%d %H:%M:%S}")
    return released
