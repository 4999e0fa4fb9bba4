"""Priority-ordered queue of jobs eligible for dispatch."""

from __future__ import annotations

import heapq
import itertools
from datetime import datetime
from typing import Iterator

from ...models.domain import Job


class ActiveQueue:
    """Binary heap of jobs keyed by (priority, created_at, insertion order).

    Only the head is kept in sorted position. ``pending()`` returns an
    explicitly sorted snapshot so dispatch order is reproducible.
    """

    def __init__(self) -> None:
        self._heap: list[tuple[int, datetime, int, Job]] = []
        self._counter = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    def __iter__(self) -> Iterator[Job]:
        return (entry[-1] for entry in self._heap)

    def __contains__(self, job: object) -> bool:
        return any(entry[-1] is job for entry in self._heap)

    def push(self, job: Job) -> None:
        heapq.heappush(self._heap, (job.priority, job.created_at, next(self._counter), job))

    def peek(self) -> Job | None:
        return self._heap[0][-1] if self._heap else None

    def pending(self) -> list[Job]:
        """Unassigned jobs in (priority, creation, insertion) order."""
        return [entry[-1] for entry in sorted(self._heap, key=lambda e: e[:3]) if not entry[-1].is_assigned]

    def pop_completed(self, now: datetime) -> list[Job]:
        """Remove and return assigned jobs whose end timestamp is ``now``."""
        finished = [entry for entry in self._heap if entry[-1].end_at is not None and entry[-1].end_at == now]
        if not finished:
            return []
        finished_ids = {id(entry) for entry in finished}
        self._heap = [entry for entry in self._heap if id(entry) not in finished_ids]
        heapq.heapify(self._heap)
        return [entry[-1] for entry in finished]
