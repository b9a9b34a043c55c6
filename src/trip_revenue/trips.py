"""Trip reconstruction: merge one vehicle's segments into trips."""

from __future__ import annotations

from collections import deque
from typing import Iterable

from .models import Segment
from .segments import can_merge, merge


def reconstruct_trips(segments: Iterable[Segment]) -> list[Segment]:
    """Greedily merge contiguous segments of a single vehicle into trips.

    Segments are consumed front to back. Each one is absorbed by the first remaining
    segment it can merge with; if there is none it becomes a finished trip. A single
    pass like this depends on arrival order and does not always find the fewest trips.
    """
    pending = deque(segments)
    trips: list[Segment] = []

    while pending:
        curr = pending.popleft()
        for i, seg in enumerate(pending):
            if can_merge(seg, curr):
                pending[i] = merge(seg, curr)
                break
        else:
            trips.append(curr)

    return trips


def occupied_trips(trips: Iterable[Segment]) -> list[Segment]:
    """Keep only trips that carried a passenger."""
    return [t for t in trips if t.occupied]
