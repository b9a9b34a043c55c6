"""Segment construction, derived fields and merging."""

from __future__ import annotations

from datetime import datetime

from .config import DEFAULT_CONFIG, EMPTY_STATUS, PipelineConfig
from .geo import flat_surface_distance_km, ieee_div, is_near
from .models import Segment


def build_segment(
    vehicle_id: int,
    start_time: datetime,
    end_time: datetime,
    start: tuple[float, float],
    end: tuple[float, float],
    end_status: str,
    config: PipelineConfig = DEFAULT_CONFIG,
) -> Segment:
    """Create a segment from two observations and compute its derived fields.

    The end status decides occupancy for the whole segment, so a ride ending halfway
    through a segment is not counted; revenue is a lower bound.
    """
    duration_hours = (end_time - start_time).total_seconds() / 3600
    distance_km = flat_surface_distance_km(start[0], start[1], end[0], end[1])
    landmark = config.landmark

    return Segment(
        vehicle_id=vehicle_id,
        start_time=start_time,
        duration_hours=duration_hours,
        start_lat=start[0],
        start_long=start[1],
        end_lat=end[0],
        end_long=end[1],
        occupied=end_status != EMPTY_STATUS,
        too_fast=ieee_div(distance_km, duration_hours) > config.max_speed_kmh,
        near_landmark=is_near((landmark.lat, landmark.long), start, end, landmark.radius_deg),
        distance_km=distance_km,
    )


def _ends_at_start(a: Segment, b: Segment) -> bool:
    # compared per field: tuple equality matches identical nan objects
    return a.end_lat == b.start_lat and a.end_long == b.start_long


def can_merge(a: Segment, b: Segment) -> bool:
    """True when both segments share occupancy and one ends exactly where the other starts."""
    if a.occupied != b.occupied:
        return False
    return _ends_at_start(a, b) or _ends_at_start(b, a)


def merge(a: Segment, b: Segment) -> Segment:
    """Return a new segment covering ``a`` followed or preceded by ``b``.

    ``a`` is the absorbing side: when ``a`` ends where ``b`` starts, ``b`` extends
    the end; otherwise ``b`` extends the start (and the start time). A merged
    segment is too fast only if both parts are, and near the landmark if either is.
    """
    if not can_merge(a, b):
        raise ValueError(f"Segments of vehicle {a.vehicle_id} are not contiguous")

    update: dict[str, object] = {
        "duration_hours": a.duration_hours + b.duration_hours,
        "too_fast": a.too_fast and b.too_fast,
        "near_landmark": a.near_landmark or b.near_landmark,
        "distance_km": a.distance_km + b.distance_km,
    }
    if _ends_at_start(a, b):
        update |= {"end_lat": b.end_lat, "end_long": b.end_long}
    else:
        update |= {"start_lat": b.start_lat, "start_long": b.start_long, "start_time": b.start_time}

    return a.model_copy(update=update)
