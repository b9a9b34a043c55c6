"""Trip validation and revenue aggregation."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Iterator

from .config import FareModel
from .grouping import group_by_key, reduce_groups
from .models import DailyRevenue, RevenueSummary, Segment

DEFAULT_FARE = FareModel()


def is_valid_for_revenue(trip: Segment) -> bool:
    """An occupied trip near the landmark at a plausible speed."""
    return not trip.too_fast and trip.near_landmark and trip.occupied


def is_valid_for_time_series(trip: Segment) -> bool:
    """Same as :func:`is_valid_for_revenue`, and the trip must have moved."""
    return is_valid_for_revenue(trip) and trip.distance_km > 0


def trip_revenue(trip: Segment, fare: FareModel = DEFAULT_FARE) -> float:
    return trip.distance_km * fare.price_per_km + fare.base_fare


def total_revenue(trips: Iterable[Segment], fare: FareModel = DEFAULT_FARE) -> RevenueSummary:
    """Sum the revenue of the valid trips and count them."""
    total = 0.0
    count = 0
    for trip in trips:
        if is_valid_for_revenue(trip):
            total += trip_revenue(trip, fare)
            count += 1
    return RevenueSummary(total_revenue=total, trip_count=count)


def revenue_series(trips: Iterable[Segment], fare: FareModel = DEFAULT_FARE) -> Iterator[tuple[date, float]]:
    """Yield one ``(start day, revenue)`` pair per valid trip, unsummed."""
    for trip in trips:
        if is_valid_for_time_series(trip):
            yield trip.start_time.date(), trip_revenue(trip, fare)


def _sum_day(pairs: list[tuple[date, float]]) -> DailyRevenue:
    return DailyRevenue(day=pairs[0][0], revenue=sum(r for _, r in pairs), trip_count=len(pairs))


def sum_by_day(pairs: Iterable[tuple[date, float]]) -> list[DailyRevenue]:
    """Group ``(day, revenue)`` pairs by day and sum each day, sorted by day."""
    groups = group_by_key(pairs, lambda pair: pair[0])
    outcome = reduce_groups(groups, _sum_day)
    return [outcome.results[day] for day in sorted(outcome.results)]
