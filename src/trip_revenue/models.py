"""Pydantic data models for the trip revenue pipeline."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from .geo import ieee_div


class Segment(BaseModel):
    """One vehicle movement between two observed positions.

    A segment that can no longer be merged with any other is a trip; trips use the
    same model with a longer time span.
    """

    model_config = ConfigDict(frozen=True, ser_json_inf_nan="null")

    vehicle_id: int
    start_time: datetime
    duration_hours: float
    start_lat: float
    start_long: float
    end_lat: float
    end_long: float
    occupied: bool
    too_fast: bool
    near_landmark: bool
    distance_km: float

    @property
    def start(self) -> tuple[float, float]:
        return self.start_lat, self.start_long

    @property
    def end(self) -> tuple[float, float]:
        return self.end_lat, self.end_long

    @property
    def speed_kmh(self) -> float:
        """Average speed; ``inf`` or ``nan`` for zero-duration segments."""
        return ieee_div(self.distance_km, self.duration_hours)


class RevenueSummary(BaseModel):
    """Total revenue over all valid trips."""

    total_revenue: float = 0.0
    trip_count: int = 0


class DailyRevenue(BaseModel):
    """Revenue of the valid trips starting on one day."""

    day: date
    revenue: float
    trip_count: int


class PipelineResult(BaseModel):
    """Complete result of running the pipeline over a batch of segment records."""

    summary: RevenueSummary
    daily: list[DailyRevenue]
    records_total: int
    records_skipped: int
    vehicles: int
    trips: int
    failed_vehicles: list[int] = []
