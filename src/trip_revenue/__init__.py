"""Taxi trip reconstruction and revenue calculation library."""

from .config import FareModel, Landmark, PipelineConfig
from .geo import flat_surface_distance_km
from .models import DailyRevenue, PipelineResult, RevenueSummary, Segment
from .pipeline import reconstruct, run_file_stages, run_pipeline
from .records import (
    RecordParseError,
    format_trip_record,
    parse_segment_record,
    parse_trip_record,
    try_parse_segment_record,
)
from .revenue import (
    is_valid_for_revenue,
    is_valid_for_time_series,
    revenue_series,
    sum_by_day,
    total_revenue,
    trip_revenue,
)
from .segments import build_segment, can_merge, merge
from .trips import reconstruct_trips

__all__ = [
    "DailyRevenue",
    "FareModel",
    "Landmark",
    "PipelineConfig",
    "PipelineResult",
    "RecordParseError",
    "RevenueSummary",
    "Segment",
    "build_segment",
    "can_merge",
    "flat_surface_distance_km",
    "format_trip_record",
    "is_valid_for_revenue",
    "is_valid_for_time_series",
    "merge",
    "parse_segment_record",
    "parse_trip_record",
    "reconstruct",
    "reconstruct_trips",
    "revenue_series",
    "run_file_stages",
    "run_pipeline",
    "sum_by_day",
    "total_revenue",
    "trip_revenue",
    "try_parse_segment_record",
]
