"""Constants and pydantic configuration models for the revenue pipeline."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

EARTH_RADIUS_KM = 6371.009

# San Francisco International Airport
AIRPORT_LAT = 37.62131
AIRPORT_LONG = -122.37896
# ~1 km expressed in degrees, compared against raw degree coordinates
LANDMARK_RADIUS_DEG = 1 / 111

MAX_SPEED_KMH = 200.0

PRICE_PER_KM = 1.79
BASE_FARE = 3.25

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DAY_FORMAT = "%Y-%m-%d"

EMPTY_STATUS = "E"


class Landmark(BaseModel):
    """A reference coordinate that validates trips passing near it."""

    lat: float = AIRPORT_LAT
    long: float = AIRPORT_LONG
    radius_deg: float = LANDMARK_RADIUS_DEG


class FareModel(BaseModel):
    """Flat fare: per-km rate plus a fixed base fare."""

    price_per_km: float = PRICE_PER_KM
    base_fare: float = BASE_FARE


class PipelineConfig(BaseModel):
    """Settings shared by the parsing, reconstruction and aggregation stages."""

    landmark: Landmark = Landmark()
    fare: FareModel = FareModel()
    max_speed_kmh: float = MAX_SPEED_KMH
    # Parallel per-vehicle reconstruction
    workers: int | None = None
    executor: Literal["thread", "process"] = "thread"
    # The reconstruction stage drops unoccupied trips unless asked otherwise
    emit_empty_trips: bool = False


DEFAULT_CONFIG = PipelineConfig()
