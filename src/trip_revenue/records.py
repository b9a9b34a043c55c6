"""Text record codecs for raw segment lines and reconstructed trip lines.

Raw segment lines look like::

    1,'2010-02-28 23:46:08',37.66,-122.42,'E','2010-02-28 23:47:08',37.67,-122.41,'M'

(vehicle id, start time, start lat/long, start status, end time, end lat/long, end
status). The start status column is optional and columns after the ninth are
ignored. Trip lines are the comma-joined
fields of a reconstructed trip, see :func:`format_trip_record`.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Iterator

from pydantic import BaseModel

from .config import DAY_FORMAT, DEFAULT_CONFIG, TIMESTAMP_FORMAT, PipelineConfig
from .geo import flat_surface_distance_km
from .models import Segment
from .segments import build_segment

logger = logging.getLogger(__name__)


class RecordParseError(ValueError):
    """A text record could not be turned into a segment."""

    def __init__(self, line: str, reason: str):
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason


class ReadSummary(BaseModel):
    """Line counts of a parsed batch."""

    rows_total: int
    rows_parsed: int
    rows_skipped: int


def _unquote(value: str) -> str:
    return value.strip().strip("'\"").strip()


def parse_timestamp(value: str) -> datetime:
    """Parse ``yyyy-MM-dd HH:mm:ss``; a bare date is malformed."""
    return datetime.strptime(_unquote(value), TIMESTAMP_FORMAT)


def _parse_trip_timestamp(value: str) -> datetime:
    # trip lines may carry only the start day
    try:
        return parse_timestamp(value)
    except ValueError:
        return datetime.strptime(_unquote(value), DAY_FORMAT)


def _parse_coord(value: str) -> float:
    coord = float(value)
    if not math.isfinite(coord):
        raise ValueError(f"non-finite coordinate {value.strip()!r}")
    return coord


def format_timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FORMAT)


def format_day(value: date) -> str:
    """Format the day part as ``yyyy-MM-dd``."""
    return value.strftime(DAY_FORMAT)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() == "true"


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def parse_segment_record(line: str, config: PipelineConfig = DEFAULT_CONFIG) -> Segment:
    """Parse a raw segment line.

    Raises:
        RecordParseError: If a field is missing or malformed.
    """
    fields = line.strip().split(",")
    if len(fields) >= 9:
        # trailing columns are ignored
        vehicle, start_ts, start_lat, start_long, _, end_ts, end_lat, end_long, status = fields[:9]
    elif len(fields) == 8:
        vehicle, start_ts, start_lat, start_long, end_ts, end_lat, end_long, status = fields
    else:
        raise RecordParseError(line, f"expected at least 8 fields, got {len(fields)}")

    status = _unquote(status)
    if not status:
        raise RecordParseError(line, "missing end status")

    try:
        return build_segment(
            vehicle_id=int(vehicle),
            start_time=parse_timestamp(start_ts),
            end_time=parse_timestamp(end_ts),
            start=(_parse_coord(start_lat), _parse_coord(start_long)),
            end=(_parse_coord(end_lat), _parse_coord(end_long)),
            end_status=status[0],
            config=config,
        )
    except ValueError as exc:
        raise RecordParseError(line, str(exc)) from exc


def try_parse_segment_record(line: str, config: PipelineConfig = DEFAULT_CONFIG) -> Segment | None:
    """Parse a raw segment line, returning None when it is malformed."""
    try:
        return parse_segment_record(line, config)
    except RecordParseError:
        return None


def format_trip_record(trip: Segment) -> str:
    """Serialize a trip as ``id,hours,startLat,startLong,endLat,endLong,occupied,tooFast,nearLandmark,start``."""
    return ",".join(
        [
            str(trip.vehicle_id),
            repr(trip.duration_hours),
            repr(trip.start_lat),
            repr(trip.start_long),
            repr(trip.end_lat),
            repr(trip.end_long),
            _format_bool(trip.occupied),
            _format_bool(trip.too_fast),
            _format_bool(trip.near_landmark),
            format_timestamp(trip.start_time),
        ]
    )


def parse_trip_record(line: str) -> Segment:
    """Parse a trip line written by :func:`format_trip_record`.

    The flags are taken as written. The line carries no distance, so it is
    recomputed from the trip's endpoints.

    Raises:
        RecordParseError: If a field is missing or malformed.
    """
    fields = line.strip().split(",")
    if len(fields) != 10:
        raise RecordParseError(line, f"expected 10 fields, got {len(fields)}")

    vehicle, hours, start_lat, start_long, end_lat, end_long, occupied, too_fast, near, start_ts = fields
    try:
        start = (_parse_coord(start_lat), _parse_coord(start_long))
        end = (_parse_coord(end_lat), _parse_coord(end_long))
        return Segment(
            vehicle_id=int(vehicle),
            start_time=_parse_trip_timestamp(start_ts),
            duration_hours=float(hours),
            start_lat=start[0],
            start_long=start[1],
            end_lat=end[0],
            end_long=end[1],
            occupied=_parse_bool(occupied),
            too_fast=_parse_bool(too_fast),
            near_landmark=_parse_bool(near),
            distance_km=flat_surface_distance_km(start[0], start[1], end[0], end[1]),
        )
    except ValueError as exc:
        raise RecordParseError(line, str(exc)) from exc


def iter_records(path: str | Path) -> Iterator[str]:
    """Yield the non-blank lines of a text file."""
    with Path(path).open("r", encoding="utf-8") as f:
        for line in f:
            if line.strip():
                yield line.rstrip("\n")


def load_segments(
    lines: Iterable[str],
    config: PipelineConfig = DEFAULT_CONFIG,
) -> tuple[list[Segment], ReadSummary]:
    """Parse raw segment lines, skipping the malformed ones.

    Returns:
        (segments, summary)
    """
    rows_total = 0
    segments: list[Segment] = []
    for line in lines:
        rows_total += 1
        segment = try_parse_segment_record(line, config)
        if segment is not None:
            segments.append(segment)

    summary = ReadSummary(
        rows_total=rows_total,
        rows_parsed=len(segments),
        rows_skipped=rows_total - len(segments),
    )
    if summary.rows_skipped > 0:
        logger.warning("Skipped %s malformed segment records", summary.rows_skipped)
    return segments, summary


def write_trip_records(trips: Iterable[Segment], path: str | Path) -> int:
    """Write trips as trip lines, returning how many were written."""
    count = 0
    with Path(path).open("w", encoding="utf-8") as f:
        for trip in trips:
            f.write(format_trip_record(trip) + "\n")
            count += 1
    logger.info("Wrote %s trip records to %s", count, path)
    return count
