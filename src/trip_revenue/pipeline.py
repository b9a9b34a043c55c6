"""End-to-end orchestration: parse, reconstruct per vehicle, validate and aggregate."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .config import DEFAULT_CONFIG, PipelineConfig
from .grouping import GroupFailure, group_by_key, map_records, reduce_groups
from .models import PipelineResult, Segment
from .records import (
    RecordParseError,
    iter_records,
    load_segments,
    parse_trip_record,
    write_trip_records,
)
from .revenue import revenue_series, sum_by_day, total_revenue
from .trips import occupied_trips, reconstruct_trips

logger = logging.getLogger(__name__)


@dataclass
class ReconstructionOutcome:
    """Trips of a batch plus the bookkeeping of how they were obtained."""

    trips: list[Segment]
    records_total: int
    records_skipped: int
    vehicles: int
    failures: list[GroupFailure] = field(default_factory=list)


def reconstruct(records: Iterable[str], config: PipelineConfig = DEFAULT_CONFIG) -> ReconstructionOutcome:
    """Parse raw segment lines and rebuild every vehicle's trips independently."""
    segments, summary = load_segments(records, config)
    groups = group_by_key(segments, lambda s: s.vehicle_id)
    outcome = reduce_groups(groups, reconstruct_trips, workers=config.workers, executor=config.executor)

    trips: list[Segment] = []
    # sorted so output does not depend on completion order
    for vehicle_id in sorted(outcome.results):
        vehicle_trips = outcome.results[vehicle_id]
        trips.extend(vehicle_trips if config.emit_empty_trips else occupied_trips(vehicle_trips))

    logger.info(
        "Reconstructed %s trips from %s segments of %s vehicles",
        len(trips),
        summary.rows_parsed,
        len(groups),
    )
    return ReconstructionOutcome(
        trips=trips,
        records_total=summary.rows_total,
        records_skipped=summary.rows_skipped,
        vehicles=len(groups),
        failures=outcome.failures,
    )


def aggregate(trips: list[Segment], outcome: ReconstructionOutcome, config: PipelineConfig) -> PipelineResult:
    return PipelineResult(
        summary=total_revenue(trips, config.fare),
        daily=sum_by_day(revenue_series(trips, config.fare)),
        records_total=outcome.records_total,
        records_skipped=outcome.records_skipped,
        vehicles=outcome.vehicles,
        trips=len(trips),
        failed_vehicles=sorted(f.key for f in outcome.failures),
    )


def run_pipeline(records: Iterable[str], config: PipelineConfig = DEFAULT_CONFIG) -> PipelineResult:
    """Run reconstruction and both revenue aggregations in memory."""
    outcome = reconstruct(records, config)
    return aggregate(outcome.trips, outcome, config)


def run_file_stages(
    segments_path: str | Path,
    trips_path: str | Path,
    config: PipelineConfig = DEFAULT_CONFIG,
) -> PipelineResult:
    """Run the pipeline through an intermediate trip file.

    Stage one writes the reconstructed trips to ``trips_path``; the aggregation
    stages read them back. Trip lines carry no distance, so revenue here is based on
    the straight-line distance between each trip's endpoints.
    """
    outcome = reconstruct(iter_records(segments_path), config)
    write_trip_records(outcome.trips, trips_path)

    trips = list(map_records(iter_records(trips_path), parse_trip_record, skip=(RecordParseError,)))
    return aggregate(trips, outcome, config)
