"""FastAPI server for trip reconstruction and revenue calculation."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse

from .config import DEFAULT_CONFIG
from .models import PipelineResult, Segment
from .pipeline import ReconstructionOutcome, aggregate, reconstruct
from .records import format_trip_record

app = FastAPI(title="Trip Revenue", version="0.1.0")

TRIP_COLUMNS = (
    "vehicle_id,duration_hours,start_lat,start_long,end_lat,end_long,"
    "occupied,too_fast,near_landmark,start_time"
)


async def _reconstruct_upload(upload: UploadFile) -> ReconstructionOutcome:
    """Read an uploaded raw segment file and rebuild its trips."""
    content = await upload.read()
    lines = [line for line in content.decode("utf-8", errors="replace").splitlines() if line.strip()]
    outcome = await run_in_threadpool(reconstruct, lines, DEFAULT_CONFIG)
    if outcome.records_total == outcome.records_skipped:
        raise HTTPException(status_code=400, detail="No valid segment records found in upload")
    return outcome


@app.post("/trips")
async def process_trips(
    file: UploadFile,
    format: str = Query("csv", pattern="^(csv|json)$"),
):
    """Reconstruct trips from an uploaded segment file.

    Returns trip records as CSV (one trip line per row) or the trips as JSON.
    """
    outcome = await _reconstruct_upload(file)

    if format == "json":
        return outcome.trips

    return _trips_to_csv_response(outcome.trips)


@app.post("/revenue")
async def process_revenue(file: UploadFile) -> PipelineResult:
    """Reconstruct trips from an uploaded segment file and compute their revenue."""
    outcome = await _reconstruct_upload(file)
    return await run_in_threadpool(aggregate, outcome.trips, outcome, DEFAULT_CONFIG)


def _trips_to_csv_response(trips: list[Segment]) -> StreamingResponse:
    """Stream trips as a header row followed by one trip record per line."""

    def generate():
        yield TRIP_COLUMNS + "\n"
        for trip in trips:
            yield format_trip_record(trip) + "\n"

    return StreamingResponse(
        generate(),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=trips.csv"},
    )
