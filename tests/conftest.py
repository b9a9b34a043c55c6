from datetime import datetime, timedelta
from pathlib import Path

import pytest

from trip_revenue import build_segment

SAMPLEDATA = Path(__file__).parent.parent / "sampledata"

T0 = datetime(2010, 2, 28, 8, 0, 0)


@pytest.fixture
def segments_path():
    return SAMPLEDATA / "segments.txt"


@pytest.fixture
def make_segment():
    """Factory for segments starting ``offset`` minutes after 08:00 and lasting ``minutes``."""

    def _make(start, end, offset=0, minutes=10, occupied=True, vehicle_id=1):
        start_time = T0 + timedelta(minutes=offset)
        return build_segment(
            vehicle_id=vehicle_id,
            start_time=start_time,
            end_time=start_time + timedelta(minutes=minutes),
            start=start,
            end=end,
            end_status="M" if occupied else "E",
        )

    return _make
