"""Tests for raw segment and trip record parsing."""

from datetime import date, datetime

import pytest

from trip_revenue import (
    RecordParseError,
    format_trip_record,
    merge,
    parse_segment_record,
    parse_trip_record,
    try_parse_segment_record,
)
from trip_revenue.geo import flat_surface_distance_km
from trip_revenue.records import format_day, iter_records, load_segments, write_trip_records

RAW_LINE = "1,'2010-02-28 23:46:08',37.66,-122.42,'E','2010-02-28 23:47:08',37.67,-122.41,'M'"


class TestParseSegmentRecord:
    def test_nine_field_layout(self):
        seg = parse_segment_record(RAW_LINE)
        assert seg.vehicle_id == 1
        assert seg.start_time == datetime(2010, 2, 28, 23, 46, 8)
        assert seg.start == (37.66, -122.42)
        assert seg.end == (37.67, -122.41)
        assert seg.duration_hours == pytest.approx(1 / 60)
        assert seg.occupied is True

    def test_eight_field_layout(self):
        seg = parse_segment_record("3,2010-02-28 23:46:08,37.66,-122.42,2010-02-28 23:47:08,37.67,-122.41,E")
        assert seg.vehicle_id == 3
        assert seg.occupied is False

    def test_trailing_whitespace(self):
        assert parse_segment_record(RAW_LINE + "\n").vehicle_id == 1

    def test_extra_columns_ignored(self):
        seg = parse_segment_record(RAW_LINE + ",'extra',42")
        assert seg == parse_segment_record(RAW_LINE)

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "1,2,3",
            "x,'2010-02-28 23:46:08',37.66,-122.42,'E','2010-02-28 23:47:08',37.67,-122.41,'M'",
            "1,'28/02/2010 23:46',37.66,-122.42,'E','2010-02-28 23:47:08',37.67,-122.41,'M'",
            "1,'2010-02-28 23:46:08',north,-122.42,'E','2010-02-28 23:47:08',37.67,-122.41,'M'",
            "1,'2010-02-28 23:46:08',37.66,-122.42,'E','2010-02-28 23:47:08',37.67,-122.41,''",
            "7,'2010-02-28',37.6,-122.4,'M','2010-02-28 08:10:00',37.61,-122.39,'M'",
            "7,'2010-02-28 08:00:00',NaN,-122.4,'M','2010-02-28 08:10:00',37.61,-122.39,'M'",
            "7,'2010-02-28 08:00:00',37.6,-122.4,'M','2010-02-28 08:10:00',37.61,inf,'M'",
        ],
    )
    def test_malformed_lines(self, line):
        with pytest.raises(RecordParseError):
            parse_segment_record(line)
        assert try_parse_segment_record(line) is None

    def test_error_keeps_line(self):
        with pytest.raises(RecordParseError) as excinfo:
            parse_segment_record("1,2,3")
        assert excinfo.value.line == "1,2,3"


class TestTripRecord:
    def test_format(self, make_segment):
        trip = make_segment((37.6, -122.4), (37.61, -122.39), minutes=30, vehicle_id=7)
        assert format_trip_record(trip) == "7,0.5,37.6,-122.4,37.61,-122.39,true,false,true,2010-02-28 08:00:00"

    def test_parse_keeps_flags_and_recomputes_distance(self):
        trip = parse_trip_record("7,0.5,37.6,-122.4,37.62,-122.38,true,false,true,2010-02-28 08:00:00")
        assert trip.vehicle_id == 7
        assert trip.duration_hours == 0.5
        assert (trip.occupied, trip.too_fast, trip.near_landmark) == (True, False, True)
        assert trip.distance_km == flat_surface_distance_km(37.6, -122.4, 37.62, -122.38)

    def test_parse_date_only_timestamp(self):
        trip = parse_trip_record("7,0.5,37.6,-122.4,37.62,-122.38,TRUE,no,True,2010-02-28")
        assert trip.start_time == datetime(2010, 2, 28)
        assert (trip.occupied, trip.too_fast, trip.near_landmark) == (True, False, True)

    def test_parse_rejects_short_line(self):
        with pytest.raises(RecordParseError):
            parse_trip_record("7,0.5,37.6")

    def test_parse_rejects_nan_coordinates(self):
        with pytest.raises(RecordParseError):
            parse_trip_record("7,0.5,nan,-122.4,37.62,-122.38,true,false,true,2010-02-28 08:00:00")

    def test_merged_trip_reads_back_with_endpoint_distance(self, make_segment):
        a = make_segment((37.6, -122.4), (37.61, -122.39))
        b = make_segment((37.61, -122.39), (37.61, -122.30), offset=10)

        trip = merge(a, b)
        restored = parse_trip_record(format_trip_record(trip))

        assert restored.start == trip.start and restored.end == trip.end
        assert restored.duration_hours == trip.duration_hours
        assert restored.distance_km == flat_surface_distance_km(*trip.start, *trip.end)
        assert restored.distance_km < trip.distance_km


class TestFiles:
    def test_format_day(self):
        assert format_day(date(2010, 3, 1)) == "2010-03-01"
        assert format_day(datetime(2010, 3, 1, 23, 59)) == "2010-03-01"

    def test_load_segments_skips_bad_lines(self, segments_path):
        segments, summary = load_segments(iter_records(segments_path))
        assert summary.rows_total == 10
        assert summary.rows_skipped == 2
        assert summary.rows_parsed == len(segments) == 8
        assert {s.vehicle_id for s in segments} == {7, 12}

    def test_write_trip_records(self, tmp_path, make_segment):
        trips = [make_segment((0.0, 0.0), (0.0, 0.01)), make_segment((0.0, 0.01), (0.0, 0.02), offset=10)]
        path = tmp_path / "trips.txt"
        assert write_trip_records(trips, path) == 2
        lines = list(iter_records(path))
        assert lines == [format_trip_record(t) for t in trips]
