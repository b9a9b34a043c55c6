"""Compute airport trip revenue for a local segment file: export the daily series to CSV and plot it.

This script uses the trip_revenue library for reconstruction and aggregation and adds
CSV export and a matplotlib chart on top.
"""

import csv
import logging
from pathlib import Path

import matplotlib.pyplot as plt

from trip_revenue import PipelineConfig, run_file_stages
from trip_revenue.models import DailyRevenue

SEGMENTS_FILE = Path(__file__).parent / "sampledata" / "segments.txt"
TRIPS_FILE = Path(__file__).parent / "trips.txt"
OUTPUT_CSV = Path(__file__).parent / "daily_revenue.csv"
OUTPUT_PLOT = Path(__file__).parent / "daily_revenue.png"


def export_csv(daily: list[DailyRevenue], path: Path) -> None:
    """Write the daily revenue series to a CSV file."""
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=["day", "revenue", "trip_count"])
        writer.writeheader()
        writer.writerows(d.model_dump() for d in daily)
    print(f"CSV exported: {path}")


def plot_daily(daily: list[DailyRevenue], path: Path, title: str = "Airport Trip Revenue per Day") -> None:
    """Bar chart of revenue per day with the trip count on a second axis."""
    days = [d.day for d in daily]

    fig, ax = plt.subplots(figsize=(14, 5))
    ax.bar(days, [d.revenue for d in daily], color="steelblue", alpha=0.7, label="Revenue ($)")
    ax.set_xlabel("Day")
    ax.set_ylabel("Revenue ($)")
    ax.set_title(title)
    ax.grid(True, alpha=0.3)

    ax2 = ax.twinx()
    ax2.plot(days, [d.trip_count for d in daily], color="coral", marker="o", linewidth=1.2, label="Trips")
    ax2.set_ylabel("Trips")

    fig.autofmt_xdate()
    fig.legend(loc="upper left")
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    print(f"Plot saved: {path}")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print(f"Reading segments: {SEGMENTS_FILE}\n")
    result = run_file_stages(SEGMENTS_FILE, TRIPS_FILE, PipelineConfig())

    print(f"Records:       {result.records_total:,} ({result.records_skipped:,} skipped)")
    print(f"Vehicles:      {result.vehicles:,}")
    print(f"Trips:         {result.trips:,}")
    if result.failed_vehicles:
        print(f"Failed:        {', '.join(map(str, result.failed_vehicles))}")
    print(f"Valid trips:   {result.summary.trip_count:,}")
    print(f"Revenue:       ${result.summary.total_revenue:,.2f}")
    print()

    if not result.daily:
        print("No valid trips, nothing to export.")
        return

    export_csv(result.daily, OUTPUT_CSV)
    plot_daily(result.daily, OUTPUT_PLOT)


if __name__ == "__main__":
    main()
