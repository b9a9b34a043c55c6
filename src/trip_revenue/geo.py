"""Planar geometry helpers working on decimal-degree coordinates."""

from __future__ import annotations

import math

from .config import EARTH_RADIUS_KM

COORD_TO_RAD = math.pi / 180


def ieee_div(a: float, b: float) -> float:
    """Divide like IEEE-754 floats do: ``x/0`` is ``±inf`` and ``0/0`` is ``nan``."""
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def flat_surface_distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Equirectangular approximation of the distance between two points, in km.

    The longitude difference is scaled by the cosine of the mean latitude and the
    result is the Euclidean norm on that plane. Accurate for short hops, it degrades
    near the poles and does not wrap across the antimeridian.
    """
    d_lat = (lat1 - lat2) * COORD_TO_RAD
    d_lon = math.cos((lat1 + lat2) * COORD_TO_RAD / 2) * (lon1 - lon2) * COORD_TO_RAD
    return EARTH_RADIUS_KM * math.sqrt(d_lat * d_lat + d_lon * d_lon)


def line_distance_deg(
    point: tuple[float, float],
    start: tuple[float, float],
    end: tuple[float, float],
) -> float:
    """Distance from ``point`` to the infinite line through ``start`` and ``end``.

    All arguments are ``(lat, long)`` pairs treated as cartesian ``(y, x)``. The line
    is written as ``slope * x - y + c = 0``, so a north-south line (infinite slope)
    or a zero-length segment gives ``nan``.
    """
    lat, long = point
    slope = ieee_div(end[0] - start[0], end[1] - start[1])
    c = start[0] - start[1] * slope
    numerator = abs(slope * long - lat + c)
    return ieee_div(numerator, math.sqrt(slope * slope + 1))


def is_near(
    point: tuple[float, float],
    start: tuple[float, float],
    end: tuple[float, float],
    radius_deg: float,
) -> bool:
    """Check whether the line through ``start`` and ``end`` passes within ``radius_deg`` of ``point``."""
    return line_distance_deg(point, start, end) <= radius_deg
