"""Geometry primitives on a spherical Earth.

All angles are degrees, distances meters, speeds meters per second.
Bearings follow navigation convention: 0 = north, 90 = east.
"""

from __future__ import annotations

import math

from pylivemotion._constants import EARTH_EQUATORIAL_RADIUS_M, EARTH_MEAN_RADIUS_M


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_MEAN_RADIUS_M * c


def initial_bearing(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Initial bearing from point 1 to point 2, normalized to ``[0, 360)``."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_lambda = math.radians(lng2 - lng1)

    y = math.sin(d_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lambda)
    return normalize_heading(math.degrees(math.atan2(y, x)))


def extrapolate_position(
    lat: float,
    lng: float,
    speed_mps: float,
    bearing_deg: float,
    dt_seconds: float,
) -> tuple[float, float]:
    """Project a position forward along a great circle.

    Travels ``speed_mps * dt_seconds`` meters from ``(lat, lng)`` along the
    initial bearing ``bearing_deg``.  Returns the new ``(lat, lng)``.
    """
    distance = speed_mps * dt_seconds
    if distance == 0:
        return lat, lng

    delta = distance / EARTH_EQUATORIAL_RADIUS_M
    theta = math.radians(bearing_deg)
    phi1 = math.radians(lat)
    lambda1 = math.radians(lng)

    phi2 = math.asin(math.sin(phi1) * math.cos(delta) + math.cos(phi1) * math.sin(delta) * math.cos(theta))
    lambda2 = lambda1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * math.sin(phi2),
    )
    return math.degrees(phi2), normalize_longitude(math.degrees(lambda2))


def lerp_position(start: tuple[float, float], end: tuple[float, float], t: float) -> tuple[float, float]:
    """Linear interpolation between two ``(lat, lng)`` pairs.

    Longitude follows the shorter way around, so blending across the
    antimeridian stays local.  ``t == 1`` returns *end* exactly, so a
    full-gain blend is a true snap.
    """
    if t >= 1.0:
        return end
    d_lng = _shortest_difference(start[1], end[1])
    return (
        start[0] + (end[0] - start[0]) * t,
        normalize_longitude(start[1] + d_lng * t),
    )


def lerp_angle(start: float, end: float, t: float) -> float:
    """Interpolate between two headings along the shortest arc.

    The result is normalized to ``[0, 360)``.
    """
    if t >= 1.0:
        return normalize_heading(end)
    diff = _shortest_difference(start, end)
    return normalize_heading(start + diff * t)


def normalize_heading(degrees: float) -> float:
    """Wrap an angle into ``[0, 360)``."""
    wrapped = degrees % 360.0
    # -1e-15 % 360.0 == 360.0 in floating point
    return 0.0 if wrapped >= 360.0 else wrapped


def normalize_longitude(degrees: float) -> float:
    """Wrap a longitude into ``[-180, 180]``; in-range values pass through untouched."""
    if -180.0 <= degrees <= 180.0:
        return degrees
    return (degrees + 180.0) % 360.0 - 180.0


def _shortest_difference(start: float, end: float) -> float:
    """Signed angular step from *start* to *end* in ``[-180, 180)``."""
    return (end - start + 180.0) % 360.0 - 180.0


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def kmh_to_mps(speed_kmh: float) -> float:
    return speed_kmh * 1000.0 / 3600.0
