"""Polygon ring normalisation and angular edge resampling."""
from __future__ import annotations

from math import ceil
from typing import Iterable, List, Sequence, Tuple

GeoPoint = Tuple[float, float]  # (lon, lat) degrees


class RingError(ValueError):
    """Raised when a polygon ring has too few distinct points."""


def normalize_ring(ring: Iterable[Sequence[float]]) -> List[GeoPoint]:
    """Return a closed ring of float ``(lon, lat)`` tuples.

    Consecutive duplicates are dropped; the first point is appended again when
    the input ring is open.
    """

    points: List[GeoPoint] = []
    for coord in ring:
        point = (float(coord[0]), float(coord[1]))
        if points and points[-1] == point:
            continue
        points.append(point)
    if len(points) > 1 and points[0] == points[-1]:
        points.pop()
    if len(set(points)) < 3:
        raise RingError(f"ring needs at least 3 distinct points, got {len(set(points))}")
    points.append(points[0])
    return points


def resample_edge(start: GeoPoint, end: GeoPoint, max_step_degrees: float = 1.0) -> List[GeoPoint]:
    """Linearly interpolate ``steps + 1`` points from ``start`` to ``end``."""

    if max_step_degrees <= 0.0:
        raise ValueError("max_step_degrees must be positive")
    lon1, lat1 = start
    lon2, lat2 = end
    d_lon = lon2 - lon1
    d_lat = lat2 - lat1
    steps = max(2, ceil(max(abs(d_lon), abs(d_lat)) / max_step_degrees))
    points = [(lon1 + d_lon * (i / steps), lat1 + d_lat * (i / steps)) for i in range(steps + 1)]
    # Pin the endpoint so joints stay bit-identical to the input vertices.
    points[-1] = (lon2, lat2)
    return points


def resample_ring(ring: Sequence[GeoPoint], max_step_degrees: float = 1.0) -> List[GeoPoint]:
    """Resample every edge of ``ring`` so no step exceeds ``max_step_degrees``."""

    if len(ring) < 2:
        raise ValueError("ring needs at least 2 points to resample")
    resampled: List[GeoPoint] = []
    for index in range(len(ring) - 1):
        segment = resample_edge(ring[index], ring[index + 1], max_step_degrees)
        if index > 0:
            segment = segment[1:]
        resampled.extend(segment)
    return resampled


__all__ = ["GeoPoint", "RingError", "normalize_ring", "resample_edge", "resample_ring"]
