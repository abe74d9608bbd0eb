"""Latitude/longitude to sphere projection and surface frames."""
from __future__ import annotations

from math import cos, pi, radians, sin
from typing import Iterable, Tuple

from pygame.math import Vector3

WORLD_UP = Vector3(0.0, 1.0, 0.0)
_POLE_EAST = Vector3(1.0, 0.0, 0.0)


def project(lat: float, lon: float, radius: float) -> Vector3:
    """Map latitude/longitude in degrees onto a sphere of ``radius``."""

    phi = (90.0 - lat) * pi / 180.0
    theta = (lon + 180.0) * pi / 180.0
    return Vector3(
        -radius * sin(phi) * cos(theta),
        radius * cos(phi),
        radius * sin(phi) * sin(theta),
    )


def surface_frame(position: Vector3) -> Tuple[Vector3, Vector3, Vector3]:
    """Return ``(up, east, north)`` unit vectors at a surface point."""

    up = Vector3(position).normalize()
    east = WORLD_UP.cross(up)
    if east.length_squared() < 1e-12:
        # Poles: any tangent works as east.
        east = Vector3(_POLE_EAST)
    else:
        east = east.normalize()
    north = up.cross(east).normalize()
    return up, east, north


def heading_direction(position: Vector3, heading: float) -> Vector3:
    """Unit tangent pointing along ``heading`` (0 = north, clockwise)."""

    _, east, north = surface_frame(position)
    heading_rad = radians(heading)
    return (north * cos(heading_rad) + east * sin(heading_rad)).normalize()


def centroid(points: Iterable[Vector3]) -> Vector3:
    total = Vector3()
    count = 0
    for point in points:
        total += point
        count += 1
    if count == 0:
        return total
    return total / count


__all__ = ["WORLD_UP", "centroid", "heading_direction", "project", "surface_frame"]
