from __future__ import annotations

import sys
from math import isclose
from pathlib import Path

from pygame.math import Vector3

sys.path.append(str(Path(__file__).resolve().parents[1]))

from globe.geo.projection import centroid, heading_direction, project, surface_frame


def test_projection_keeps_points_on_radius() -> None:
    for radius in (1.0, 2.0, 2.02):
        for lat in range(-90, 91, 15):
            for lon in range(-180, 181, 30):
                point = project(float(lat), float(lon), radius)
                assert isclose(point.length(), radius, rel_tol=1e-12)


def test_projection_axes() -> None:
    equator = project(0.0, 0.0, 1.0)
    assert equator.distance_to(Vector3(1.0, 0.0, 0.0)) < 1e-12

    north_pole = project(90.0, 45.0, 2.0)
    assert north_pole.distance_to(Vector3(0.0, 2.0, 0.0)) < 1e-12

    east = project(0.0, 90.0, 1.0)
    assert east.distance_to(Vector3(0.0, 0.0, -1.0)) < 1e-12


def test_surface_frame_is_orthonormal() -> None:
    up, east, north = surface_frame(project(35.0, 120.0, 2.0))
    for axis in (up, east, north):
        assert isclose(axis.length(), 1.0, rel_tol=1e-12)
    assert abs(up.dot(east)) < 1e-12
    assert abs(up.dot(north)) < 1e-12
    assert abs(east.dot(north)) < 1e-12


def test_surface_frame_at_pole_falls_back() -> None:
    up, east, north = surface_frame(project(90.0, 0.0, 1.0))
    assert east.distance_to(Vector3(1.0, 0.0, 0.0)) < 1e-9
    assert abs(north.dot(up)) < 1e-9


def test_heading_direction_points_north_and_east() -> None:
    origin = project(0.0, 0.0, 2.0)
    north = heading_direction(origin, 0.0)
    east = heading_direction(origin, 90.0)
    assert north.distance_to(Vector3(0.0, 1.0, 0.0)) < 1e-9
    # Moving east increases longitude, which on this projection is -Z.
    step_east = project(0.0, 0.5, 2.0) - origin
    assert east.dot(step_east.normalize()) > 0.99


def test_centroid_of_points() -> None:
    points = [Vector3(1.0, 0.0, 0.0), Vector3(-1.0, 2.0, 0.0), Vector3(0.0, 1.0, 3.0)]
    assert centroid(points).distance_to(Vector3(0.0, 1.0, 1.0)) < 1e-12
    assert centroid([]) == Vector3()
