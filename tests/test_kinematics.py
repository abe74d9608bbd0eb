from __future__ import annotations

import sys
from dataclasses import replace
from math import ceil, isclose
from pathlib import Path

import pytest
from pygame.math import Vector3

sys.path.append(str(Path(__file__).resolve().parents[1]))

from globe.geo.projection import project, surface_frame
from globe.vessels.kinematics import (
    KinematicsParams,
    VesselReport,
    Waypoint,
    apply_vessel_report,
    create_vessel_state,
    route_position,
    route_segment,
    set_vessel_route,
    time_to_target,
    update_vessel_motion,
    vessel_transform,
)

LAT0 = 10.0
LON0 = 20.0


def _params(**overrides) -> KinematicsParams:
    return replace(KinematicsParams(), **overrides)


def _report(lat: float = LAT0, lon: float = LON0, speed: float = 10.0, heading: float = 90.0) -> VesselReport:
    return VesselReport(vessel_id="V1", lat=lat, lon=lon, heading=heading, speed=speed)


def _moving_vessel(params: KinematicsParams, speed: float = 10.0):
    state = create_vessel_state(_report(speed=speed), params)
    apply_vessel_report(state, _report(lon=LON0 + 1.0, speed=speed), params)
    return state


def _snapshot(state) -> tuple:
    return (
        tuple(state.previous_position),
        tuple(state.target_position),
        tuple(state.current_position),
        state.orientation,
        state.interpolation_progress,
        state.is_moving,
        state.route_progress,
    )


def test_new_vessel_starts_idle_at_report() -> None:
    params = _params()
    state = create_vessel_state(_report(), params)
    expected = project(LAT0, LON0, params.radius)
    assert tuple(state.current_position) == tuple(expected)
    assert state.interpolation_progress == 1.0
    assert not state.is_moving


def test_vessel_reaches_target_after_time_to_target() -> None:
    params = _params()
    state = _moving_vessel(params)
    assert state.is_moving
    assert state.interpolation_progress == 0.0
    duration = time_to_target(state, params)
    update_vessel_motion(state, duration, params)
    assert tuple(state.current_position) == tuple(state.target_position)
    assert not state.is_moving
    assert state.interpolation_progress == 1.0


def test_zero_dt_tick_changes_nothing() -> None:
    params = _params()
    state = _moving_vessel(params)
    update_vessel_motion(state, 0.5, params)
    before = _snapshot(state)
    update_vessel_motion(state, 0.0, params)
    assert _snapshot(state) == before


def test_progress_is_monotonic_and_finishes() -> None:
    params = _params()
    state = _moving_vessel(params)
    dt = time_to_target(state, params) / 10.0
    ticks = ceil(time_to_target(state, params) / dt)
    last = state.interpolation_progress
    for _ in range(ticks):
        update_vessel_motion(state, dt, params)
        assert state.interpolation_progress >= last
        last = state.interpolation_progress
    assert state.interpolation_progress == 1.0
    update_vessel_motion(state, dt, params)
    assert state.interpolation_progress == 1.0
    assert tuple(state.current_position) == tuple(state.target_position)


def test_midway_position_is_straight_chord() -> None:
    params = _params()
    state = _moving_vessel(params)
    update_vessel_motion(state, time_to_target(state, params) * 0.5, params)
    midpoint = (state.previous_position + state.target_position) * 0.5
    assert state.current_position.distance_to(midpoint) < 1e-12
    assert state.current_position.length() < params.radius


def test_jitter_report_is_not_motion() -> None:
    params = _params()
    state = create_vessel_state(_report(), params)
    apply_vessel_report(state, _report(lat=LAT0 + 1e-5, speed=12.0), params)
    assert state.interpolation_progress == 0.0
    assert not state.is_moving
    assert state.chord_distance <= params.noise_threshold

    # The tiny hop still settles on the reported point.
    update_vessel_motion(state, time_to_target(state, params), params)
    assert state.interpolation_progress == 1.0
    assert not state.is_moving
    assert tuple(state.current_position) == tuple(state.target_position)


def test_unchanged_position_with_speed_is_not_motion() -> None:
    params = _params()
    state = create_vessel_state(_report(speed=0.0), params)
    apply_vessel_report(state, _report(speed=15.0), params)
    assert not state.is_moving
    assert state.report.speed == 15.0


def test_stationary_speed_still_guards_division() -> None:
    params = _params()
    state = _moving_vessel(params, speed=0.0)
    assert not state.is_moving
    update_vessel_motion(state, 1.0, params)
    assert 0.0 < state.interpolation_progress < 1.0
    assert not state.is_moving


def test_late_report_restarts_from_current_position() -> None:
    params = _params()
    state = _moving_vessel(params)
    update_vessel_motion(state, time_to_target(state, params) * 0.4, params)
    midway = Vector3(state.current_position)
    apply_vessel_report(state, _report(lat=LAT0 + 1.0, lon=LON0 + 1.0), params)
    assert tuple(state.previous_position) == tuple(midway)
    assert state.interpolation_progress == 0.0
    assert tuple(state.target_position) == tuple(project(LAT0 + 1.0, LON0 + 1.0, params.radius))


def test_orientation_follows_surface_and_motion() -> None:
    params = _params()
    state = _moving_vessel(params)
    update_vessel_motion(state, time_to_target(state, params) * 0.5, params)
    transform = vessel_transform(state)
    up = transform.orientation.rotate(Vector3(0.0, 1.0, 0.0))
    forward = transform.orientation.rotate(Vector3(0.0, 0.0, 1.0))
    assert up.dot(state.current_position.normalize()) > 1.0 - 1e-9
    direction = (state.target_position - state.previous_position).normalize()
    assert forward.dot(direction) > 0.99


def test_orientation_waits_for_minimum_progress() -> None:
    params = _params()
    state = _moving_vessel(params)
    initial = state.orientation
    update_vessel_motion(state, time_to_target(state, params) * 0.005, params)
    assert state.orientation == initial


def test_new_vessel_faces_reported_heading() -> None:
    params = _params()
    state = create_vessel_state(_report(lat=0.0, lon=0.0, heading=0.0), params)
    _, east, north = surface_frame(state.current_position)
    forward = state.orientation.rotate(Vector3(0.0, 0.0, 1.0))
    assert forward.dot(north) > 1.0 - 1e-9

    state = create_vessel_state(_report(lat=0.0, lon=0.0, heading=90.0), params)
    forward = state.orientation.rotate(Vector3(0.0, 0.0, 1.0))
    assert forward.dot(east) > 1.0 - 1e-9


def test_route_position_hits_both_ends() -> None:
    params = _params()
    waypoints = [(10.0, 20.0), (12.0, 25.0), (15.0, 22.0)]
    route = [project(lat, lon, params.radius) for lat, lon in waypoints]
    assert route_position(route, 0.0, params.radius).distance_to(route[0]) < 1e-9
    assert route_position(route, 1.0, params.radius).distance_to(route[-1]) < 1e-9
    assert route_position(route, 0.5, params.radius).distance_to(route[1]) < 1e-9
    for step in range(11):
        point = route_position(route, step / 10.0, params.radius)
        assert isclose(point.length(), params.radius, rel_tol=1e-12)


def test_route_segment_mapping() -> None:
    assert route_segment(0.0, 3) == (0, 0.0)
    assert route_segment(0.25, 3) == (0, 0.5)
    assert route_segment(1.0, 3) == (1, 1.0)


def test_route_drives_position_along_sphere() -> None:
    params = _params(route_follow_rate=0.1)
    state = create_vessel_state(_report(), params)
    set_vessel_route(
        state,
        [Waypoint(LAT0, LON0), Waypoint(LAT0 + 3.0, LON0 + 3.0), Waypoint(LAT0 + 5.0, LON0)],
        params,
    )
    assert state.has_route
    update_vessel_motion(state, 2.0, params)
    assert isclose(state.route_progress, 0.2, rel_tol=1e-12)
    assert isclose(state.current_position.length(), params.radius, rel_tol=1e-12)
    for _ in range(20):
        update_vessel_motion(state, 1.0, params)
    assert state.route_progress == 1.0
    assert state.current_position.distance_to(project(LAT0 + 5.0, LON0, params.radius)) < 1e-9


def test_short_route_clears() -> None:
    params = _params()
    state = create_vessel_state(_report(), params)
    set_vessel_route(state, [Waypoint(0.0, 0.0), Waypoint(1.0, 1.0)], params)
    assert state.has_route
    set_vessel_route(state, [Waypoint(0.0, 0.0)], params)
    assert not state.has_route


def test_report_from_feed_record() -> None:
    report = VesselReport.from_dict({"id": 7, "lat": "1.5", "lon": 2, "heading": 45})
    assert report.vessel_id == "7"
    assert report.speed == 0.0
    assert report.timestamp is None
    with pytest.raises(KeyError):
        VesselReport.from_dict({"id": "x", "lat": 1.0})
