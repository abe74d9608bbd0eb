"""Vessel motion model: sparse position reports to smooth globe motion."""
from __future__ import annotations

from dataclasses import dataclass, field
from math import floor
from typing import Any, Dict, List, Optional, Sequence

from pygame.math import Vector3

from globe.geo.projection import heading_direction, project
from globe.math.quaternion import Quaternion

# Axis that route quaternions rotate onto each waypoint direction.
ROUTE_REFERENCE_AXIS = Vector3(0.0, 1.0, 0.0)
PROGRESS_SNAP = 1e-9


@dataclass
class VesselReport:
    """One entry of the live vessel feed."""

    vessel_id: str
    lat: float
    lon: float
    heading: float = 0.0
    speed: float = 0.0
    timestamp: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VesselReport":
        timestamp = data.get("timestamp", data.get("lastUpdate"))
        return cls(
            vessel_id=str(data["id"]),
            lat=float(data["lat"]),
            lon=float(data["lon"]),
            heading=float(data.get("heading", 0.0)),
            speed=max(0.0, float(data.get("speed") or 0.0)),
            timestamp=float(timestamp) if timestamp is not None else None,
        )


@dataclass
class Waypoint:
    latitude: float
    longitude: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Waypoint":
        return cls(latitude=float(data["latitude"]), longitude=float(data["longitude"]))


@dataclass
class KinematicsParams:
    """Domain-calibrated constants for vessel interpolation."""

    radius: float = 2.02
    knots_to_units: float = 0.0005
    noise_threshold: float = 0.001
    speed_epsilon: float = 1e-6
    min_orientation_progress: float = 0.01
    route_follow_rate: float = 0.02


@dataclass
class VesselTransform:
    """Per-frame pose handed to the renderer."""

    position: Vector3
    orientation: Quaternion


@dataclass
class VesselState:
    vessel_id: str
    report: VesselReport
    previous_position: Vector3
    target_position: Vector3
    current_position: Vector3
    orientation: Quaternion = field(default_factory=Quaternion.identity)
    interpolation_progress: float = 1.0
    is_moving: bool = False
    route: List[Vector3] = field(default_factory=list)
    route_progress: float = 0.0

    @property
    def has_route(self) -> bool:
        return len(self.route) >= 2

    @property
    def chord_distance(self) -> float:
        return (self.target_position - self.previous_position).length()


def speed_rate(speed_knots: float, params: KinematicsParams) -> float:
    """Convert knots to sphere units per second."""

    return max(0.0, speed_knots) * params.knots_to_units


def time_to_target(state: VesselState, params: KinematicsParams) -> float:
    rate = max(speed_rate(state.report.speed, params), params.speed_epsilon)
    return state.chord_distance / rate


def _is_moving(state: VesselState, params: KinematicsParams) -> bool:
    return (
        state.interpolation_progress < 1.0
        and state.report.speed > 0.0
        and state.chord_distance > params.noise_threshold
    )


def tangent_orientation(position: Vector3, direction: Vector3) -> Optional[Quaternion]:
    """Orientation with ``up`` along the surface normal facing ``direction``.

    Returns ``None`` when the frame is degenerate.
    """

    if position.length_squared() < 1e-18 or direction.length_squared() < 1e-18:
        return None
    up = position.normalize()
    right = up.cross(direction.normalize())
    if right.length_squared() < 1e-18:
        return None
    right = right.normalize()
    forward = right.cross(up)
    return Quaternion.from_basis(right, up, forward)


def heading_orientation(position: Vector3, heading: float) -> Quaternion:
    orientation = tangent_orientation(position, heading_direction(position, heading))
    return orientation if orientation is not None else Quaternion.identity()


def create_vessel_state(report: VesselReport, params: KinematicsParams) -> VesselState:
    """First report for an id: the vessel starts idle at its reported position."""

    position = project(report.lat, report.lon, params.radius)
    return VesselState(
        vessel_id=report.vessel_id,
        report=report,
        previous_position=Vector3(position),
        target_position=Vector3(position),
        current_position=Vector3(position),
        orientation=heading_orientation(position, report.heading),
        interpolation_progress=1.0,
        is_moving=False,
    )


def apply_vessel_report(state: VesselState, report: VesselReport, params: KinematicsParams, logger=None) -> None:
    """Retarget an existing vessel; a late report overrides an unfinished hop.

    A report at the current target only refreshes speed and heading. A hop
    within the noise threshold still restarts progress but never counts as
    motion.
    """

    target = project(report.lat, report.lon, params.radius)
    state.report = report
    if tuple(target) != tuple(state.target_position):
        state.previous_position = Vector3(state.current_position)
        state.target_position = target
        state.interpolation_progress = 0.0
    state.is_moving = _is_moving(state, params)
    if logger:
        logger.debug(
            "Vessel %s retargeted chord=%.5f moving=%s",
            state.vessel_id,
            state.chord_distance,
            state.is_moving,
        )


def set_vessel_route(state: VesselState, waypoints: Sequence[Waypoint], params: KinematicsParams) -> None:
    """Attach a route; fewer than two waypoints clears it."""

    if len(waypoints) < 2:
        state.route = []
    else:
        state.route = [project(wp.latitude, wp.longitude, params.radius) for wp in waypoints]
    state.route_progress = 0.0


def route_segment(route_progress: float, waypoint_count: int) -> tuple[int, float]:
    """Map overall route progress to ``(segment index, local t)``."""

    segments = waypoint_count - 1
    segment_progress = max(0.0, min(1.0, route_progress)) * segments
    index = min(int(floor(segment_progress)), segments - 1)
    return index, segment_progress - index


def route_position(route: Sequence[Vector3], route_progress: float, radius: float) -> Vector3:
    """Point on the route by slerping rotations instead of blending positions."""

    index, t = route_segment(route_progress, len(route))
    start_rot = Quaternion.from_unit_vectors(ROUTE_REFERENCE_AXIS, route[index].normalize())
    end_rot = Quaternion.from_unit_vectors(ROUTE_REFERENCE_AXIS, route[index + 1].normalize())
    return start_rot.slerp(end_rot, t).rotate(ROUTE_REFERENCE_AXIS) * radius


def route_polyline(route: Sequence[Vector3], radius: float, samples: int = 200) -> List[Vector3]:
    """Sample the route path for a line renderer."""

    if len(route) < 2:
        return []
    samples = max(1, samples)
    return [route_position(route, i / samples, radius) for i in range(samples + 1)]


def update_vessel_motion(state: VesselState, dt: float, params: KinematicsParams, logger=None) -> None:
    """Advance one vessel by ``dt`` seconds."""

    if dt <= 0.0:
        return

    if state.interpolation_progress < 1.0:
        duration = time_to_target(state, params)
        if duration <= 0.0:
            progress = 1.0
        else:
            progress = min(1.0, state.interpolation_progress + dt / duration)
        if progress >= 1.0 - PROGRESS_SNAP:
            progress = 1.0
        state.interpolation_progress = progress

    direction = state.target_position - state.previous_position
    if state.has_route:
        state.route_progress = min(1.0, state.route_progress + dt * params.route_follow_rate)
        if state.route_progress >= 1.0 - PROGRESS_SNAP:
            state.route_progress = 1.0
        state.current_position = route_position(state.route, state.route_progress, params.radius)
        index, _ = route_segment(state.route_progress, len(state.route))
        direction = state.route[index + 1] - state.route[index]
        orient = direction.length() > params.noise_threshold
    else:
        state.current_position = state.previous_position + direction * state.interpolation_progress
        orient = (
            state.interpolation_progress > params.min_orientation_progress
            and direction.length() > params.noise_threshold
        )

    if orient:
        orientation = tangent_orientation(state.current_position, direction)
        if orientation is not None:
            state.orientation = orientation

    if state.interpolation_progress >= 1.0:
        if state.is_moving and logger:
            logger.debug("Vessel %s reached target", state.vessel_id)
        state.is_moving = False
        if not state.has_route:
            state.current_position = Vector3(state.target_position)
    else:
        state.is_moving = _is_moving(state, params)


def vessel_transform(state: VesselState) -> VesselTransform:
    return VesselTransform(position=Vector3(state.current_position), orientation=state.orientation)


__all__ = [
    "KinematicsParams",
    "PROGRESS_SNAP",
    "ROUTE_REFERENCE_AXIS",
    "VesselReport",
    "VesselState",
    "VesselTransform",
    "Waypoint",
    "apply_vessel_report",
    "create_vessel_state",
    "heading_orientation",
    "route_polyline",
    "route_position",
    "route_segment",
    "set_vessel_route",
    "speed_rate",
    "tangent_orientation",
    "time_to_target",
    "update_vessel_motion",
    "vessel_transform",
]
