"""Vessel feed records, kinematics and the fleet arena."""

from .fleet import VesselFleet
from .kinematics import KinematicsParams, VesselReport, VesselState, VesselTransform, Waypoint

__all__ = [
    "KinematicsParams",
    "VesselFleet",
    "VesselReport",
    "VesselState",
    "VesselTransform",
    "Waypoint",
]
