"""Hemisphere visibility tests for globe overlays."""
from __future__ import annotations

from pygame.math import Vector3

FILL_FACING_THRESHOLD = 0.0
BORDER_FACING_THRESHOLD = 0.2
LABEL_FACING_THRESHOLD = 0.1


def is_front_facing(camera_position: Vector3, point: Vector3, threshold: float = FILL_FACING_THRESHOLD) -> bool:
    """True when ``point`` lies on the camera's side of the globe."""

    if camera_position.length_squared() < 1e-12 or point.length_squared() < 1e-12:
        return False
    return camera_position.normalize().dot(point.normalize()) > threshold


def label_visible(camera_position: Vector3, anchor: Vector3, threshold: float = LABEL_FACING_THRESHOLD) -> bool:
    """Labels use the view ray from the anchor rather than the camera direction."""

    to_camera = camera_position - anchor
    if to_camera.length_squared() < 1e-12 or anchor.length_squared() < 1e-12:
        return False
    return anchor.normalize().dot(to_camera.normalize()) > threshold


__all__ = [
    "BORDER_FACING_THRESHOLD",
    "FILL_FACING_THRESHOLD",
    "LABEL_FACING_THRESHOLD",
    "is_front_facing",
    "label_visible",
]
