"""Screen-size stable scaling for vessel markers."""
from __future__ import annotations

from dataclasses import dataclass

from pygame.math import Vector3

SCREEN_SCALE_FACTOR = 0.1
HIGHLIGHT_MULTIPLIER = 1.3
SCALE_SMOOTHING = 0.15


def target_marker_scale(camera_position: Vector3, marker_position: Vector3, highlighted: bool = False) -> float:
    scale = camera_position.distance_to(marker_position) * SCREEN_SCALE_FACTOR
    return scale * HIGHLIGHT_MULTIPLIER if highlighted else scale


@dataclass
class MarkerScale:
    """Per-marker scale eased toward the distance-based target each frame."""

    scale: float = 1.0

    def update(self, camera_position: Vector3, marker_position: Vector3, highlighted: bool = False) -> float:
        target = target_marker_scale(camera_position, marker_position, highlighted)
        self.scale += (target - self.scale) * SCALE_SMOOTHING
        return self.scale


__all__ = ["MarkerScale", "target_marker_scale"]
