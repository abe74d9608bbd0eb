"""Progress-driven camera transitions for fly-to and return moves."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from pygame.math import Vector3

from globe.engine.logger import ChannelLogger
from globe.geo.projection import heading_direction

DEFAULT_CAMERA_STEP = 0.02
CAMERA_HEIGHT_OFFSET = 0.15
CAMERA_DISTANCE_OFFSET = 0.2
PROGRESS_SNAP = 1e-9


def _lerp_vector(a: Vector3, b: Vector3, t: float) -> Vector3:
    """Linear interpolate between two vectors with clamped factor."""
    t = max(0.0, min(1.0, t))
    return a + (b - a) * t


def _linear(t: float) -> float:
    return t


def smoothstep(t: float) -> float:
    t = max(0.0, min(1.0, t))
    return t * t * (3.0 - 2.0 * t)


EASINGS: Dict[str, Callable[[float], float]] = {
    "linear": _linear,
    "smoothstep": smoothstep,
}


def vessel_camera_position(
    vessel_position: Vector3,
    heading: float,
    height_offset: float = CAMERA_HEIGHT_OFFSET,
    distance_offset: float = CAMERA_DISTANCE_OFFSET,
) -> Vector3:
    """Viewpoint above and behind a vessel on the globe."""

    normal = Vector3(vessel_position).normalize()
    forward = heading_direction(vessel_position, heading)
    return vessel_position + normal * height_offset - forward * distance_offset


@dataclass
class GlobeCamera:
    """Controllable viewpoint; ``look_at`` of ``None`` keeps the current aim."""

    position: Vector3 = field(default_factory=lambda: Vector3(0.0, 0.0, 6.0))
    look_at: Optional[Vector3] = field(default_factory=Vector3)


@dataclass
class CameraTransition:
    start_position: Vector3
    target_position: Vector3
    start_look_at: Optional[Vector3] = None
    end_look_at: Optional[Vector3] = None
    progress: float = 0.0
    is_animating: bool = True
    easing: str = "linear"

    def look_at(self, t: float) -> Optional[Vector3]:
        if self.start_look_at is not None and self.end_look_at is not None:
            return _lerp_vector(self.start_look_at, self.end_look_at, t)
        if self.end_look_at is not None:
            return Vector3(self.end_look_at)
        if self.start_look_at is not None:
            return Vector3(self.start_look_at)
        return None


@dataclass
class CameraFrame:
    position: Vector3
    look_at: Optional[Vector3]
    done: bool


class CameraTransitionController:
    """Drives at most one transition per camera; a new start replaces the old."""

    def __init__(
        self,
        camera: Optional[GlobeCamera] = None,
        step: float = DEFAULT_CAMERA_STEP,
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        if step <= 0.0:
            raise ValueError("camera step must be positive")
        self.camera = camera or GlobeCamera()
        self.step = step
        self.logger = logger
        self._transition: Optional[CameraTransition] = None
        self._home: Optional[Tuple[Vector3, Optional[Vector3]]] = None

    @property
    def transition(self) -> Optional[CameraTransition]:
        return self._transition

    @property
    def active(self) -> bool:
        return self._transition is not None and self._transition.is_animating

    def start(
        self,
        from_position: Vector3,
        to_position: Vector3,
        from_look_at: Optional[Vector3] = None,
        to_look_at: Optional[Vector3] = None,
        easing: str = "linear",
    ) -> CameraTransition:
        if easing not in EASINGS:
            raise ValueError(f"Unknown easing '{easing}'")
        if self._transition is not None and self.logger:
            self.logger.debug("Superseding camera transition at progress %.2f", self._transition.progress)
        self._transition = CameraTransition(
            start_position=Vector3(from_position),
            target_position=Vector3(to_position),
            start_look_at=Vector3(from_look_at) if from_look_at is not None else None,
            end_look_at=Vector3(to_look_at) if to_look_at is not None else None,
            easing=easing,
        )
        return self._transition

    def cancel(self) -> None:
        if self._transition is not None:
            self._transition.is_animating = False
            self._transition = None

    def tick(self, step: Optional[float] = None) -> Optional[CameraFrame]:
        """Advance by one fixed increment and apply the pose to the camera."""

        transition = self._transition
        if transition is None or not transition.is_animating:
            return None
        transition.progress += self.step if step is None else step
        if transition.progress >= 1.0 - PROGRESS_SNAP:
            transition.progress = 1.0
        eased = EASINGS[transition.easing](transition.progress)
        position = _lerp_vector(transition.start_position, transition.target_position, eased)
        look_at = transition.look_at(eased)
        done = transition.progress >= 1.0
        if done:
            position = Vector3(transition.target_position)
            transition.is_animating = False
            self._transition = None
            if self.logger:
                self.logger.debug("Camera transition finished at %s", tuple(position))
        self.camera.position = position
        if look_at is not None:
            self.camera.look_at = look_at
        return CameraFrame(position=Vector3(position), look_at=look_at, done=done)

    def fly_to_vessel(self, vessel_position: Vector3, heading: float, easing: str = "linear") -> CameraTransition:
        """Frame a vessel from above and behind, remembering the current view."""

        if self._home is None:
            look = Vector3(self.camera.look_at) if self.camera.look_at is not None else None
            self._home = (Vector3(self.camera.position), look)
        target = vessel_camera_position(vessel_position, heading)
        return self.start(self.camera.position, target, None, vessel_position, easing)

    def return_from_vessel(self, easing: str = "linear") -> Optional[CameraTransition]:
        """Fly back to the view saved by ``fly_to_vessel``."""

        if self._home is None:
            return None
        home_position, home_look_at = self._home
        self._home = None
        return self.start(self.camera.position, home_position, self.camera.look_at, home_look_at, easing)


__all__ = [
    "CameraFrame",
    "CameraTransition",
    "CameraTransitionController",
    "DEFAULT_CAMERA_STEP",
    "EASINGS",
    "GlobeCamera",
    "smoothstep",
    "vessel_camera_position",
]
