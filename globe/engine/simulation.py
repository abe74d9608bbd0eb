"""Frame-driven container tying vessels, countries and camera together."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from pygame.math import Vector3

from globe.engine.logger import GlobeLogger
from globe.engine.settings import GlobeSettings
from globe.render.camera import CameraFrame, CameraTransitionController, GlobeCamera
from globe.render.features import (
    CountryLayer,
    LabelAnchor,
    build_country_layers,
    load_feature_collection,
    load_labels,
)
from globe.render.markers import MarkerScale
from globe.render.visibility import (
    BORDER_FACING_THRESHOLD,
    FILL_FACING_THRESHOLD,
    is_front_facing,
    label_visible,
)
from globe.vessels.feed import load_route, load_vessel_records
from globe.vessels.fleet import VesselFleet
from globe.vessels.kinematics import VesselTransform, route_polyline


@dataclass
class FrameSnapshot:
    """Everything the renderer needs for one frame."""

    vessels: Dict[str, VesselTransform]
    marker_scales: Dict[str, float]
    camera: Optional[CameraFrame]
    camera_position: Vector3
    visible_fills: List[int] = field(default_factory=list)
    visible_borders: List[int] = field(default_factory=list)
    visible_labels: List[str] = field(default_factory=list)
    route_line: List[Vector3] = field(default_factory=list)


class GlobeSimulation:
    def __init__(self, settings: GlobeSettings, logger: GlobeLogger) -> None:
        self.settings = settings
        self._feeds_log = logger.channel("feeds")
        self._tessellation_log = logger.channel("tessellation")
        self._camera_log = logger.channel("camera")
        self.fleet = VesselFleet(settings.kinematics_params(), logger.channel("vessels"))
        self.camera = CameraTransitionController(GlobeCamera(), step=settings.camera_step, logger=self._camera_log)
        self.countries: List[CountryLayer] = []
        self.labels: List[LabelAnchor] = []
        self._markers: Dict[str, MarkerScale] = {}
        self._last_camera_frame: Optional[CameraFrame] = None
        self.elapsed = 0.0

    def load(self, root: Path) -> None:
        """Load every feed configured in settings, relative to ``root``."""

        feeds = self._feeds_log
        countries_path = self.settings.resolve(root, self.settings.countries_path)
        if countries_path is not None:
            features = load_feature_collection(countries_path, feeds)
            self.countries = build_country_layers(features, self.settings, self._tessellation_log)
        labels_path = self.settings.resolve(root, self.settings.labels_path)
        if labels_path is not None:
            self.labels = load_labels(labels_path, self.settings.label_radius, feeds)
        vessel_path = self.settings.resolve(root, self.settings.vessel_feed_path)
        if vessel_path is not None:
            self.fleet.sync_records(load_vessel_records(vessel_path, feeds))
            feeds.info("Loaded %d vessels", len(self.fleet))

    def select_vessel(self, vessel_id: Optional[str], root: Optional[Path] = None) -> None:
        """Select a vessel, attach its route feed and fly the camera to it."""

        self.fleet.select(vessel_id)
        state = self.fleet.selected()
        if state is None:
            if self.camera.return_from_vessel() is not None:
                self._camera_log.info("Returning camera to globe view")
            return
        route_path = self.settings.resolve(root or Path("."), self.settings.route_feed_path)
        if route_path is not None:
            self.fleet.set_route(state.vessel_id, load_route(route_path, self._feeds_log))
        self.camera.fly_to_vessel(state.current_position, state.report.heading)

    def update(self, dt: float) -> None:
        self.elapsed += dt
        self.fleet.update(dt)
        self._last_camera_frame = self.camera.tick()

    def _route_line(self) -> List[Vector3]:
        state = self.fleet.selected()
        if state is None or not state.has_route:
            return []
        return route_polyline(state.route, self.settings.route_radius)

    def snapshot(self) -> FrameSnapshot:
        camera_position = Vector3(self.camera.camera.position)
        transforms = self.fleet.transforms()
        for vessel_id in list(self._markers):
            if vessel_id not in transforms:
                del self._markers[vessel_id]
        scales = {}
        for vessel_id, transform in transforms.items():
            marker = self._markers.setdefault(vessel_id, MarkerScale())
            highlighted = vessel_id == self.fleet.selected_id
            scales[vessel_id] = marker.update(camera_position, transform.position, highlighted)
        return FrameSnapshot(
            vessels=transforms,
            marker_scales=scales,
            camera=self._last_camera_frame,
            camera_position=camera_position,
            visible_fills=[
                index
                for index, layer in enumerate(self.countries)
                if is_front_facing(camera_position, layer.centroid, FILL_FACING_THRESHOLD)
            ],
            visible_borders=[
                index
                for index, layer in enumerate(self.countries)
                if is_front_facing(camera_position, layer.centroid, BORDER_FACING_THRESHOLD)
            ],
            visible_labels=[
                label.name for label in self.labels if label_visible(camera_position, label.position)
            ],
            route_line=self._route_line(),
        )


__all__ = ["FrameSnapshot", "GlobeSimulation"]
