"""Runtime settings loaded from settings.json."""
from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from globe.vessels.kinematics import KinematicsParams


def read_settings(settings_path: Path) -> Dict[str, Any]:
    """Raw settings.json contents; missing or malformed files read as empty."""

    if not settings_path.exists():
        return {}
    try:
        data = json.loads(settings_path.read_text())
    except json.JSONDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


DEFAULT_RESAMPLE_STEP_DEG = 1.0

# Maps settings.json keys onto GlobeSettings attributes.
_SETTING_KEYS = {
    "simHz": "sim_hz",
    "maxFrameTime": "max_frame_time",
    "runSeconds": "run_seconds",
    "fillRadius": "fill_radius",
    "borderRadius": "border_radius",
    "labelRadius": "label_radius",
    "vesselRadius": "vessel_radius",
    "routeRadius": "route_radius",
    "resampleStepDeg": "resample_step_deg",
    "minSubdivisions": "min_subdivisions",
    "knotsToUnits": "knots_to_units",
    "noiseThreshold": "noise_threshold",
    "routeFollowRate": "route_follow_rate",
    "cameraStep": "camera_step",
    "countriesPath": "countries_path",
    "labelsPath": "labels_path",
    "vesselFeedPath": "vessel_feed_path",
    "routeFeedPath": "route_feed_path",
}


@dataclass
class GlobeSettings:
    """Tunable constants for the globe core."""

    sim_hz: float = 60.0
    max_frame_time: float = 0.25
    run_seconds: float = 10.0
    fill_radius: float = 2.0
    border_radius: float = 2.0
    label_radius: float = 2.1
    vessel_radius: float = 2.02
    route_radius: float = 2.05
    resample_step_deg: Optional[float] = DEFAULT_RESAMPLE_STEP_DEG
    min_subdivisions: int = 1
    knots_to_units: float = 0.0005
    noise_threshold: float = 0.001
    route_follow_rate: float = 0.02
    camera_step: float = 0.02
    countries_path: Optional[str] = None
    labels_path: Optional[str] = None
    vessel_feed_path: Optional[str] = None
    route_feed_path: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GlobeSettings":
        known = {field.name for field in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = _SETTING_KEYS.get(key, key)
            if name in known:
                values[name] = value
        settings = cls(**values)
        settings.min_subdivisions = max(1, int(settings.min_subdivisions))
        if settings.resample_step_deg is not None and float(settings.resample_step_deg) <= 0.0:
            # Null disables resampling; a non-positive step falls back to the default.
            settings.resample_step_deg = DEFAULT_RESAMPLE_STEP_DEG
        return settings

    def kinematics_params(self) -> KinematicsParams:
        return KinematicsParams(
            radius=self.vessel_radius,
            knots_to_units=self.knots_to_units,
            noise_threshold=self.noise_threshold,
            route_follow_rate=self.route_follow_rate,
        )

    def resolve(self, root: Path, value: Optional[str]) -> Optional[Path]:
        """Resolve a configured feed path relative to ``root``."""

        if not value:
            return None
        path = Path(value)
        return path if path.is_absolute() else root / path


__all__ = ["DEFAULT_RESAMPLE_STEP_DEG", "GlobeSettings", "read_settings"]
