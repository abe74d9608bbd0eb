"""Country fill meshes, border lines and labels from GeoJSON-style data."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from pygame.math import Vector3

from globe.engine.logger import ChannelLogger
from globe.engine.settings import GlobeSettings
from globe.geo.projection import centroid, project
from globe.render.tessellation import SphereMesh, tessellate

Ring = Sequence[Sequence[float]]


@dataclass
class CountryLayer:
    """Renderable pieces for one polygon ring."""

    mesh: SphereMesh
    border: List[Vector3]
    centroid: Vector3
    name: Optional[str] = None


@dataclass
class LabelAnchor:
    name: str
    position: Vector3


def rings_from_feature(feature: Dict[str, Any]) -> Iterator[Ring]:
    """Yield every ring of a Polygon or MultiPolygon feature."""

    geometry = feature.get("geometry") or {}
    kind = geometry.get("type")
    coords = geometry.get("coordinates") or []
    if kind == "Polygon":
        yield from coords
    elif kind == "MultiPolygon":
        for polygon in coords:
            yield from polygon


def _feature_name(feature: Dict[str, Any]) -> Optional[str]:
    properties = feature.get("properties") or {}
    name = properties.get("name") or properties.get("NAME")
    return str(name) if name is not None else None


def build_country_layer(
    ring: Ring,
    settings: GlobeSettings,
    name: Optional[str] = None,
) -> CountryLayer:
    """Raises ``RingError``/``TriangulationError`` for unusable rings."""

    mesh = tessellate(
        ring,
        settings.fill_radius,
        settings.min_subdivisions,
        settings.resample_step_deg,
    )
    border = [project(float(lat), float(lon), settings.border_radius) for lon, lat, *_ in ring]
    return CountryLayer(mesh=mesh, border=border, centroid=centroid(border), name=name)


def build_country_layers(
    features: Iterable[Dict[str, Any]],
    settings: GlobeSettings,
    logger: Optional[ChannelLogger] = None,
) -> List[CountryLayer]:
    """Tessellate every ring; a bad ring is logged and skipped."""

    layers: List[CountryLayer] = []
    skipped = 0
    for feature in features:
        name = _feature_name(feature)
        for ring in rings_from_feature(feature):
            try:
                layers.append(build_country_layer(ring, settings, name))
            except (ValueError, IndexError, TypeError) as exc:
                # RingError and TriangulationError are ValueErrors.
                skipped += 1
                if logger:
                    logger.warning("Skipping ring of %s: %s", name or "unnamed feature", exc)
    if logger:
        logger.info("Built %d country layers (%d rings skipped)", len(layers), skipped)
    return layers


def load_feature_collection(path: Path, logger: Optional[ChannelLogger] = None) -> List[Dict[str, Any]]:
    if not path.exists():
        if logger:
            logger.warning("Feature collection %s does not exist", path)
        return []
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        if logger:
            logger.warning("Feature collection %s is not valid JSON: %s", path, exc)
        return []
    if not isinstance(data, dict):
        return []
    return [feature for feature in data.get("features", []) if isinstance(feature, dict)]


def load_labels(path: Path, radius: float, logger: Optional[ChannelLogger] = None) -> List[LabelAnchor]:
    """Labels file: ``[{"name": ..., "position": [lon, lat]}, ...]``."""

    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        if logger:
            logger.warning("Label file %s is not valid JSON: %s", path, exc)
        return []
    labels = []
    for entry in data if isinstance(data, list) else []:
        try:
            lon, lat = entry["position"][:2]
            labels.append(LabelAnchor(name=str(entry["name"]), position=project(float(lat), float(lon), radius)))
        except (KeyError, TypeError, ValueError) as exc:
            if logger:
                logger.warning("Skipping malformed label %r: %s", entry, exc)
    return labels


__all__ = [
    "CountryLayer",
    "LabelAnchor",
    "build_country_layer",
    "build_country_layers",
    "load_feature_collection",
    "load_labels",
    "rings_from_feature",
]
