"""Readers for vessel and route feed snapshots stored as JSON."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from globe.engine.logger import ChannelLogger
from globe.vessels.kinematics import Waypoint


def _read_json(path: Path, logger: Optional[ChannelLogger]) -> Any:
    if not path.exists():
        if logger:
            logger.warning("Feed file %s does not exist", path)
        return None
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        if logger:
            logger.warning("Feed file %s is not valid JSON: %s", path, exc)
        return None


def load_vessel_records(path: Path, logger: Optional[ChannelLogger] = None) -> List[Dict[str, Any]]:
    """Vessel feed: a list of records or ``{"ships": [...]}``."""

    data = _read_json(path, logger)
    if isinstance(data, dict):
        data = data.get("ships", [])
    if not isinstance(data, list):
        return []
    return [entry for entry in data if isinstance(entry, dict)]


def load_route(path: Path, logger: Optional[ChannelLogger] = None) -> List[Waypoint]:
    """Route feed: a waypoint list or ``{"waypoints": [...]}``."""

    data = _read_json(path, logger)
    if isinstance(data, dict):
        data = data.get("waypoints", [])
    if not isinstance(data, list):
        return []
    waypoints = []
    for entry in data:
        try:
            waypoints.append(Waypoint.from_dict(entry))
        except (KeyError, TypeError, ValueError) as exc:
            if logger:
                logger.warning("Skipping malformed waypoint %r: %s", entry, exc)
    return waypoints


__all__ = ["load_route", "load_vessel_records"]
