"""Keyed collection of per-vessel kinematic state."""
from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from globe.engine.logger import ChannelLogger
from globe.vessels.kinematics import (
    KinematicsParams,
    VesselReport,
    VesselState,
    VesselTransform,
    Waypoint,
    apply_vessel_report,
    create_vessel_state,
    set_vessel_route,
    update_vessel_motion,
    vessel_transform,
)


class VesselFleet:
    """Owns vessel records by id; callers decide when ids disappear."""

    def __init__(self, params: KinematicsParams, logger: Optional[ChannelLogger] = None) -> None:
        self.params = params
        self.logger = logger
        self._vessels: Dict[str, VesselState] = {}
        self._selected_id: Optional[str] = None

    def __len__(self) -> int:
        return len(self._vessels)

    def __contains__(self, vessel_id: object) -> bool:
        return vessel_id in self._vessels

    def __iter__(self) -> Iterator[VesselState]:
        return iter(self._vessels.values())

    def get(self, vessel_id: str) -> Optional[VesselState]:
        return self._vessels.get(vessel_id)

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    def selected(self) -> Optional[VesselState]:
        if self._selected_id is None:
            return None
        return self._vessels.get(self._selected_id)

    def upsert(self, report: VesselReport) -> VesselState:
        state = self._vessels.get(report.vessel_id)
        if state is None:
            state = create_vessel_state(report, self.params)
            self._vessels[report.vessel_id] = state
            if self.logger:
                self.logger.debug("Vessel %s added", report.vessel_id)
            return state
        apply_vessel_report(state, report, self.params, self.logger)
        return state

    def remove(self, vessel_id: str) -> bool:
        removed = self._vessels.pop(vessel_id, None) is not None
        if removed:
            if self._selected_id == vessel_id:
                self._selected_id = None
            if self.logger:
                self.logger.debug("Vessel %s removed", vessel_id)
        return removed

    def sync(self, reports: Iterable[VesselReport]) -> List[str]:
        """Apply a full feed snapshot; returns ids dropped from the fleet."""

        seen = set()
        for report in reports:
            self.upsert(report)
            seen.add(report.vessel_id)
        missing = [vessel_id for vessel_id in self._vessels if vessel_id not in seen]
        for vessel_id in missing:
            self.remove(vessel_id)
        return missing

    def sync_records(self, records: Iterable[dict]) -> List[str]:
        """Like ``sync`` but for raw feed dictionaries; bad records are skipped."""

        reports = []
        for record in records:
            try:
                reports.append(VesselReport.from_dict(record))
            except (KeyError, TypeError, ValueError) as exc:
                if self.logger:
                    self.logger.warning("Skipping malformed vessel record %r: %s", record, exc)
        return self.sync(reports)

    def select(self, vessel_id: Optional[str]) -> None:
        if vessel_id == self._selected_id:
            return
        previous = self.selected()
        if previous is not None:
            set_vessel_route(previous, [], self.params)
        self._selected_id = vessel_id if vessel_id in self._vessels else None

    def set_route(self, vessel_id: str, waypoints: Sequence[Waypoint]) -> bool:
        """Attach a route to the selected vessel; other ids are ignored."""

        if vessel_id != self._selected_id or vessel_id not in self._vessels:
            if self.logger:
                self.logger.debug("Ignoring route for unselected vessel %s", vessel_id)
            return False
        set_vessel_route(self._vessels[vessel_id], waypoints, self.params)
        return True

    def update(self, dt: float) -> None:
        for state in self._vessels.values():
            update_vessel_motion(state, dt, self.params, self.logger)

    def moving_count(self) -> int:
        return sum(1 for state in self._vessels.values() if state.is_moving)

    def transforms(self) -> Dict[str, VesselTransform]:
        return {vessel_id: vessel_transform(state) for vessel_id, state in self._vessels.items()}


__all__ = ["VesselFleet"]
