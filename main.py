"""Headless entry point: run the globe core against the configured feeds."""
from __future__ import annotations

from pathlib import Path

from globe.engine.logger import init_logger
from globe.engine.loop import FixedTimestepLoop
from globe.engine.settings import GlobeSettings, read_settings
from globe.engine.simulation import GlobeSimulation


SETTINGS_PATH = Path("settings.json")


def main() -> None:
    raw = read_settings(SETTINGS_PATH)
    settings = GlobeSettings.from_dict(raw)
    logger = init_logger(raw)
    root = SETTINGS_PATH.resolve().parent

    simulation = GlobeSimulation(settings, logger)
    simulation.load(root)
    first = next(iter(simulation.fleet), None)
    if first is not None:
        simulation.select_vessel(first.vessel_id, root)

    loop_log = logger.channel("loop")
    frames = {"count": 0}

    def render(alpha: float) -> None:
        snapshot = simulation.snapshot()
        frames["count"] += 1
        loop_log.debug(
            "frame=%d alpha=%.2f vessels=%d fills=%d",
            frames["count"],
            alpha,
            len(snapshot.vessels),
            len(snapshot.visible_fills),
        )

    updates = max(1, int(settings.run_seconds * settings.sim_hz))
    loop = FixedTimestepLoop(
        simulation.update,
        render,
        fixed_hz=settings.sim_hz,
        max_frame_time=settings.max_frame_time,
        max_updates=updates,
    )
    loop.run()

    triangles = sum(layer.mesh.triangle_count for layer in simulation.countries)
    logger.channel("vessels").info(
        "Simulated %.1fs: %d vessels (%d moving), %d country layers, %d triangles",
        simulation.elapsed,
        len(simulation.fleet),
        simulation.fleet.moving_count(),
        len(simulation.countries),
        triangles,
    )


if __name__ == "__main__":
    main()
