"""Fixed timestep frame loop."""
from __future__ import annotations

import time
from typing import Callable, Optional


def _no_events() -> None:
    return None


class FixedTimestepLoop:
    """Runs a deterministic fixed update loop with variable rendering.

    ``max_updates`` bounds the number of fixed updates so headless runs end
    without an external ``stop()``.
    """

    def __init__(
        self,
        update: Callable[[float], None],
        render: Callable[[float], None],
        process_events: Optional[Callable[[], None]] = None,
        fixed_hz: float = 60.0,
        max_frame_time: float = 0.25,
        max_updates: Optional[int] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        if fixed_hz <= 0.0:
            raise ValueError("fixed_hz must be positive")
        self.update = update
        self.render = render
        self.process_events = process_events or _no_events
        self.fixed_dt = 1.0 / fixed_hz
        self.max_frame_time = max_frame_time
        self.max_updates = max_updates
        self.updates = 0
        self._clock = clock
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        self._running = False

    def _budget_spent(self) -> bool:
        return self.max_updates is not None and self.updates >= self.max_updates

    def run(self) -> None:
        self._running = True
        accumulator = 0.0
        last_time = self._clock()
        while self._running:
            now = self._clock()
            frame_time = now - last_time
            last_time = now
            if frame_time > self.max_frame_time:
                frame_time = self.max_frame_time
            accumulator += frame_time
            self.process_events()
            while accumulator >= self.fixed_dt and self._running:
                self.update(self.fixed_dt)
                self.updates += 1
                accumulator -= self.fixed_dt
                if self._budget_spent():
                    self._running = False
            alpha = accumulator / self.fixed_dt if self.fixed_dt > 0 else 0.0
            self.render(alpha)


__all__ = ["FixedTimestepLoop"]
