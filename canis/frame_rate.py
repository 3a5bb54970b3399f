"""Frame timing, averaged frame rate and frame limiting."""

from __future__ import annotations

import time
from typing import Callable

NUM_SAMPLES = 60


class FrameRateManager:
    """Measures frame times and sleeps to keep below a target rate."""

    def __init__(
        self,
        target_fps: float = 60,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._clock = clock
        self._sleep = sleep
        self.max_fps = 0.0
        self.set_target_fps(target_fps)
        self.fps = 0.0
        self.delta_time = 0.0
        self.frame_time = 0.0
        self._previous_time = clock()
        self._prev_ticks = self._ticks()
        self._start_ticks = self._prev_ticks
        self._carry_over_delay = 0.0
        self._frame_times = [0.0] * NUM_SAMPLES
        self._current_frame = 0

    def _ticks(self) -> int:
        return int(self._clock() * 1000)

    def set_target_fps(self, target_fps: float) -> None:
        """Set the highest frame rate to allow."""
        if target_fps <= 0:
            raise ValueError("target fps must be positive")
        self.max_fps = float(target_fps)

    def start_frame(self) -> float:
        """Start a frame and return seconds since the previous one."""
        self._start_ticks = self._ticks()
        now = self._clock()
        self.delta_time = now - self._previous_time
        self._previous_time = now
        return self.delta_time

    def calculate_fps(self) -> None:
        """Update fps from the average of the recent frame times."""
        current_ticks = self._ticks()
        self.frame_time = current_ticks - self._prev_ticks
        self._prev_ticks = current_ticks

        self._frame_times[self._current_frame % NUM_SAMPLES] = self.delta_time * 1000
        self._current_frame += 1
        count = min(self._current_frame, NUM_SAMPLES)
        average = sum(self._frame_times[:count]) / count
        self.fps = 1000.0 / average if average > 0 else 60.0

    def end_frame(self) -> float:
        """Finish a frame, sleeping if it ran faster than the limit; return fps."""
        self.calculate_fps()
        frame_ticks = self._ticks() - self._start_ticks
        budget = 1000.0 / self.max_fps
        remaining = budget - frame_ticks + self._carry_over_delay
        if budget > frame_ticks:
            delay_ms = int(remaining)
            if delay_ms > 0:
                self._sleep(delay_ms / 1000.0)
        self._carry_over_delay = remaining - int(remaining)
        return self.fps