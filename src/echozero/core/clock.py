"""Time sources for pulse phase and time-parameterised motion."""

import time

from echozero.core.config import PulseClockSource
from echozero.core.interfaces import ITimeSource


class WallClock(ITimeSource):
    """Real-time clock. Pulse phase follows the wall clock, so pausing or
    changing the tick rate shifts it."""

    def now_ms(self) -> float:
        return time.time() * 1000.0


class SimulationClock(ITimeSource):
    """Accumulates tick deltas. Pulse phase is then a pure function of
    simulated time."""

    def __init__(self, start_seconds: float = 0.0):
        self._elapsed = start_seconds

    def now_ms(self) -> float:
        return self._elapsed * 1000.0

    def advance(self, delta_time: float) -> None:
        self._elapsed += delta_time


class ManualClock(ITimeSource):
    """Clock that only moves when told to. Used by tests and replays."""

    def __init__(self, start_ms: float = 0.0):
        self._now_ms = start_ms

    def now_ms(self) -> float:
        return self._now_ms

    def set_ms(self, value: float) -> None:
        self._now_ms = value

    def tick_ms(self, delta_ms: float) -> None:
        self._now_ms += delta_ms


def create_time_source(source: PulseClockSource) -> ITimeSource:
    if source is PulseClockSource.WALL:
        return WallClock()
    if source is PulseClockSource.SIMULATION:
        return SimulationClock()
    raise ValueError(f"Unsupported pulse clock source: {source}")
