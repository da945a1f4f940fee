"""Tick pacing for hosts driving the interpreter in real time."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import TICK_RATE_HZ


@dataclass
class TickScheduler:
    """Deterministic 60 Hz pacer.

    The host passes its own clock reading to ``due()``, which answers how
    many ticks are owed since the previous call. Falling far behind (a
    suspended process, a debugger) is capped at ``max_catch_up`` ticks.
    """

    rate_hz: float = TICK_RATE_HZ
    max_catch_up: int = 4
    enabled: bool = True

    def __post_init__(self) -> None:
        if self.rate_hz <= 0:
            raise ValueError(f"Tick rate must be positive: {self.rate_hz}")
        self.period = 1.0 / self.rate_hz
        self._next_tick: float | None = None

    def reset(self, now: float) -> None:
        """Start counting periods from ``now``."""

        self._next_tick = now + self.period

    def due(self, now: float) -> int:
        """Return the number of ticks to run at time ``now``."""

        if not self.enabled:
            return 0
        if self._next_tick is None:
            self.reset(now)
            return 1

        count = 0
        while now >= self._next_tick:
            self._next_tick += self.period
            count += 1
        if count > self.max_catch_up:
            self._next_tick = now + self.period
            count = self.max_catch_up
        return count

    @property
    def next_tick(self) -> float | None:
        return self._next_tick

    def seconds_until_next(self, now: float) -> float:
        if self._next_tick is None:
            return 0.0
        return max(0.0, self._next_tick - now)


__all__ = ["TickScheduler"]
