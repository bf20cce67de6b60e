"""
Water-level simulator.

SIMULATION ONLY: levels are a bounded random walk started from fixed
initial values. They are not sensor readings and do not model real
hydrology. Each tick moves every river by (u - 0.45) * 0.2 metres with
u uniform in [0, 1), so levels drift slowly upward, clamped to
[3.0, 11.0] m.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel


class FloodStatus(str, Enum):
    NORMAL = "Normal"
    MINOR = "Minor Flood"
    MAJOR = "Major Flood"

    @property
    def alert(self) -> str:
        if self is FloodStatus.NORMAL:
            return "Normal"
        return f"{self.value} Alert"


@dataclass(frozen=True)
class River:
    """A monitored river gauge with its flood thresholds in metres."""

    id: str
    name: str
    minor: float
    major: float
    initial: float
    color: str

    @property
    def short_name(self) -> str:
        return self.name.split("(")[0].strip()


RIVERS: tuple[River, ...] = (
    River("kalu", "Kalu Ganga (Ratnapura)", minor=5.0, major=6.5, initial=4.5, color="#10b981"),
    River("mahaweli", "Mahaweli River (Peradeniya)", minor=8.5, major=10.0, initial=7.0, color="#3b82f6"),
    River("kelani", "Kelani River (Hanwella)", minor=6.5, major=7.8, initial=6.0, color="#f59e0b"),
)


def classify_level(level: float, minor: float, major: float) -> FloodStatus:
    """Strictly above a threshold counts as crossing it."""
    if level > major:
        return FloodStatus.MAJOR
    if level > minor:
        return FloodStatus.MINOR
    return FloodStatus.NORMAL


class RiverReading(BaseModel):
    """Current simulated level of one river."""

    id: str
    name: str
    short_name: str
    current: float
    minor: float
    major: float
    status: FloodStatus
    alert: str
    color: str
    simulated: bool = True


class WaterLevelSimulator:
    """Bounded random walk over a fixed set of rivers."""

    MIN_LEVEL = 3.0
    MAX_LEVEL = 11.0
    DRIFT = 0.45
    STEP_SCALE = 0.2

    def __init__(self, rivers: tuple[River, ...] = RIVERS, rng: random.Random | None = None):
        self.rivers = rivers
        self._rng = rng or random.Random()
        self._levels = {river.id: river.initial for river in rivers}
        self.tick_count = 0

    def _step(self, level: float) -> float:
        fluctuation = (self._rng.random() - self.DRIFT) * self.STEP_SCALE
        bounded = max(self.MIN_LEVEL, min(self.MAX_LEVEL, level + fluctuation))
        return round(bounded, 2)

    def tick(self) -> list[RiverReading]:
        """Advance every river by one step and return the new readings."""
        self._levels = {river_id: self._step(level) for river_id, level in self._levels.items()}
        self.tick_count += 1
        return self.readings()

    def readings(self) -> list[RiverReading]:
        levels = self._levels
        readings = []
        for river in self.rivers:
            level = levels[river.id]
            status = classify_level(level, river.minor, river.major)
            readings.append(
                RiverReading(
                    id=river.id,
                    name=river.name,
                    short_name=river.short_name,
                    current=level,
                    minor=river.minor,
                    major=river.major,
                    status=status,
                    alert=status.alert,
                    color=river.color,
                )
            )
        return readings
