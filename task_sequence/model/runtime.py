"""Runtime value types shared by estimators, sources and the tracking engine."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from task_sequence.battery import IPowerSink


class WaitStatus(str, Enum):
    WAITING = "waiting"
    CONFIRMED = "confirmed"
    TIMED_OUT = "timed_out"
    BATTERY_EXHAUSTED = "battery_exhausted"
    BATTERY_BELOW_THRESHOLD = "battery_below_threshold"

    @property
    def feasible(self) -> bool:
        return self in (WaitStatus.WAITING, WaitStatus.CONFIRMED)


@dataclass(frozen=True, slots=True)
class State:
    """Projected agent state. ``None`` fields are not tracked."""

    time: Optional[float] = None
    battery_soc: Optional[float] = None
    waypoint: Optional[str] = None

    def with_time(self, time: float) -> "State":
        return replace(self, time=time)

    def with_battery_soc(self, battery_soc: float) -> "State":
        return replace(self, battery_soc=battery_soc)


@dataclass(frozen=True, slots=True)
class Constraints:
    drain_battery: bool = True
    threshold_soc: float = 0.1


@dataclass(slots=True)
class Parameters:
    ambient_sink: Optional["IPowerSink"] = None


@dataclass(frozen=True, slots=True)
class Estimate:
    finish_state: State
    wait_until: float


@dataclass(frozen=True, slots=True)
class Header:
    category: str
    detail: str
    original_duration_estimate: float


@dataclass(frozen=True, slots=True)
class EstimateResult:
    """Estimate widened with the reason a candidate was rejected."""

    estimate: Optional[Estimate]
    status: WaitStatus
    reason: str = field(default="")

    @property
    def feasible(self) -> bool:
        return self.estimate is not None
