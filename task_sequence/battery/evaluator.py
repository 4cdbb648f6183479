"""Battery drain and state-of-charge feasibility checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from task_sequence.model.runtime import WaitStatus

from .base import IPowerSink


@dataclass(frozen=True, slots=True)
class SocCheck:
    battery_soc: float
    status: Optional[WaitStatus] = None

    @property
    def feasible(self) -> bool:
        return self.status is None


def compute_drain(duration: float, sink: IPowerSink | None) -> float:
    if sink is None:
        return 0.0
    return sink.compute_change_in_charge(max(0.0, duration))


def evaluate_soc(battery_soc: float, drain: float, threshold_soc: float) -> SocCheck:
    """Apply ``drain`` and judge the result.

    Going negative and reaching the threshold are independent failures; the
    negative check wins when both hold.
    """
    remaining = battery_soc - drain
    if remaining < 0.0:
        return SocCheck(battery_soc=remaining, status=WaitStatus.BATTERY_EXHAUSTED)
    if remaining <= threshold_soc:
        return SocCheck(battery_soc=remaining, status=WaitStatus.BATTERY_BELOW_THRESHOLD)
    return SocCheck(battery_soc=remaining)
