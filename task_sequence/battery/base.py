"""Ambient power sink abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod


class IPowerSink(ABC):
    """Continuous power draw of the agent while it is idle."""

    @abstractmethod
    def compute_change_in_charge(self, duration_seconds: float) -> float:
        """Fraction of battery charge consumed over ``duration_seconds``."""
