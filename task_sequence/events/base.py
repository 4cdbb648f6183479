"""Event estimation contract shared by every event kind."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from task_sequence.model import Constraints, Estimate, Header, Parameters, State


class ITravelEstimator(ABC):
    """Travel-time oracle used by locomotion events."""

    @abstractmethod
    def estimate(self, origin: Optional[str], destination: str) -> Optional[float]:
        """Seconds needed to travel, or ``None`` when unreachable."""


class IActivityModel(ABC):
    """Per-attempt estimator of one event."""

    @abstractmethod
    def estimate_finish(
        self,
        state: State,
        earliest_arrival_time: float,
        constraints: Constraints,
        travel_estimator: ITravelEstimator | None = None,
    ) -> Optional[Estimate]:
        """Project the state after the event, or ``None`` if infeasible."""

    @abstractmethod
    def invariant_duration(self) -> float:
        """Duration bound that needs no estimation."""

    @abstractmethod
    def invariant_finish_state(self) -> State:
        """Finish state fixed at construction."""


class IEventDescription(ABC):
    """Reusable event configuration that manufactures estimators."""

    @abstractmethod
    def make_model(self, invariant_initial_state: State, parameters: Parameters) -> IActivityModel:
        """Create a fresh estimator bound to ``invariant_initial_state``."""

    @abstractmethod
    def generate_header(self, state: State, parameters: Parameters) -> Header:
        """Static display header for this event."""
