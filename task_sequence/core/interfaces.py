"""Tracking engine interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable

from task_sequence.model import PlanSpec

if TYPE_CHECKING:
    from .engine import TrackingRecord


class ITrackingEngine(ABC):
    """Live tracking engine contract."""

    @abstractmethod
    def build(self, spec: PlanSpec) -> None:
        """Build runtime state from a plan spec."""

    @abstractmethod
    def run(self, until: float | None = None) -> None:
        """Run tracking until horizon."""

    @abstractmethod
    def step(self, delta: float) -> None:
        """Advance tracking by ``delta`` seconds."""

    @abstractmethod
    def reset(self) -> None:
        """Reset engine state."""

    @abstractmethod
    def subscribe(self, handler: Callable[["TrackingRecord"], None]) -> None:
        """Subscribe record handler."""
