"""Metrics interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from task_sequence.messaging import ConfirmationMessage


class IMetric(ABC):
    """Metrics consumer interface."""

    @abstractmethod
    def consume(self, message: ConfirmationMessage) -> None:
        """Consume one message."""

    @abstractmethod
    def report(self) -> dict:
        """Return metric report."""

    @abstractmethod
    def reset(self) -> None:
        """Reset internal state."""
