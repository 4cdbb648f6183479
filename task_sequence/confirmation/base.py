"""Confirmation source abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod


class IConfirmationTarget(ABC):
    """Anything that waits on a correlation token."""

    @property
    @abstractmethod
    def token(self) -> str:
        """Correlation token, fixed for the target's lifetime."""

    @abstractmethod
    def confirm(self) -> bool:
        """Latch confirmation. Return True on the first call only."""


class IConfirmationSource(ABC):
    """Delivers confirmation to attached targets and carries their requests."""

    @abstractmethod
    def attach(self, target: IConfirmationTarget) -> None:
        """Start routing confirmations for ``target.token`` to ``target``."""

    @abstractmethod
    def detach(self, token: str) -> None:
        """Stop routing ``token``. Later confirmations for it are unmatched."""

    @abstractmethod
    def is_attached(self, token: str) -> bool:
        """Whether a live target is registered under ``token``."""

    @abstractmethod
    def request(self, token: str, now: float) -> None:
        """Announce (or re-announce) that ``token`` is awaiting confirmation."""

    @property
    def unmatched_count(self) -> int:
        """Responses that arrived for no live target."""
        return 0
