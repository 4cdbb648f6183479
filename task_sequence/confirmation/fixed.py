"""Confirmation source that needs no external actor."""

from __future__ import annotations

import threading
import weakref

from .base import IConfirmationSource, IConfirmationTarget


class FixedIntervalConfirmationSource(IConfirmationSource):
    """Confirm a target once it has been requested ``confirm_after`` times.

    With ``confirm_after=None`` targets are never confirmed, so the event keeps
    extending by one interval per estimate until it times out.
    """

    def __init__(self, confirm_after: int | None = None) -> None:
        if confirm_after is not None and confirm_after < 1:
            raise ValueError("confirm_after must be >= 1 when provided")
        self._confirm_after = confirm_after
        self._lock = threading.Lock()
        self._targets: weakref.WeakValueDictionary[str, IConfirmationTarget] = (
            weakref.WeakValueDictionary()
        )
        # Keyed by target so counts vanish together with their estimator.
        self._request_counts: weakref.WeakKeyDictionary[IConfirmationTarget, int] = (
            weakref.WeakKeyDictionary()
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._request_counts)

    @property
    def confirm_after(self) -> int | None:
        return self._confirm_after

    def attach(self, target: IConfirmationTarget) -> None:
        with self._lock:
            self._targets[target.token] = target
            self._request_counts.setdefault(target, 0)

    def detach(self, token: str) -> None:
        with self._lock:
            target = self._targets.pop(token, None)
            if target is not None:
                self._request_counts.pop(target, None)

    def is_attached(self, token: str) -> bool:
        with self._lock:
            return token in self._targets

    def request_count(self, token: str) -> int:
        with self._lock:
            target = self._targets.get(token)
            if target is None:
                return 0
            return self._request_counts.get(target, 0)

    def request(self, token: str, now: float) -> None:  # noqa: ARG002
        with self._lock:
            target = self._targets.get(token)
            if target is None:
                return
            count = self._request_counts.get(target, 0) + 1
            self._request_counts[target] = count
        if self._confirm_after is not None and count >= self._confirm_after:
            target.confirm()
