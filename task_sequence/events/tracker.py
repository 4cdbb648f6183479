"""Live tracking pass over executing wait-for-confirmation events."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

from task_sequence.model import Clock, Parameters, State, WaitStatus, monotonic_clock

from .wait_for_confirmation import WaitForConfirmationDescription, WaitForConfirmationModel

logger = logging.getLogger("TaskSequence.Tracker")


@dataclass(slots=True)
class TrackedEvent:
    event_id: str
    token: str
    status: WaitStatus
    request_count: int
    waiting_since: float
    last_request_time: float
    confirmed_at: Optional[float]


@dataclass(slots=True)
class _Entry:
    description: WaitForConfirmationDescription
    model: WaitForConfirmationModel
    timeout_reported: bool = False


class LiveTracker:
    """Drive the request cadence and timeout of every live event.

    Planning code only calls ``estimate_finish``; the tracker is the single
    place where requests are issued. ``tick`` must be called periodically by
    the owner, which is what makes an unpolled timeout observable.
    """

    DEFAULT_MIN_REQUEST_INTERVAL = 1.0

    def __init__(
        self,
        clock: Clock | None = None,
        *,
        min_request_interval: float = DEFAULT_MIN_REQUEST_INTERVAL,
    ) -> None:
        if min_request_interval <= 0:
            raise ValueError("min_request_interval must be > 0")
        self._clock = clock or monotonic_clock
        self._min_request_interval = float(min_request_interval)
        self._entries: dict[str, _Entry] = {}

    def start(
        self,
        event_id: str,
        description: WaitForConfirmationDescription,
        state: State,
        parameters: Parameters,
    ) -> WaitForConfirmationModel:
        if event_id in self._entries:
            raise ValueError(f"event {event_id} is already tracked")
        model = description.make_model(state, parameters)
        self._entries[event_id] = _Entry(description=description, model=model)
        model.refresh_request()
        logger.info("Tracking event %s with token %s", event_id, model.token)
        return model

    def model(self, event_id: str) -> WaitForConfirmationModel | None:
        entry = self._entries.get(event_id)
        return entry.model if entry is not None else None

    def live(self) -> list[str]:
        return list(self._entries)

    def tick(self) -> list[TrackedEvent]:
        now = self._clock()
        snapshots: list[TrackedEvent] = []
        for event_id, entry in list(self._entries.items()):
            model = entry.model
            status = model.status()
            if (
                status == WaitStatus.WAITING
                and now - model.confirmation_request_time >= self._request_interval(model)
            ):
                model.refresh_request()
                status = model.status()
            if status == WaitStatus.TIMED_OUT and not entry.timeout_reported:
                entry.timeout_reported = True
                logger.error(
                    "Confirmation timeout reached for event %s after %.3fs",
                    event_id,
                    model.elapsed(),
                )
            snapshots.append(self._snapshot(event_id, model, status))
        return snapshots

    def _request_interval(self, model: WaitForConfirmationModel) -> float:
        return max(model.initial_wait_duration, self._min_request_interval)

    def discard(self, event_id: str) -> None:
        entry = self._entries.pop(event_id, None)
        if entry is None:
            return
        entry.description.confirmation_source.detach(entry.model.token)
        logger.info("Stopped tracking event %s", event_id)

    def clear(self) -> None:
        for event_id in list(self._entries):
            self.discard(event_id)

    @staticmethod
    def _snapshot(
        event_id: str, model: WaitForConfirmationModel, status: WaitStatus
    ) -> TrackedEvent:
        return TrackedEvent(
            event_id=event_id,
            token=model.token,
            status=status,
            request_count=model.request_count,
            waiting_since=model.waiting_since,
            last_request_time=model.confirmation_request_time,
            confirmed_at=model.confirmed_at,
        )
