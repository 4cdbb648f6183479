"""Wait-for-confirmation event.

The robot waits for an external confirmation signal. Every estimate made
while unconfirmed extends the projected wait by one interval; once the
confirmation latch is set the event finishes at the current state time.
Estimation fails when the wait exceeds its timeout or the battery
constraint is violated.

Estimation never performs I/O. Re-announcing the request is a separate
operation (``refresh_request``) driven by the live tracker.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Optional

from task_sequence.battery import compute_drain, evaluate_soc
from task_sequence.confirmation import (
    FixedIntervalConfirmationSource,
    IConfirmationSource,
    IConfirmationTarget,
)
from task_sequence.model import (
    Clock,
    Constraints,
    Estimate,
    EstimateResult,
    Header,
    Parameters,
    State,
    WaitStatus,
    monotonic_clock,
)

from .base import IActivityModel, IEventDescription, ITravelEstimator

logger = logging.getLogger("TaskSequence.WaitForConfirmation")


class WaitForConfirmationModel(IActivityModel, IConfirmationTarget):
    """Estimator owned by one planning attempt or one live execution."""

    def __init__(
        self,
        invariant_initial_state: State,
        initial_wait_duration: float,
        timeout_duration: float,
        parameters: Parameters,
        *,
        confirmation_source: IConfirmationSource | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._invariant_finish_state = invariant_initial_state
        self._initial_wait_duration = max(0.0, float(initial_wait_duration))
        self._timeout_duration = max(0.0, float(timeout_duration))
        self._invariant_battery_drain = compute_drain(
            self._initial_wait_duration, parameters.ambient_sink
        )
        self._source = confirmation_source
        self._clock = clock or monotonic_clock
        self._token = str(uuid.uuid4())

        self._lock = threading.Lock()
        self._confirmation_received = False
        self._confirmed_at: Optional[float] = None
        now = self._clock()
        self._waiting_since = now
        self._confirmation_request_time = now
        self._request_count = 0

    @property
    def token(self) -> str:
        return self._token

    @property
    def initial_wait_duration(self) -> float:
        return self._initial_wait_duration

    @property
    def timeout_duration(self) -> float:
        return self._timeout_duration

    @property
    def invariant_battery_drain(self) -> float:
        return self._invariant_battery_drain

    @property
    def waiting_since(self) -> float:
        return self._waiting_since

    @property
    def confirmation_received(self) -> bool:
        with self._lock:
            return self._confirmation_received

    @property
    def confirmed_at(self) -> Optional[float]:
        with self._lock:
            return self._confirmed_at

    @property
    def confirmation_request_time(self) -> float:
        with self._lock:
            return self._confirmation_request_time

    @property
    def request_count(self) -> int:
        with self._lock:
            return self._request_count

    def confirm(self) -> bool:
        with self._lock:
            if self._confirmation_received:
                return False
            self._confirmation_received = True
            self._confirmed_at = self._clock()
        logger.info("Confirmation latched for token %s", self._token)
        return True

    def refresh_request(self) -> bool:
        """Re-announce the token. Returns False once confirmed."""
        now = self._clock()
        with self._lock:
            if self._confirmation_received:
                return False
            self._confirmation_request_time = now
            self._request_count += 1
        logger.debug("Requesting confirmation for token %s at %.3f", self._token, now)
        if self._source is not None:
            self._source.request(self._token, now)
        return True

    def elapsed(self) -> float:
        return self._clock() - self._waiting_since

    def status(self) -> WaitStatus:
        if self.confirmation_received:
            return WaitStatus.CONFIRMED
        if self.elapsed() > self._timeout_duration:
            return WaitStatus.TIMED_OUT
        return WaitStatus.WAITING

    def invariant_duration(self) -> float:
        if self.confirmation_received:
            return 0.0
        return self._initial_wait_duration

    def invariant_finish_state(self) -> State:
        return self._invariant_finish_state

    def estimate_finish(
        self,
        state: State,
        earliest_arrival_time: float,
        constraints: Constraints,
        travel_estimator: ITravelEstimator | None = None,
    ) -> Optional[Estimate]:
        return self.estimate_finish_detailed(
            state, earliest_arrival_time, constraints, travel_estimator
        ).estimate

    def estimate_finish_detailed(
        self,
        state: State,
        earliest_arrival_time: float,
        constraints: Constraints,
        travel_estimator: ITravelEstimator | None = None,  # noqa: ARG002
    ) -> EstimateResult:
        with self._lock:
            confirmed = self._confirmation_received
        elapsed = self._clock() - self._waiting_since

        if not confirmed:
            if elapsed > self._timeout_duration:
                reason = (
                    f"no confirmation after {elapsed:.3f}s "
                    f"(timeout {self._timeout_duration:.3f}s)"
                )
                logger.debug("Estimate rejected for token %s: %s", self._token, reason)
                return EstimateResult(estimate=None, status=WaitStatus.TIMED_OUT, reason=reason)
            start = state.time if state.time is not None else earliest_arrival_time
            state = state.with_time(start + self._initial_wait_duration)

        if constraints.drain_battery and state.battery_soc is not None:
            check = evaluate_soc(
                state.battery_soc, self._invariant_battery_drain, constraints.threshold_soc
            )
            if not check.feasible:
                reason = (
                    f"battery soc {check.battery_soc:.4f} violates "
                    f"threshold {constraints.threshold_soc:.4f}"
                )
                logger.debug("Estimate rejected for token %s: %s", self._token, reason)
                return EstimateResult(estimate=None, status=check.status, reason=reason)
            state = state.with_battery_soc(check.battery_soc)

        if confirmed:
            finish_time = state.time if state.time is not None else earliest_arrival_time
            return EstimateResult(
                estimate=Estimate(finish_state=state, wait_until=finish_time),
                status=WaitStatus.CONFIRMED,
            )
        return EstimateResult(
            estimate=Estimate(finish_state=state, wait_until=earliest_arrival_time),
            status=WaitStatus.WAITING,
        )


class WaitForConfirmationDescription(IEventDescription):
    """Mutable configuration of a wait-for-confirmation event."""

    HEADER_CATEGORY = "Waiting for Confirmation"
    HEADER_DETAIL = "Waiting until confirmation is received or timeout occurs"

    def __init__(
        self,
        initial_wait_duration: float,
        timeout_duration: float,
        *,
        confirmation_source: IConfirmationSource | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._initial_wait_duration = float(initial_wait_duration)
        self._timeout_duration = float(timeout_duration)
        self._source = confirmation_source or FixedIntervalConfirmationSource()
        self._clock = clock

    @classmethod
    def make(
        cls,
        initial_wait_duration: float,
        timeout_duration: float,
        *,
        confirmation_source: IConfirmationSource | None = None,
        clock: Clock | None = None,
    ) -> "WaitForConfirmationDescription":
        return cls(
            initial_wait_duration,
            timeout_duration,
            confirmation_source=confirmation_source,
            clock=clock,
        )

    @property
    def confirmation_source(self) -> IConfirmationSource:
        return self._source

    def initial_wait_duration(self) -> float:
        return self._initial_wait_duration

    def set_initial_wait_duration(self, value: float) -> "WaitForConfirmationDescription":
        self._initial_wait_duration = float(value)
        return self

    def timeout_duration(self) -> float:
        return self._timeout_duration

    def set_timeout_duration(self, value: float) -> "WaitForConfirmationDescription":
        self._timeout_duration = float(value)
        return self

    def make_model(
        self, invariant_initial_state: State, parameters: Parameters
    ) -> WaitForConfirmationModel:
        model = WaitForConfirmationModel(
            invariant_initial_state,
            self._initial_wait_duration,
            self._timeout_duration,
            parameters,
            confirmation_source=self._source,
            clock=self._clock,
        )
        self._source.attach(model)
        return model

    def generate_header(self, state: State, parameters: Parameters) -> Header:  # noqa: ARG002
        return Header(
            category=self.HEADER_CATEGORY,
            detail=self.HEADER_DETAIL,
            original_duration_estimate=self._initial_wait_duration,
        )
