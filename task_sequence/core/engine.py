"""SimPy-driven live tracking of a confirmation plan."""

from __future__ import annotations

from dataclasses import asdict, dataclass
import logging
from typing import Any, Callable, Optional

import simpy

from task_sequence.confirmation import IConfirmationSource, create_confirmation_source
from task_sequence.events import LiveTracker, WaitForConfirmationDescription
from task_sequence.messaging import REQUEST_TOPIC, RESPONSE_TOPIC, MessageBus
from task_sequence.metrics import ConfirmationMetrics, IMetric
from task_sequence.model import (
    Constraints,
    EstimateResult,
    Parameters,
    PlanSpec,
    State,
    WaitStatus,
)

from .builders import build_constraints, build_descriptions, build_initial_state, build_parameters
from .interfaces import ITrackingEngine

logger = logging.getLogger("TaskSequence.Engine")


@dataclass(slots=True)
class TrackingRecord:
    """One estimate produced while tracking an event."""

    time: float
    event_id: str
    token: str
    status: WaitStatus
    request_count: int
    state_time: Optional[float]
    battery_soc: Optional[float]
    wait_until: Optional[float]
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["status"] = self.status.value
        return payload


class TrackingEngine(ITrackingEngine):
    """Execute plan events in order, polling each until it confirms or fails.

    Scripted confirmations from the plan are published on the response topic
    at their configured time, once the targeted event has started.
    """

    # Floor for the default poll period; a zero wait would otherwise spin.
    MIN_POLL_PERIOD = 1.0

    def __init__(
        self,
        confirmation_source: IConfirmationSource | None = None,
        metrics: list[IMetric] | None = None,
    ) -> None:
        self._external_source = confirmation_source
        self._metric_overrides = metrics
        self._subscribers: list[Callable[[TrackingRecord], None]] = []
        self.reset()

    def subscribe(self, handler: Callable[[TrackingRecord], None]) -> None:
        if handler not in self._subscribers:
            self._subscribers.append(handler)

    def reset(self) -> None:
        self._env = simpy.Environment()
        self._bus = MessageBus()
        self._metrics: list[IMetric] = self._metric_overrides or [ConfirmationMetrics()]
        for metric in self._metrics:
            metric.reset()
        self._spec: PlanSpec | None = None
        self._source: IConfirmationSource | None = None
        self._tracker = LiveTracker(clock=self._now)
        self._descriptions: dict[str, WaitForConfirmationDescription] = {}
        self._parameters = Parameters()
        self._constraints = Constraints()
        self._state = State()
        self._records: list[TrackingRecord] = []
        self._outcomes: dict[str, WaitStatus] = {}
        self._tokens: dict[str, str] = {}
        self._latencies: dict[str, float] = {}
        self._started: dict[str, simpy.Event] = {}
        self._response_topic = RESPONSE_TOPIC

    def build(self, spec: PlanSpec) -> None:
        self.reset()
        self._spec = spec
        self._bus = MessageBus(message_id_mode="seeded_random", message_id_seed=spec.sim.seed)
        params = dict(spec.confirmation.params)
        self._response_topic = str(params.get("response_topic", RESPONSE_TOPIC))
        if self._metric_overrides is None:
            self._metrics = [
                ConfirmationMetrics(
                    request_topic=str(params.get("request_topic", REQUEST_TOPIC)),
                    response_topic=self._response_topic,
                )
            ]
        for metric in self._metrics:
            self._bus.subscribe_all(metric.consume)

        self._source = self._external_source or create_confirmation_source(
            spec.confirmation.source, params, self._bus
        )
        self._parameters = build_parameters(spec)
        self._constraints = build_constraints(spec)
        self._state = build_initial_state(spec)
        self._descriptions = build_descriptions(spec, self._source, clock=self._now)
        self._started = {event.id: self._env.event() for event in spec.events}

        self._env.process(self._plan_process())
        for confirmation in spec.confirmations:
            self._env.process(self._confirm_process(confirmation.event_id, confirmation.at))

    def run(self, until: float | None = None) -> None:
        if self._spec is None:
            raise RuntimeError("build() must be called before run()")
        horizon = until if until is not None else self._spec.sim.duration
        if horizon <= self._env.now:
            return
        self._env.run(until=horizon)

    def step(self, delta: float) -> None:
        if self._spec is None:
            raise RuntimeError("build() must be called before step()")
        if delta <= 0:
            raise ValueError("step delta must be > 0")
        self._env.run(until=self._env.now + delta)

    @property
    def now(self) -> float:
        return float(self._env.now)

    @property
    def bus(self) -> MessageBus:
        return self._bus

    @property
    def records(self) -> list[TrackingRecord]:
        return list(self._records)

    @property
    def outcomes(self) -> dict[str, WaitStatus]:
        return dict(self._outcomes)

    @property
    def state(self) -> State:
        return self._state

    def token_for(self, event_id: str) -> str | None:
        return self._tokens.get(event_id)

    def metric_report(self) -> dict:
        merged: dict = {}
        for metric in self._metrics:
            merged.update(metric.report())
        latencies = list(self._latencies.values())
        merged["tokens_confirmed"] = len(latencies)
        merged["avg_confirmation_latency"] = sum(latencies) / len(latencies) if latencies else 0.0
        merged["max_confirmation_latency"] = max(latencies) if latencies else 0.0
        merged["unmatched_responses"] = (
            self._source.unmatched_count if self._source is not None else 0
        )
        statuses = list(self._outcomes.values())
        merged["events_total"] = len(self._descriptions)
        merged["events_confirmed"] = statuses.count(WaitStatus.CONFIRMED)
        merged["events_failed"] = sum(1 for status in statuses if not status.feasible)
        merged["final_state"] = {
            "time": self._state.time,
            "battery_soc": self._state.battery_soc,
        }
        return merged

    def _now(self) -> float:
        return float(self._env.now)

    def _poll_period(self, description: WaitForConfirmationDescription) -> float:
        assert self._spec is not None
        if self._spec.sim.poll_period is not None:
            return self._spec.sim.poll_period
        return max(description.initial_wait_duration(), self.MIN_POLL_PERIOD)

    def _plan_process(self):
        for event_id, description in self._descriptions.items():
            model = self._tracker.start(event_id, description, self._state, self._parameters)
            self._tokens[event_id] = model.token
            self._started[event_id].succeed()
            poll_period = self._poll_period(description)
            state = self._state
            while True:
                self._tracker.tick()
                result = model.estimate_finish_detailed(state, self.now, self._constraints)
                self._record(event_id, model.token, model.request_count, result)
                if result.estimate is None:
                    self._outcomes[event_id] = result.status
                    self._tracker.discard(event_id)
                    logger.error("Event %s failed: %s", event_id, result.reason)
                    return
                state = result.estimate.finish_state
                if result.status == WaitStatus.CONFIRMED:
                    self._outcomes[event_id] = WaitStatus.CONFIRMED
                    confirmed_at = model.confirmed_at
                    if confirmed_at is not None:
                        self._latencies[event_id] = confirmed_at - model.waiting_since
                    self._state = state
                    self._tracker.discard(event_id)
                    break
                yield self._env.timeout(poll_period)

    def _confirm_process(self, event_id: str, at: float):
        if at > self._env.now:
            yield self._env.timeout(at - self._env.now)
        yield self._started[event_id]
        token = self._tokens[event_id]
        self._bus.publish(self._response_topic, token, time=self.now)

    def _record(
        self, event_id: str, token: str, request_count: int, result: EstimateResult
    ) -> None:
        estimate = result.estimate
        record = TrackingRecord(
            time=self.now,
            event_id=event_id,
            token=token,
            status=result.status,
            request_count=request_count,
            state_time=estimate.finish_state.time if estimate is not None else None,
            battery_soc=estimate.finish_state.battery_soc if estimate is not None else None,
            wait_until=estimate.wait_until if estimate is not None else None,
            reason=result.reason,
        )
        self._records.append(record)
        for handler in list(self._subscribers):
            handler(record)
