"""Offline forecast of a plan without any live confirmation traffic."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional

from task_sequence.confirmation import FixedIntervalConfirmationSource
from task_sequence.model import ManualClock, PlanSpec, WaitStatus

from .builders import build_constraints, build_descriptions, build_initial_state, build_parameters


@dataclass(slots=True)
class ForecastRow:
    event_id: str
    poll: int
    status: WaitStatus
    state_time: Optional[float]
    battery_soc: Optional[float]
    wait_until: Optional[float]
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["status"] = self.status.value
        return payload


def forecast_plan(
    spec: PlanSpec,
    *,
    assume_confirmed_after: int | None = None,
    max_polls: int = 100,
) -> list[ForecastRow]:
    """Explore one hypothetical schedule of ``spec``.

    Each event is estimated once per wait interval on a manual clock. When
    ``assume_confirmed_after`` is set, confirmation is assumed to arrive after
    that many unconfirmed estimates; otherwise events run until they time out.
    No request is ever published.
    """
    if max_polls < 1:
        raise ValueError("max_polls must be >= 1")
    if assume_confirmed_after is not None and assume_confirmed_after < 0:
        raise ValueError("assume_confirmed_after must be >= 0")

    clock = ManualClock(start=spec.initial_state.time or 0.0)
    source = FixedIntervalConfirmationSource()
    descriptions = build_descriptions(spec, source, clock=clock)
    parameters = build_parameters(spec)
    constraints = build_constraints(spec)
    state = build_initial_state(spec)

    rows: list[ForecastRow] = []
    for event_id, description in descriptions.items():
        model = description.make_model(state, parameters)
        event_state = state
        confirmed = False
        for poll in range(max_polls):
            if assume_confirmed_after is not None and poll >= assume_confirmed_after:
                model.confirm()
            result = model.estimate_finish_detailed(event_state, clock.now, constraints)
            estimate = result.estimate
            rows.append(
                ForecastRow(
                    event_id=event_id,
                    poll=poll,
                    status=result.status,
                    state_time=estimate.finish_state.time if estimate is not None else None,
                    battery_soc=estimate.finish_state.battery_soc if estimate is not None else None,
                    wait_until=estimate.wait_until if estimate is not None else None,
                    reason=result.reason,
                )
            )
            if estimate is None:
                return rows
            event_state = estimate.finish_state
            if result.status == WaitStatus.CONFIRMED:
                confirmed = True
                break
            clock.advance(model.initial_wait_duration)
        source.detach(model.token)
        if not confirmed:
            return rows
        state = event_state
    return rows
