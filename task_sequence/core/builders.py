"""Translate plan specs into runtime estimation inputs."""

from __future__ import annotations

from task_sequence.battery import create_power_sink
from task_sequence.confirmation import IConfirmationSource
from task_sequence.events import WaitForConfirmationDescription
from task_sequence.model import Clock, Constraints, EventKind, Parameters, PlanSpec, State


def build_parameters(spec: PlanSpec) -> Parameters:
    if spec.ambient_sink is None:
        return Parameters()
    return Parameters(ambient_sink=create_power_sink(spec.ambient_sink.name, spec.ambient_sink.params))


def build_constraints(spec: PlanSpec) -> Constraints:
    return Constraints(
        drain_battery=spec.constraints.drain_battery,
        threshold_soc=spec.constraints.threshold_soc,
    )


def build_initial_state(spec: PlanSpec) -> State:
    initial = spec.initial_state
    return State(time=initial.time, battery_soc=initial.battery_soc, waypoint=initial.waypoint)


def build_descriptions(
    spec: PlanSpec,
    source: IConfirmationSource,
    clock: Clock | None = None,
) -> dict[str, WaitForConfirmationDescription]:
    descriptions: dict[str, WaitForConfirmationDescription] = {}
    for event in spec.events:
        if event.type != EventKind.WAIT_FOR_CONFIRMATION:
            raise ValueError(f"unsupported event type {event.type}")
        descriptions[event.id] = WaitForConfirmationDescription.make(
            event.initial_wait_duration,
            event.timeout_duration,
            confirmation_source=source,
            clock=clock,
        )
    return descriptions
