"""Plan configuration models and semantic validation."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Confirmation sources that never read the response topic.
OFFLINE_CONFIRMATION_SOURCES = frozenset({"default", "fixed_interval"})


class EventKind(str, Enum):
    WAIT_FOR_CONFIRMATION = "wait_for_confirmation"


class ConstraintsSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    drain_battery: bool = True
    threshold_soc: float = Field(default=0.1, ge=0, le=1)


class AmbientSinkSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = "default"
    params: dict[str, Any] = Field(default_factory=dict)


class ConfirmationSourceSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    source: str = "default"
    params: dict[str, Any] = Field(default_factory=dict)


class InitialStateSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    time: Optional[float] = Field(default=0.0, ge=0)
    battery_soc: Optional[float] = Field(default=None, ge=0, le=1)
    waypoint: Optional[str] = None


class EventSpec(BaseModel):
    """One plan step. Negative durations are normalized by the estimator."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    type: EventKind = EventKind.WAIT_FOR_CONFIRMATION
    initial_wait_duration: float
    timeout_duration: float


class ScriptedConfirmationSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    event_id: str = Field(min_length=1)
    at: float = Field(ge=0)


class SimSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    duration: float = Field(gt=0)
    poll_period: Optional[float] = Field(default=None, gt=0)
    seed: int = 42


class PlanSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str = "0.1"
    constraints: ConstraintsSpec = Field(default_factory=ConstraintsSpec)
    ambient_sink: Optional[AmbientSinkSpec] = None
    confirmation: ConfirmationSourceSpec = Field(default_factory=ConfirmationSourceSpec)
    initial_state: InitialStateSpec = Field(default_factory=InitialStateSpec)
    events: list[EventSpec] = Field(min_length=1)
    confirmations: list[ScriptedConfirmationSpec] = Field(default_factory=list)
    sim: SimSpec

    @model_validator(mode="after")
    def validate_references(self) -> "PlanSpec":
        event_ids = [event.id for event in self.events]
        if len(event_ids) != len(set(event_ids)):
            raise ValueError("duplicate events.id")
        known = set(event_ids)
        for confirmation in self.confirmations:
            if confirmation.event_id not in known:
                raise ValueError(
                    f"confirmation references unknown event '{confirmation.event_id}'"
                )
        if self.confirmations and self.confirmation.source.lower() in OFFLINE_CONFIRMATION_SOURCES:
            raise ValueError(
                f"scripted confirmations need a messaging source, not '{self.confirmation.source}'"
            )
        if self.constraints.drain_battery and self.initial_state.battery_soc is None:
            if self.ambient_sink is not None:
                raise ValueError("drain_battery with ambient_sink requires initial_state.battery_soc")
        return self
