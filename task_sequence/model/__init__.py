"""Model package exports."""

from .clock import Clock, ManualClock, monotonic_clock
from .runtime import (
    Constraints,
    Estimate,
    EstimateResult,
    Header,
    Parameters,
    State,
    WaitStatus,
)
from .spec import (
    AmbientSinkSpec,
    ConfirmationSourceSpec,
    ConstraintsSpec,
    EventKind,
    EventSpec,
    InitialStateSpec,
    PlanSpec,
    ScriptedConfirmationSpec,
    SimSpec,
)

__all__ = [
    "AmbientSinkSpec",
    "Clock",
    "ConfirmationSourceSpec",
    "Constraints",
    "ConstraintsSpec",
    "Estimate",
    "EstimateResult",
    "EventKind",
    "EventSpec",
    "Header",
    "InitialStateSpec",
    "ManualClock",
    "Parameters",
    "PlanSpec",
    "ScriptedConfirmationSpec",
    "SimSpec",
    "State",
    "WaitStatus",
    "monotonic_clock",
]
