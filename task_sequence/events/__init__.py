"""Event estimator exports."""

from .base import IActivityModel, IEventDescription, ITravelEstimator
from .tracker import LiveTracker, TrackedEvent
from .wait_for_confirmation import WaitForConfirmationDescription, WaitForConfirmationModel

__all__ = [
    "IActivityModel",
    "IEventDescription",
    "ITravelEstimator",
    "LiveTracker",
    "TrackedEvent",
    "WaitForConfirmationDescription",
    "WaitForConfirmationModel",
]
