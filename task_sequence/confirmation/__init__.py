"""Confirmation source exports."""

from .base import IConfirmationSource, IConfirmationTarget
from .channel import ConfirmationChannel
from .fixed import FixedIntervalConfirmationSource
from .registry import create_confirmation_source, register_confirmation_source

__all__ = [
    "ConfirmationChannel",
    "FixedIntervalConfirmationSource",
    "IConfirmationSource",
    "IConfirmationTarget",
    "create_confirmation_source",
    "register_confirmation_source",
]
