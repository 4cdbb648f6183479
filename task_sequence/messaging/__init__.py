"""Messaging exports."""

from .bus import MessageBus, MessageHandler
from .types import REQUEST_TOPIC, RESPONSE_TOPIC, ConfirmationMessage

__all__ = [
    "ConfirmationMessage",
    "MessageBus",
    "MessageHandler",
    "REQUEST_TOPIC",
    "RESPONSE_TOPIC",
]
