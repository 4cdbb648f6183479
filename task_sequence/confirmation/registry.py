"""Confirmation source registry."""

from __future__ import annotations

from collections.abc import Callable

from task_sequence.messaging import REQUEST_TOPIC, RESPONSE_TOPIC, MessageBus

from .base import IConfirmationSource
from .channel import ConfirmationChannel
from .fixed import FixedIntervalConfirmationSource


ConfirmationSourceFactory = Callable[[dict, MessageBus], IConfirmationSource]


def _messaging_factory(params: dict, bus: MessageBus) -> IConfirmationSource:
    return ConfirmationChannel(
        bus,
        request_topic=str(params.get("request_topic", REQUEST_TOPIC)),
        response_topic=str(params.get("response_topic", RESPONSE_TOPIC)),
    )


def _fixed_interval_factory(params: dict, bus: MessageBus) -> IConfirmationSource:  # noqa: ARG001
    raw = params.get("confirm_after")
    if raw is not None and (isinstance(raw, bool) or not isinstance(raw, int)):
        raise ValueError("confirmation source fixed_interval requires integer params.confirm_after")
    return FixedIntervalConfirmationSource(confirm_after=raw)


_REGISTRY: dict[str, ConfirmationSourceFactory] = {
    "messaging": _messaging_factory,
    "fixed_interval": _fixed_interval_factory,
    "default": _fixed_interval_factory,
}


def register_confirmation_source(name: str, factory: ConfirmationSourceFactory) -> None:
    _REGISTRY[name.strip().lower()] = factory


def create_confirmation_source(
    name: str = "default",
    params: dict | None = None,
    bus: MessageBus | None = None,
) -> IConfirmationSource:
    key = name.strip().lower()
    if key not in _REGISTRY:
        raise ValueError(f"unknown confirmation source {name}")
    return _REGISTRY[key](params or {}, bus or MessageBus())
