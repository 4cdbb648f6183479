"""Power sink registry."""

from __future__ import annotations

from collections.abc import Callable

from .base import IPowerSink
from .sinks import ConstantRatePowerSink, SimpleDevicePowerSink


PowerSinkFactory = Callable[[dict], IPowerSink]


def _simple_device_factory(params: dict) -> IPowerSink:
    return SimpleDevicePowerSink(
        nominal_power=float(params.get("nominal_power", 0.0)),
        nominal_voltage=float(params.get("nominal_voltage", 24.0)),
        capacity=float(params.get("capacity", 40.0)),
    )


def _constant_rate_factory(params: dict) -> IPowerSink:
    return ConstantRatePowerSink(drain_per_second=float(params.get("drain_per_second", 0.0)))


_REGISTRY: dict[str, PowerSinkFactory] = {
    "simple_device": _simple_device_factory,
    "constant_rate": _constant_rate_factory,
    "default": _simple_device_factory,
}


def register_power_sink(name: str, factory: PowerSinkFactory) -> None:
    _REGISTRY[name.strip().lower()] = factory


def create_power_sink(name: str = "default", params: dict | None = None) -> IPowerSink:
    key = name.strip().lower()
    if key not in _REGISTRY:
        raise ValueError(f"unknown power sink {name}")
    return _REGISTRY[key](params or {})
