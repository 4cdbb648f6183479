"""Built-in ambient power sinks."""

from __future__ import annotations

from .base import IPowerSink


SECONDS_PER_HOUR = 3600.0


class SimpleDevicePowerSink(IPowerSink):
    """Constant device power drawn from a battery of fixed voltage and capacity.

    ``nominal_power`` is in watts, ``nominal_voltage`` in volts and
    ``capacity`` in amp-hours; the result is a fraction of full charge.
    """

    def __init__(self, nominal_power: float, nominal_voltage: float, capacity: float) -> None:
        if nominal_voltage <= 0:
            raise ValueError("power sink nominal_voltage must be > 0")
        if capacity <= 0:
            raise ValueError("power sink capacity must be > 0")
        self._nominal_power = max(0.0, nominal_power)
        self._nominal_voltage = nominal_voltage
        self._capacity = capacity

    @property
    def nominal_power(self) -> float:
        return self._nominal_power

    def compute_change_in_charge(self, duration_seconds: float) -> float:
        energy_wh = self._nominal_power * max(0.0, duration_seconds) / SECONDS_PER_HOUR
        return energy_wh / (self._nominal_voltage * self._capacity)


class ConstantRatePowerSink(IPowerSink):
    """Drain a fixed fraction of charge per second."""

    def __init__(self, drain_per_second: float) -> None:
        self._drain_per_second = max(0.0, drain_per_second)

    def compute_change_in_charge(self, duration_seconds: float) -> float:
        return self._drain_per_second * max(0.0, duration_seconds)
