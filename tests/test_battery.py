from __future__ import annotations

import pytest

from task_sequence.battery import (
    ConstantRatePowerSink,
    IPowerSink,
    SimpleDevicePowerSink,
    compute_drain,
    create_power_sink,
    evaluate_soc,
    register_power_sink,
)
from task_sequence.model import WaitStatus


def test_simple_device_sink_drains_energy_fraction() -> None:
    sink = SimpleDevicePowerSink(nominal_power=96.0, nominal_voltage=24.0, capacity=40.0)

    # 96 W for one hour out of a 960 Wh battery.
    assert sink.compute_change_in_charge(3600.0) == pytest.approx(0.1)
    assert sink.compute_change_in_charge(-10.0) == 0.0


def test_simple_device_sink_rejects_invalid_battery() -> None:
    with pytest.raises(ValueError, match="nominal_voltage"):
        SimpleDevicePowerSink(nominal_power=10.0, nominal_voltage=0.0, capacity=10.0)
    with pytest.raises(ValueError, match="capacity"):
        SimpleDevicePowerSink(nominal_power=10.0, nominal_voltage=24.0, capacity=-1.0)


def test_compute_drain_clamps_duration_and_handles_missing_sink() -> None:
    sink = ConstantRatePowerSink(drain_per_second=0.01)

    assert compute_drain(5.0, sink) == pytest.approx(0.05)
    assert compute_drain(-5.0, sink) == 0.0
    assert compute_drain(5.0, None) == 0.0


def test_evaluate_soc_predicates_are_independent() -> None:
    ok = evaluate_soc(0.5, 0.1, 0.2)
    at_threshold = evaluate_soc(0.3, 0.1, 0.2)
    negative_above_threshold = evaluate_soc(0.05, 0.1, -1.0)

    assert ok.feasible
    assert ok.battery_soc == pytest.approx(0.4)
    assert at_threshold.status == WaitStatus.BATTERY_BELOW_THRESHOLD
    assert negative_above_threshold.status == WaitStatus.BATTERY_EXHAUSTED


def test_power_sink_registry() -> None:
    sink = create_power_sink("Constant_Rate", {"drain_per_second": 0.002})
    default = create_power_sink()

    assert isinstance(sink, ConstantRatePowerSink)
    assert sink.compute_change_in_charge(5.0) == pytest.approx(0.01)
    assert isinstance(default, SimpleDevicePowerSink)
    with pytest.raises(ValueError, match="unknown power sink"):
        create_power_sink("nuclear")


def test_register_custom_power_sink() -> None:
    class _HalfSink(IPowerSink):
        def compute_change_in_charge(self, duration_seconds: float) -> float:
            return duration_seconds / 2

    register_power_sink("half", lambda _params: _HalfSink())

    assert create_power_sink("half").compute_change_in_charge(4.0) == 2.0
