"""Battery model exports."""

from .base import IPowerSink
from .evaluator import SocCheck, compute_drain, evaluate_soc
from .registry import create_power_sink, register_power_sink
from .sinks import ConstantRatePowerSink, SimpleDevicePowerSink

__all__ = [
    "ConstantRatePowerSink",
    "IPowerSink",
    "SimpleDevicePowerSink",
    "SocCheck",
    "compute_drain",
    "create_power_sink",
    "evaluate_soc",
    "register_power_sink",
]
