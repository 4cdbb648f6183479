"""Metrics exports."""

from .base import IMetric
from .core import ConfirmationMetrics

__all__ = ["ConfirmationMetrics", "IMetric"]
