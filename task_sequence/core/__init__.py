"""Tracking core exports."""

from .engine import TrackingEngine, TrackingRecord
from .forecast import ForecastRow, forecast_plan
from .interfaces import ITrackingEngine

__all__ = ["ForecastRow", "ITrackingEngine", "TrackingEngine", "TrackingRecord", "forecast_plan"]
