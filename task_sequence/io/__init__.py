"""I/O exports."""

from .loader import ConfigError, ConfigLoader
from .schema import PLAN_SCHEMA

__all__ = [
    "ConfigError",
    "ConfigLoader",
    "PLAN_SCHEMA",
]
