"""Exception hierarchy for pmu-events."""

from .base import PmuEventsError
from .config import ConfigurationError, InvalidConfigError
from .source import (
    SourceError,
    SourceUnavailableError,
    StructureError,
    TokenizeError,
)

__all__ = [
    "PmuEventsError",
    "SourceError",
    "SourceUnavailableError",
    "TokenizeError",
    "StructureError",
    "ConfigurationError",
    "InvalidConfigError",
]
