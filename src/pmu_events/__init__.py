"""
pmu-events - perf event strings from JSON PMU event lists

Reads the per-CPU event lists published for hardware performance
monitoring units and turns every entry into a name, a perf event
encoding and a description.
"""

__version__ = "0.3.0"

from .translator import Event, EventTranslator, json_events, read_events
from .source import json_default_name
from .cpu import get_cpu_str

__all__ = [
    "json_events",  # Callback interface
    "read_events",  # List interface
    "Event",
    "EventTranslator",
    "json_default_name",
    "get_cpu_str",
]
