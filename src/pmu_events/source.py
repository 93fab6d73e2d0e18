"""Resolution of the default event file."""

from __future__ import annotations

import os
from typing import Optional

from .config import EventsConfig, load_config
from .cpu import EVENT_TYPE, get_cpu_str
from .logging_config import get_logger

logger = get_logger(__name__)


def json_default_name(config: Optional[EventsConfig] = None) -> Optional[str]:
    """Path of the event file to use when none is given.

    An ``event_map`` that names a readable file is used as is. Any other
    ``event_map`` is taken as the CPU identifier (with the event type
    appended); otherwise the running CPU is identified. The file is then
    looked up as ``<cache>/pmu-events/<id>.json``.

    Returns:
        The path, or None when no cache directory or CPU identifier is known
    """
    if config is None:
        config = load_config()

    emap = config.event_map
    if emap:
        if os.access(emap, os.R_OK) and os.path.isfile(emap):
            return emap
        idstr: Optional[str] = f"{emap}-{EVENT_TYPE}"
    else:
        idstr = get_cpu_str(config.cpuinfo_path)

    cache = config.cache_dir
    if cache is None or idstr is None:
        logger.debug("No default event file (cache=%s, cpu=%s)", cache, idstr)
        return None

    return str(cache / "pmu-events" / f"{idstr}.json")
