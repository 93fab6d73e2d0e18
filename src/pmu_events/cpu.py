"""CPU identification used to pick the matching event file.

Event files are published per CPU as ``<vendor>-<family>-<model>-<type>``,
e.g. ``GenuineIntel-6-3C-core`` for a Haswell client core.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from .logging_config import get_logger

logger = get_logger(__name__)

EVENT_TYPE = "core"


def _read_cpuinfo(path: Union[str, Path]) -> dict[str, str]:
    """Fields of the first processor block in a cpuinfo file."""
    fields: dict[str, str] = {}
    with open(path, encoding="utf-8", errors="replace") as f:
        for line in f:
            if not line.strip():
                if fields:
                    break
                continue
            key, sep, value = line.partition(":")
            if sep:
                fields.setdefault(key.strip(), value.strip())
    return fields


def get_cpu_str(cpuinfo_path: Union[str, Path] = "/proc/cpuinfo") -> Optional[str]:
    """Identifier of the running CPU, or None when it cannot be determined."""
    try:
        info = _read_cpuinfo(cpuinfo_path)
    except OSError as e:
        logger.debug("Cannot read %s: %s", cpuinfo_path, e)
        return None

    vendor = info.get("vendor_id")
    try:
        family = int(info["cpu family"])
        model = int(info["model"])
    except (KeyError, ValueError):
        return None
    if not vendor:
        return None

    return f"{vendor}-{family}-{model:X}-{EVENT_TYPE}"
