"""Configuration loading for pmu-events.

Configuration sources are merged in priority order:
    1. Defaults (defined in EventsConfig)
    2. Global config (~/.pmu-events.toml)
    3. Project config (./pmu-events.toml)
    4. Explicit config file
    5. Environment (EVENTMAP, XDG_CACHE_HOME, HOME, then PMU_EVENTS_*)
    6. Overrides (passed as kwargs)

Example:
    >>> config = load_config(event_map="GenuineIntel-6-3C")
    >>> config.event_map
    'GenuineIntel-6-3C'
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

_VERBOSITIES = ("quiet", "normal", "verbose")

# Environment variables honoured by the classic jevents tooling.
_LEGACY_ENV = {
    "EVENTMAP": "event_map",
    "XDG_CACHE_HOME": "cache_home",
    "HOME": "home",
}


@dataclass(frozen=True)
class EventsConfig:
    """Settings that decide where event files come from.

    Attributes:
        event_map: Explicit event file, or a CPU identifier prefix when it
            does not name a readable file (EVENTMAP)
        cache_home: Base cache directory (XDG_CACHE_HOME)
        home: Home directory used when cache_home is unset (HOME)
        cpuinfo_path: Where to read the CPU identification from
        verbosity: Logging verbosity level
    """

    event_map: Optional[str] = None
    cache_home: Optional[str] = None
    home: Optional[str] = None
    cpuinfo_path: str = "/proc/cpuinfo"
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        if self.verbosity not in _VERBOSITIES:
            raise InvalidConfigError(
                "verbosity", self.verbosity, f"expected one of {', '.join(_VERBOSITIES)}"
            )
        if not self.cpuinfo_path:
            raise InvalidConfigError("cpuinfo_path", self.cpuinfo_path, "must not be empty")

    @property
    def cache_dir(self) -> Optional[Path]:
        """Base directory holding ``pmu-events/`` downloads, if any."""
        if self.cache_home:
            return Path(self.cache_home)
        if self.home:
            return Path(self.home) / ".cache"
        return None


def load_config(config_file: Optional[Path] = None, **overrides) -> EventsConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags); ``None``
            values are ignored

    Returns:
        Validated EventsConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".pmu-events.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / "pmu-events.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return EventsConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Collect settings from the environment.

    The legacy variables are read first so that a ``PMU_EVENTS_<FIELD>``
    variable always wins over them.
    """
    result: dict[str, Any] = {}

    for env_key, field_name in _LEGACY_ENV.items():
        value = os.environ.get(env_key)
        if value:
            result[field_name] = value

    for field_name in EventsConfig.__dataclass_fields__:
        value = os.environ.get(f"PMU_EVENTS_{field_name.upper()}")
        if value:
            result[field_name] = value

    return result


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If the file cannot be parsed
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")

    # Allow the settings to live under a [pmu-events] table as well.
    section = data.get("pmu-events")
    if isinstance(section, dict):
        return section
    return data
