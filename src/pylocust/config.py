"""Recorder configuration for pylocust."""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from pylocust._constants import (
    DEFAULT_API_URL,
    DEFAULT_CONFIG_PATH,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_INTERVAL,
    DEFAULT_LOG_PATH,
    DEFAULT_MAP_PATH,
    DEFAULT_WRITE_ATTEMPTS,
    DEFAULT_WRITE_RETRY_DELAY,
)
from pylocust.exceptions import LocustConfigError

_logger = logging.getLogger(__name__)

# Expected JSON types per config key.  ``bool`` is a subclass of ``int``
# and is rejected explicitly in ``_coerce``.
_FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "interval": (int,),
    "log_path": (str,),
    "api_url": (str,),
    "map_path": (str,),
    "fetch_timeout": (int, float),
    "write_attempts": (int,),
    "write_retry_delay": (int, float),
}


def _positive(value: Any) -> bool:
    return value > 0


def _non_negative(value: Any) -> bool:
    return value >= 0


_FIELD_CHECKS: dict[str, Callable[[Any], bool]] = {
    "interval": _positive,
    "fetch_timeout": _positive,
    "write_attempts": _positive,
    "write_retry_delay": _non_negative,
}


def _coerce(key: str, value: Any) -> Any | None:
    """Return *value* if it is usable for *key*, else ``None``."""
    expected = _FIELD_TYPES[key]
    if isinstance(value, bool) or not isinstance(value, expected):
        return None
    if float in expected:
        value = float(value)
    check = _FIELD_CHECKS.get(key)
    if check is not None and not check(value):
        return None
    return value


@dataclasses.dataclass(frozen=True)
class LocustConfig:
    """Recorder configuration.

    Parameters
    ----------
    interval : int
        Seconds to wait between two samples.
    log_path : str
        Path of the newline-delimited JSON log.
    api_url : str
        Geolocation endpoint queried once per cycle.
    map_path : str
        Where the rendered map document is written.
    fetch_timeout : float
        Upper bound in seconds for a single provider request.
    write_attempts : int
        How many times an append is tried before the cycle is given up.
    write_retry_delay : float
        Initial backoff between append attempts, doubled after each failure.
    """

    interval: int = DEFAULT_INTERVAL
    log_path: str = DEFAULT_LOG_PATH
    api_url: str = DEFAULT_API_URL
    map_path: str = DEFAULT_MAP_PATH
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    write_attempts: int = DEFAULT_WRITE_ATTEMPTS
    write_retry_delay: float = DEFAULT_WRITE_RETRY_DELAY

    def __post_init__(self) -> None:
        if self.interval <= 0:
            raise LocustConfigError(f"interval must be positive, got {self.interval}")
        if self.fetch_timeout <= 0:
            raise LocustConfigError(f"fetch_timeout must be positive, got {self.fetch_timeout}")
        if self.write_attempts < 1:
            raise LocustConfigError(f"write_attempts must be at least 1, got {self.write_attempts}")
        if self.write_retry_delay < 0:
            raise LocustConfigError(f"write_retry_delay must not be negative, got {self.write_retry_delay}")

    @classmethod
    def from_file(cls, path: str | os.PathLike[str] = DEFAULT_CONFIG_PATH, **overrides: Any) -> LocustConfig:
        """Create configuration from a JSON file.

        A missing or malformed file, or any missing or mistyped key,
        falls back to the default for that key.  This never raises for
        file content; only explicit *overrides* are validated.
        """
        kwargs = _read_config_file(Path(path))
        kwargs.update(overrides)
        return cls(**kwargs)

    @classmethod
    def from_env(cls, **overrides: Any) -> LocustConfig:
        """Create configuration from ``LOCUST_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        kwargs = _read_env(os.environ)
        kwargs.update(overrides)
        return cls(**kwargs)

    @classmethod
    def load(cls, path: str | os.PathLike[str] = DEFAULT_CONFIG_PATH, **overrides: Any) -> LocustConfig:
        """Layer the config file, then the environment, then *overrides*."""
        kwargs = _read_config_file(Path(path))
        kwargs.update(_read_env(os.environ))
        kwargs.update(overrides)
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        _logger.debug("No config file at %s, using defaults", path)
        return {}
    except OSError as exc:
        _logger.warning("Could not read config file %s (%s), using defaults", path, exc)
        return {}

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        _logger.warning("Config file %s is not valid JSON (%s), using defaults", path, exc)
        return {}
    if not isinstance(data, dict):
        _logger.warning("Config file %s does not hold a JSON object, using defaults", path)
        return {}

    kwargs: dict[str, Any] = {}
    for key in _FIELD_TYPES:
        if key not in data:
            continue
        value = _coerce(key, data[key])
        if value is None:
            _logger.warning("Ignoring config key %r with unexpected value %r", key, data[key])
            continue
        kwargs[key] = value
    return kwargs


_ENV_CONFIG_MAP = {
    "LOCUST_INTERVAL": ("interval", int),
    "LOCUST_LOG_PATH": ("log_path", str),
    "LOCUST_API_URL": ("api_url", str),
    "LOCUST_MAP_PATH": ("map_path", str),
    "LOCUST_FETCH_TIMEOUT": ("fetch_timeout", float),
}


def _read_env(env: Mapping[str, str]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    for env_key, (field_name, convert) in _ENV_CONFIG_MAP.items():
        raw = env.get(env_key)
        if raw is None:
            continue
        try:
            value = _coerce(field_name, convert(raw))
        except ValueError:
            value = None
        if value is None:
            _logger.warning("Ignoring %s=%r: not a valid %s", env_key, raw, field_name)
            continue
        kwargs[field_name] = value
    return kwargs
