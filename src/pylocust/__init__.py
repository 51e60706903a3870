"""pylocust - Periodic IP geolocation recorder with history list and heat map."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pylocust")
except PackageNotFoundError:
    __version__ = "0+local"
from pylocust.client import LocationClient
from pylocust.config import LocustConfig
from pylocust.exceptions import (
    FetchError,
    LocustConfigError,
    LocustError,
    LocustTransportError,
    LogWriteError,
    RecordParseError,
    RenderError,
)
from pylocust.models import Sample
from pylocust.recorder import CycleOutcome, Recorder, RecorderStats
from pylocust.store import LogReadResult, LogStore

__all__ = [
    "__version__",
    "CycleOutcome",
    "FetchError",
    "LocationClient",
    "LocustConfig",
    "LocustConfigError",
    "LocustError",
    "LocustTransportError",
    "LogReadResult",
    "LogStore",
    "LogWriteError",
    "Recorder",
    "RecorderStats",
    "RecordParseError",
    "RenderError",
    "Sample",
]
