"""Data models for recorded locations."""

from pylocust.models._base import Degrees, LocustBaseModel, OptionalText, UtcTimestamp
from pylocust.models.sample import Sample

__all__ = [
    "Degrees",
    "LocustBaseModel",
    "OptionalText",
    "Sample",
    "UtcTimestamp",
]
