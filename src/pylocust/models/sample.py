"""Location sample model."""

from __future__ import annotations

from pylocust.models._base import Degrees, LocustBaseModel, OptionalText, UtcTimestamp


class Sample(LocustBaseModel):
    """One timestamped position.

    Serialized as a single JSON object per log line::

        {"timestamp":"2026-01-01T12:00:00Z","lat":51.5,"lon":-0.12,"city":"London","country":"United Kingdom"}

    Parameters
    ----------
    timestamp : datetime
        UTC instant the sample was acquired (local clock, not provider time).
    lat : float
        Latitude in degrees.
    lon : float
        Longitude in degrees.
    city : str or None
        City name when the provider supplied one.
    country : str or None
        Country name when the provider supplied one.
    """

    timestamp: UtcTimestamp
    lat: Degrees
    lon: Degrees
    city: OptionalText = None
    country: OptionalText = None

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.lat, self.lon)

    def to_record(self) -> str:
        """Serialize to one self-contained JSON line (without the newline)."""
        return self.model_dump_json()

    @classmethod
    def from_record(cls, line: str) -> Sample:
        """Parse one log line.

        Raises :class:`pydantic.ValidationError` for malformed JSON or
        missing/invalid fields.
        """
        return cls.model_validate_json(line)
