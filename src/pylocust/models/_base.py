"""Base model and shared field types for pylocust records.

Every record model inherits from :class:`LocustBaseModel` which is
frozen and ignores unknown keys, so provider payloads carrying extra
fields (``query``, ``isp``, ``timezone`` ...) validate without fuss.

Field helpers:

* :data:`Degrees` only accepts real JSON numbers.  Booleans and numeric
  strings are rejected, so a payload with ``"lat": "51.5"`` is not a
  position.
* :data:`OptionalText` turns any non-string value into ``None``.
* :data:`UtcTimestamp` accepts RFC 3339 strings or datetimes only and
  normalises them to UTC; naive values are assumed to already be UTC.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict


def strict_degrees(value: Any) -> float:
    """Return *value* as ``float`` if it is a finite JSON number.

    Raises :class:`ValueError` otherwise, which pydantic reports as a
    validation error for the field.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a number, got {type(value).__name__}")
    try:
        result = float(value)
    except OverflowError as exc:
        raise ValueError("expected a finite number") from exc
    if not math.isfinite(result):
        raise ValueError("expected a finite number")
    return result


def optional_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    return None


def timestamp_input(value: Any) -> Any:
    """Only let RFC 3339 strings and datetimes through; numbers are not timestamps."""
    if isinstance(value, (str, datetime)):
        return value
    raise ValueError(f"expected an RFC 3339 timestamp, got {type(value).__name__}")


def to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    try:
        return value.astimezone(UTC)
    except OverflowError as exc:
        raise ValueError("timestamp is out of range once converted to UTC") from exc


Degrees = Annotated[float, BeforeValidator(strict_degrees)]
"""Latitude or longitude in degrees, numbers only."""

OptionalText = Annotated[str | None, BeforeValidator(optional_text)]
"""Free text that degrades to ``None`` for anything that is not a string."""

UtcTimestamp = Annotated[datetime, BeforeValidator(timestamp_input), AfterValidator(to_utc)]
"""Aware UTC datetime, from a datetime or an RFC 3339 string."""


class LocustBaseModel(BaseModel):
    """Base for pylocust record models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )
