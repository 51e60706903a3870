"""Geolocation provider payload handling.

The provider answers a bare GET with a JSON object such as::

    {"status": "success", "lat": 52.37, "lon": 4.89,
     "city": "Amsterdam", "country": "Netherlands", ...}

Only ``lat`` and ``lon`` are required.  ``city`` and ``country`` are
kept when they are strings and dropped otherwise.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from pylocust._transport import Transport
from pylocust.exceptions import FetchError
from pylocust.models.sample import Sample

_logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def parse_location(payload: Any, now: datetime, *, url: str = "") -> Sample:
    """Turn a provider payload into a :class:`Sample` stamped with *now*.

    Raises
    ------
    FetchError
        If the payload is not an object, reports a provider-side failure,
        or lacks numeric ``lat``/``lon``.
    """
    if not isinstance(payload, dict):
        raise FetchError(f"Provider returned {type(payload).__name__}, expected an object", url=url)

    if payload.get("status") == "fail":
        message = payload.get("message") or "unknown reason"
        raise FetchError(f"Provider could not locate this address: {message}", url=url)

    try:
        return Sample.model_validate(
            {
                "timestamp": now,
                "lat": payload.get("lat"),
                "lon": payload.get("lon"),
                "city": payload.get("city"),
                "country": payload.get("country"),
            }
        )
    except ValidationError as exc:
        bad = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
        raise FetchError(f"Provider payload has no usable position ({bad})", url=url) from exc


async def fetch_location(transport: Transport, api_url: str, *, clock: Clock = utc_now) -> Sample:
    """Issue one provider request and parse the answer.

    The timestamp comes from *clock* once the response has arrived.
    """
    payload = await transport.get_json(api_url)
    sample = parse_location(payload, clock(), url=api_url)
    _logger.debug("Located at %s, %s (%s, %s)", sample.lat, sample.lon, sample.city, sample.country)
    return sample
