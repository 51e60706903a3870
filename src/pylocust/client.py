"""High-level async client for the geolocation provider."""

from __future__ import annotations

from typing import Any

import aiohttp

from pylocust._api.location import Clock, fetch_location, utc_now
from pylocust._transport import HttpTransport, Transport
from pylocust.config import LocustConfig
from pylocust.exceptions import LocustError
from pylocust.models.sample import Sample


class LocationClient:
    """Async client that samples the caller's network-derived position.

    Usage::

        async with LocationClient(config) as client:
            sample = await client.fetch()

    The client is stateless across calls; every :meth:`fetch` is a
    single provider request.
    """

    def __init__(
        self,
        config: LocustConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._external_transport = transport is not None
        self._clock = clock

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> LocationClient:
        if self._external_transport:
            return self
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._http_session, timeout=self._config.fetch_timeout)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def api_url(self) -> str:
        return self._config.api_url

    async def fetch(self) -> Sample:
        """Fetch one sample from the configured ``api_url``.

        Raises
        ------
        FetchError
            On any network or payload problem.
        """
        return await fetch_location(self._require_transport(), self._config.api_url, clock=self._clock)

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise LocustError("Client not initialized. Use 'async with LocationClient(...) as client:'")
        return self._transport
