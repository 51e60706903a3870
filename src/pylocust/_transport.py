"""HTTP transport for the geolocation provider."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from pylocust._constants import USER_AGENT
from pylocust.exceptions import LocustTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the location client.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, url: str) -> Any:
        ...


class HttpTransport:
    """Plain JSON-over-HTTP GET with a bounded timeout."""

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def get_json(self, url: str) -> Any:
        """GET *url* and return the decoded JSON body.

        Raises
        ------
        LocustTransportError
            On connection failure, timeout, a non-2xx status or a body
            that is not JSON.  No partial result is ever returned.
        """
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                body = await resp.read()
                if not 200 <= resp.status < 300:
                    raise LocustTransportError(
                        f"HTTP {resp.status} from {url}: {body[:200].decode('utf-8', errors='replace')}",
                        status_code=resp.status,
                        url=url,
                    )
        except LocustTransportError:
            raise
        except TimeoutError as exc:
            raise LocustTransportError(f"Request to {url} timed out", url=url) from exc
        except aiohttp.ClientError as exc:
            raise LocustTransportError(f"Request to {url} failed: {exc}", url=url) from exc

        try:
            return json.loads(body.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise LocustTransportError(f"Response from {url} is not valid UTF-8", url=url) from exc
        except json.JSONDecodeError as exc:
            raise LocustTransportError(f"Invalid JSON from {url}: {body[:200]!r}", url=url) from exc
