"""Single outbound GET bounded by one overall deadline."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

import httpx

from ..errors import FetchTimeout, NetworkError

LOGGER = logging.getLogger(__name__)

NO_STORE_HEADERS = {
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
}


@dataclass
class FetchResult:
    url: str
    status_code: int
    headers: httpx.Headers
    text: str
    latency_ms: int
    body_error: str | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def body_byte_length(text: object) -> int:
    """UTF-8 byte count of a decoded body; anything but a string counts as 0."""
    if not isinstance(text, str):
        return 0
    return len(text.encode("utf-8", errors="replace"))


async def fetch_with_timeout(
    url: str,
    *,
    timeout_ms: int,
    method: str = "GET",
    transport: httpx.AsyncBaseTransport | None = None,
) -> FetchResult:
    """Issue one request, following redirects, and read its body.

    The deadline covers connect, headers and body. When it elapses the pending
    request is cancelled and its connection closed. Raises ``FetchTimeout`` or
    ``NetworkError``; a failure while reading the body only empties ``text``.
    """
    timeout_s = timeout_ms / 1000.0
    deadline = time.monotonic() + timeout_s
    started = time.perf_counter()

    async with httpx.AsyncClient(
        follow_redirects=True,
        timeout=timeout_s,
        headers=NO_STORE_HEADERS,
        transport=transport,
    ) as client:
        try:
            request = client.build_request(method, url)
            response = await asyncio.wait_for(client.send(request, stream=True), timeout=timeout_s)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            LOGGER.warning("Timed out after %sms fetching %s", timeout_ms, url)
            raise FetchTimeout(url, f"no response within {timeout_ms}ms") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            LOGGER.warning("Network error fetching %s: %s", url, exc)
            raise NetworkError(url, str(exc) or type(exc).__name__) from exc

        latency_ms = int((time.perf_counter() - started) * 1000)
        text = ""
        body_error: str | None = None
        try:
            remaining = max(0.0, deadline - time.monotonic())
            await asyncio.wait_for(response.aread(), timeout=remaining)
            text = response.text
        except (asyncio.TimeoutError, httpx.HTTPError) as exc:
            body_error = type(exc).__name__
            LOGGER.debug("Could not read body of %s: %s", url, body_error)
        finally:
            await response.aclose()

    return FetchResult(
        url=url,
        status_code=response.status_code,
        headers=response.headers,
        text=text,
        latency_ms=latency_ms,
        body_error=body_error,
    )
