"""Best-effort relay of another instance's ``/origin-uptime`` value."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass

import httpx

from ..errors import FetchError, MalformedResponse
from .fetch import fetch_with_timeout
from .system import format_uptime_seconds

LOGGER = logging.getLogger(__name__)

UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class OriginUptime:
    seconds: float | None
    formatted: str | None


def parse_origin_uptime(url: str, text: str) -> float:
    """Extract seconds from ``{"uptime": n}`` or a bare JSON number."""
    try:
        data = json.loads(text)
    except (ValueError, TypeError) as exc:
        raise MalformedResponse(url, "body is not JSON") from exc

    value = data.get("uptime") if isinstance(data, dict) else data
    if value is None:
        raise MalformedResponse(url, "missing uptime field")
    if isinstance(value, bool):
        raise MalformedResponse(url, "uptime is not numeric")
    try:
        seconds = float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise MalformedResponse(url, "uptime is not numeric") from exc
    if not math.isfinite(seconds):
        raise MalformedResponse(url, "uptime is not finite")
    return seconds


async def fetch_origin_uptime(
    url: str,
    *,
    timeout_ms: int,
    transport: httpx.AsyncBaseTransport | None = None,
) -> OriginUptime:
    try:
        result = await fetch_with_timeout(url, timeout_ms=timeout_ms, transport=transport)
        if not result.ok:
            LOGGER.warning("Origin uptime endpoint %s answered %s", url, result.status_code)
            return OriginUptime(None, f"{UNAVAILABLE} (status {result.status_code})")
        seconds = parse_origin_uptime(url, result.text)
    except FetchError as exc:
        LOGGER.warning("Origin uptime unavailable (%s): %s", exc.kind, exc)
        return OriginUptime(None, UNAVAILABLE)
    return OriginUptime(seconds, format_uptime_seconds(seconds))
