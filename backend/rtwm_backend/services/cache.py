"""Decide whether a probed response was served from a cache layer."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass

import httpx

from ..errors import FetchError
from ..models.monitor import CacheStatus

REVALIDATED_MARKERS = ("revalidated", "stale-while-revalidate", "revalidate")


@dataclass(frozen=True)
class CacheVerdict:
    status: CacheStatus
    reason: str | None = None


def _header(headers: httpx.Headers, name: str) -> str:
    return headers.get(name) or ""


def _positive_age(raw: str) -> float | None:
    try:
        age = float(raw.strip())
    except ValueError:
        return None
    if not math.isfinite(age) or age <= 0:
        return None
    return age


def classify_cache(headers: Mapping[str, str] | httpx.Headers) -> CacheVerdict:
    """Classify cache status from response headers; the first matching rule wins.

    1. a positive ``Age`` means HIT
    2. ``CF-Cache-Status`` then ``X-Cache`` (or ``X-Cache-Hits``): hit, then
       revalidate, then miss
    3. ``X-Nf-Request-Id`` mentioning cache/hit is HIT, otherwise UNKNOWN
    """
    headers = httpx.Headers(headers)

    age_raw = _header(headers, "age")
    if age_raw and _positive_age(age_raw) is not None:
        return CacheVerdict(CacheStatus.HIT, f"age:{age_raw.strip()}")

    x_cache = _header(headers, "x-cache") or _header(headers, "x-cache-hits")
    cf_cache = _header(headers, "cf-cache-status")
    xc_lower = x_cache.lower()
    cf_lower = cf_cache.lower()
    vendor_reason = f"cf:{cf_cache}" if cf_lower else f"x-cache:{x_cache}"

    if "hit" in cf_lower or "hit" in xc_lower:
        return CacheVerdict(CacheStatus.HIT, vendor_reason)
    if any(marker in cf_lower or marker in xc_lower for marker in REVALIDATED_MARKERS):
        return CacheVerdict(CacheStatus.REVALIDATED, vendor_reason)
    if "miss" in cf_lower or "miss" in xc_lower:
        return CacheVerdict(CacheStatus.MISS, vendor_reason)

    # Weak signal kept for older Netlify-style request ids.
    request_id = _header(headers, "x-nf-request-id")
    nf_lower = request_id.lower()
    if "cache" in nf_lower or "hit" in nf_lower:
        return CacheVerdict(CacheStatus.HIT, f"x-nf-request-id:{request_id}")
    return CacheVerdict(CacheStatus.UNKNOWN, f"x-nf-request-id:{request_id or 'none'}")


def fetch_failure_verdict(error: FetchError) -> CacheVerdict:
    return CacheVerdict(CacheStatus.NONE, f"fetch-error:{error.kind}")
