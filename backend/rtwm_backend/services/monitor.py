from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx

from ..config import AppConfig
from ..errors import FetchError
from ..models.monitor import (
    CacheStatus,
    MeasurementRecord,
    OriginUptimeReport,
    ServiceDefaults,
    ServiceInfo,
)
from .cache import classify_cache, fetch_failure_verdict
from .fetch import body_byte_length, fetch_with_timeout
from .origin import UNAVAILABLE, OriginUptime, fetch_origin_uptime
from .system import format_uptime_seconds, now_ms, process_uptime_seconds

LOGGER = logging.getLogger(__name__)

USAGE_NOTES = (
    "Use /monitor?target=... to override target (full URL). "
    "Use ?originUptime=... to override origin-uptime endpoint."
)


@dataclass(frozen=True)
class TargetProbe:
    online: bool
    status_code: int
    latency_ms: int
    cache: CacheStatus
    cache_reason: str | None
    bandwidth_bytes: int


class MonitorService:
    """Probes a target URL and relays an origin uptime, one request at a time.

    Holds only read-only configuration, so one instance serves concurrent
    requests. ``transport`` is handed to every outbound httpx client.
    """

    def __init__(self, settings: AppConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self.transport = transport

    async def measure(
        self,
        target: str | None = None,
        origin_uptime_url: str | None = None,
    ) -> MeasurementRecord:
        target = (target or "").strip() or self.settings.target_url
        origin_uptime_url = (origin_uptime_url or "").strip() or self.settings.origin_uptime_endpoint

        probe, origin = await asyncio.gather(
            self._probe_target(target),
            self._probe_origin(origin_uptime_url),
        )

        uptime = process_uptime_seconds()
        return MeasurementRecord(
            target=target,
            online=probe.online,
            status_code=probe.status_code,
            latency_ms=probe.latency_ms,
            cache=probe.cache,
            cache_reason=probe.cache_reason,
            bandwidth_bytes=probe.bandwidth_bytes,
            uptime_seconds=uptime,
            uptime_formatted=format_uptime_seconds(uptime),
            origin_uptime_seconds=origin.seconds,
            origin_uptime_formatted=origin.formatted,
            timestamp_ms=now_ms(),
        )

    async def _probe_target(self, target: str) -> TargetProbe:
        try:
            result = await fetch_with_timeout(
                target,
                timeout_ms=self.settings.fetch_timeout_ms,
                transport=self.transport,
            )
        except FetchError as exc:
            verdict = fetch_failure_verdict(exc)
            return TargetProbe(
                online=False,
                status_code=0,
                latency_ms=-1,
                cache=verdict.status,
                cache_reason=verdict.reason,
                bandwidth_bytes=0,
            )

        verdict = classify_cache(result.headers)
        LOGGER.info(
            "Probed %s: status=%s latency=%sms cache=%s",
            target,
            result.status_code,
            result.latency_ms,
            verdict.status.value,
        )
        return TargetProbe(
            online=result.ok,
            status_code=result.status_code,
            latency_ms=result.latency_ms,
            cache=verdict.status,
            cache_reason=verdict.reason,
            bandwidth_bytes=body_byte_length(result.text),
        )

    async def _probe_origin(self, url: str) -> OriginUptime:
        try:
            return await fetch_origin_uptime(
                url,
                timeout_ms=self.settings.fetch_timeout_ms,
                transport=self.transport,
            )
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("Origin uptime relay from %s failed: %s", url, exc)
            return OriginUptime(None, UNAVAILABLE)

    def origin_uptime(self) -> OriginUptimeReport:
        uptime = process_uptime_seconds()
        return OriginUptimeReport(
            uptime_seconds=uptime,
            uptime_formatted=format_uptime_seconds(uptime),
            timestamp_ms=now_ms(),
        )

    def service_info(self) -> ServiceInfo:
        return ServiceInfo(
            name=self.settings.service_name,
            docs=self.settings.docs_url,
            notes=USAGE_NOTES,
            defaults=ServiceDefaults(
                target=self.settings.target_url,
                origin_uptime_endpoint=self.settings.origin_uptime_endpoint,
            ),
        )
