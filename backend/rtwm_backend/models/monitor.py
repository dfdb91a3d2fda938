from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CacheStatus(str, Enum):
    HIT = "HIT"
    MISS = "MISS"
    REVALIDATED = "REVALIDATED"
    UNKNOWN = "UNKNOWN"
    NONE = "NONE"


class MeasurementRecord(BaseModel):
    """One probe of the target URL, serialized with the camelCase field names."""

    model_config = ConfigDict(populate_by_name=True)

    target: str
    online: bool = False
    status_code: int = Field(0, alias="statusCode")
    latency_ms: int = Field(-1, alias="latency", description="-1 when no response was obtained")
    cache: CacheStatus = CacheStatus.UNKNOWN
    cache_reason: str | None = Field(None, alias="cacheReason")
    bandwidth_bytes: int = Field(0, ge=0, alias="bandwidth")
    uptime_seconds: float = Field(..., alias="uptime")
    uptime_formatted: str = Field(..., alias="uptimeFormatted")
    origin_uptime_seconds: float | None = Field(None, alias="originUptime")
    origin_uptime_formatted: str | None = Field(None, alias="originUptimeFormatted")
    timestamp_ms: int = Field(..., alias="timestamp")


class OriginUptimeReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uptime_seconds: float = Field(..., alias="uptime")
    uptime_formatted: str = Field(..., alias="uptimeFormatted")
    timestamp_ms: int = Field(..., alias="timestamp")


class ServiceEndpoints(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    monitor: str = "/monitor"
    origin_uptime: str = Field("/origin-uptime", alias="originUptime")


class ServiceDefaults(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    target: str
    origin_uptime_endpoint: str = Field(..., alias="originUptimeEndpoint")


class ServiceInfo(BaseModel):
    name: str
    docs: str
    endpoints: ServiceEndpoints = Field(default_factory=ServiceEndpoints)
    notes: str
    defaults: ServiceDefaults
