from __future__ import annotations

from fastapi import APIRouter, Query, Request

from ..models.monitor import MeasurementRecord, OriginUptimeReport
from ..services.monitor import MonitorService

router = APIRouter(tags=["monitor"])


@router.get("/monitor", response_model=MeasurementRecord)
async def monitor(
    request: Request,
    target: str | None = Query(None, description="Full URL to probe instead of the configured target"),
    origin_uptime: str | None = Query(None, alias="originUptime"),
    origin_uptime_snake: str | None = Query(None, alias="origin_uptime", include_in_schema=False),
) -> MeasurementRecord:
    service: MonitorService = request.app.state.monitor_service
    return await service.measure(target=target, origin_uptime_url=origin_uptime or origin_uptime_snake)


@router.get("/origin-uptime", response_model=OriginUptimeReport)
async def origin_uptime(request: Request) -> OriginUptimeReport:
    service: MonitorService = request.app.state.monitor_service
    return service.origin_uptime()
