from __future__ import annotations

from fastapi import APIRouter, Request

from ..models.monitor import ServiceInfo
from ..services.monitor import MonitorService

router = APIRouter(tags=["info"])


@router.get("/", response_model=ServiceInfo)
async def service_info(request: Request) -> ServiceInfo:
    service: MonitorService = request.app.state.monitor_service
    return service.service_info()
