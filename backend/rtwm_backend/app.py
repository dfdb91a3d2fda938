from __future__ import annotations

import httpx
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from .config import AppConfig, get_settings
from .routes import monitor, root
from .services.monitor import MonitorService


def create_app(
    settings: AppConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create the FastAPI application for the RTWM probe."""
    settings = settings or get_settings()

    app = FastAPI(
        title="RTWM - Real Time Website Monitoring",
        version="0.1.0",
        description="Probes a target URL for availability, latency and cache status.",
    )

    app.state.settings = settings
    app.state.monitor_service = MonitorService(settings, transport=transport)

    # Probe results are public; any origin may read them.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(root.router)
    app.include_router(monitor.router)

    return app
