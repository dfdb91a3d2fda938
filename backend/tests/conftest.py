from __future__ import annotations

import pytest

from rtwm_backend.config import AppConfig

TARGET_URL = "http://target.test/"
ORIGIN_URL = "http://origin.test/origin-uptime"


@pytest.fixture
def settings() -> AppConfig:
    return AppConfig(
        target_url=TARGET_URL,
        origin_uptime_endpoint=ORIGIN_URL,
        fetch_timeout_ms=200,
    )
