from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    target_url: str = "https://cdn.kyrt.my.id/"
    origin_uptime_endpoint: str = "https://m.kyrt.my.id/origin-uptime"
    fetch_timeout_ms: int = Field(8000, gt=0)

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "info"

    # Surfaced on GET /
    service_name: str = "RTWM - Real Time Website Monitoring"
    docs_url: str = "https://rtwm.kyrt.my.id/what-is-monitoring-website"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    @property
    def fetch_timeout_seconds(self) -> float:
        return self.fetch_timeout_ms / 1000.0


@lru_cache(maxsize=1)
def get_settings() -> AppConfig:
    return AppConfig()


def reset_settings_cache() -> None:
    get_settings.cache_clear()
