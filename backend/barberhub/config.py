# backend/barberhub/config.py

from datetime import datetime
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root


class Settings(BaseSettings):
    database_url: str = "sqlite:///./barberhub.db"
    redis_url: str | None = None

    # All "is today" / cutoff decisions are made in this zone,
    # never in the server's local time.
    business_timezone: str = "America/Sao_Paulo"

    booking_horizon_days: int = 15
    hours_cache_ttl_seconds: int = 86400

    calendar_row_height: int = 64
    calendar_min_event_height: int = 48

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            return f"sqlite:///{absolute_path}"
        return url

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.business_timezone)

    def now(self) -> datetime:
        """Current wall-clock time in the business timezone."""
        return datetime.now(self.tzinfo)


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def get_now() -> datetime:
    """FastAPI dependency: current business-local time."""
    return settings.now()
