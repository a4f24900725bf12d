"""Application configuration."""

from datetime import time
from os import getenv

from pydantic import BaseModel


def _int_list(value: str) -> list[int]:
    return [int(part) for part in value.split(",") if part.strip()]


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "Bakery Fulfillment API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    database_url: str = getenv("DATABASE_URL", "sqlite:///./bakery.db")
    business_timezone: str = getenv("BUSINESS_TIMEZONE", "America/Boise")
    default_cutoff_day: int = int(getenv("DEFAULT_CUTOFF_DAY", "2"))
    default_cutoff_time: time = time.fromisoformat(getenv("DEFAULT_CUTOFF_TIME", "23:59"))
    default_lead_time_days: int = int(getenv("DEFAULT_LEAD_TIME_DAYS", "2"))
    default_fulfillment_days: list[int] = _int_list(getenv("DEFAULT_FULFILLMENT_DAYS", "4,6"))
    seed_delivery_settings: bool = getenv("SEED_DELIVERY_SETTINGS", "1") == "1"


settings: Settings = Settings()
