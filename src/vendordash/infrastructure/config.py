from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="VENDORDASH_", extra="ignore"
    )

    # Which store backs the dashboard: a local JSON file or the REST API.
    store_backend: Literal["json", "http"] = "json"
    data_dir: Path = Path("data")
    api_base_url: str = "http://localhost:3000/api"
    http_timeout_seconds: float = 10.0

    window_days: int = Field(default=5, ge=1, le=31)
    quantity_step: Decimal = Field(default=Decimal("0.1"), gt=0)

    log_level: str = "WARNING"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
