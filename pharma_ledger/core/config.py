from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # ─────────── APP ───────────
    app_name: str = "Pharma Provenance Ledger"
    environment: str = "dev"
    log_level: str = "INFO"

    # ─────────── API ───────────
    api_prefix: str = "/api/v1"
    request_id_header: str = "X-Request-Id"
    max_page_size: int = 100

    # ─────────── DATABASE ───────────
    database_url: str

    # ─────────── JWT / AUTH ───────────
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_access_token_minutes: int = 60

    # ─────────── ADMINISTRATOR ───────────
    admin_address: str
    admin_name: str = "Ledger Administrator"
    admin_location: str = "HQ"
    admin_password: Optional[str] = None  # bootstrap credential, optional


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
