from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # ─────────── APP ───────────
    app_name: str = "Tender Management Service"
    environment: str = "dev"
    log_level: str = "INFO"
    sqlalchemy_log_level: str = "WARNING"  # INFO echoes SQL

    # ─────────── API ───────────
    api_prefix: str = "/api"
    request_id_header: str = "X-Request-Id"

    # ─────────── SERVER ───────────
    server_host: str = "0.0.0.0"
    server_port: int = 8080

    # ─────────── DATABASE ───────────
    database_url: str

    # ─────────── DECISIONS ───────────
    max_quorum: int = 3  # approvals needed are min(max_quorum, org headcount)

    # ─────────── PAGINATION ───────────
    default_page_limit: int = 10
    max_page_limit: int = 50


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
