from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    newsapi_key: str | None = None
    newsapi_base_url: str = "https://newsapi.org/v2"
    default_country: str = "in"

    host: str = "0.0.0.0"
    port: int = 5000
    allowed_origins: str = "*"

    upstream_timeout_seconds: float = 10.0
    cache_ttl_seconds: int = 60
    cache_max_entries: int | None = None

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    def origins(self) -> List[str]:
        origins = [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return origins or ["*"]


settings = Settings()
