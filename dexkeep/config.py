from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "DexKeep"
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = "sqlite+aiosqlite:///./dexkeep.db"

    # "stub" picks from the built-in catalog, "remote" calls the recognition service
    identification_backend: Literal["stub", "remote"] = "stub"
    identification_service_url: str = ""
    identification_timeout_seconds: float = 30.0

    # Simulated processing time for the stubbed AI operations
    identification_latency_seconds: float = 2.0
    suggestion_latency_seconds: float = 3.0


settings = Settings()


# =============================================================================
# QUERY DEFAULTS
# =============================================================================

# Sentinel filter value that matches every card
FILTER_ALL = "all"

# Content-type prefix accepted by the scanner
IMAGE_CONTENT_TYPE_PREFIX = "image/"
