from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Chart Registry"
    debug: bool = False

    # Storage (empty redis_url = in-process store, useful for local dev)
    redis_url: str = ""
    store_key_prefix: str = "chart_registry:org_charts:"
    store_retry_attempts: int = 3

    # Moderation: roles allowed to approve regardless of per-chart grants
    elevated_roles: list[str] = ["admin", "manager", "team_lead"]

    # Catalog ranking caps
    featured_limit: int = 6
    popular_limit: int = 10
    recent_limit: int = 10

    # Recorded on generated charts
    generation_model: str = "heuristic-v1"


@lru_cache
def get_settings() -> Settings:
    return Settings()
