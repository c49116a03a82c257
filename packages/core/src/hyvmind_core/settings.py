from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="HYVMIND_", extra="ignore")

    database_url: str = "sqlite:///./hyvmind.db"
    leaderboard_limit: int = 1000
    # Principals treated as admin regardless of stored role assignments.
    admin_principals: list[str] = []
    log_level: str = "INFO"


settings = Settings()
