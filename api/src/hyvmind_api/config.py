"""API configuration from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """API settings loaded from environment (`API_` prefix)."""

    database_url: str = "sqlite:///./hyvmind.db"
    cors_origins: str = "http://localhost:3000"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    model_config = {"env_prefix": "API_", "env_file": ".env", "extra": "ignore"}


settings = Settings()
