"""Centralised configuration via Pydantic Settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide configuration loaded from environment variables."""

    model_config = {"env_prefix": "REELMATCH_", "frozen": True}

    # PostgreSQL (quality profiles live here)
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "reelmatch"
    db_password: str = "reelmatch"
    db_name: str = "reelmatch"

    # Debug API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    # Debug endpoints answer 403 unless developer mode is on.
    developer_mode: bool = True
    # Comma-separated list, "*" allows everything.
    cors_origins: str = "*"

    # Engine constants
    # Bonus awarded per dimension when a preferred rule matches.
    preferred_bonus: int = 10
    # Years up to current_year + year_lookahead are accepted as release years.
    year_lookahead: int = 5

    # Logging
    log_level: str = "INFO"

    @property
    def dsn(self) -> str:
        return f"postgresql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def cors_origin_list(self) -> list[str]:
        return [x.strip() for x in self.cors_origins.split(",") if x.strip()]


def get_settings() -> Settings:
    """Build settings from the environment; tests pass their own instead."""
    return Settings()
