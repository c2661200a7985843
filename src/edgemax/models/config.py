from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application-wide settings populated from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="EDGEMAX_",
        extra="ignore",
    )

    address: str | None = None
    username: str | None = None
    password: str | None = None
    insecure: bool = False
    timeout: float = 10.0
    keepalive_interval: float = 5.0
    output_format: str | None = None
