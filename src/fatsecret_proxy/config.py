"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from fatsecret_proxy.adapters.fatsecret_client import DEFAULT_API_URL, DEFAULT_TOKEN_URL

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    fatsecret_client_id: str
    fatsecret_client_secret: str
    fatsecret_token_url: str = DEFAULT_TOKEN_URL
    fatsecret_api_url: str = DEFAULT_API_URL
    fatsecret_timeout_seconds: float = 15
    search_max_results: int = 25
    search_include_servings: bool = False
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    token_safety_margin_seconds: int = 100
    cors_allow_origins: str = "*"
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
        frozen=True,
    )


def parse_allowed_origins(raw: str | None) -> list[str]:
    """Parse a comma-separated CORS origin list from env."""
    if raw is None:
        return ["*"]
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return ["*"]
    origins = [chunk.strip() for chunk in cleaned.split(",") if chunk.strip()]
    return origins or ["*"]
