"""Application configuration."""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables (QUANT_*)."""

    model_config = SettingsConfigDict(
        env_prefix="QUANT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Redis (normalization cache)
    redis_url: str = "redis://localhost:6379/0"
    redis_max_connections: int = 20
    # Expiry for cached normalization parameters, 0 keeps them forever
    normalization_ttl_sec: int = 86400

    # Pipeline
    pipeline_config_path: str = "pipeline.yaml"
    alpha_model: str | None = None  # overrides alpha_model from the YAML


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
