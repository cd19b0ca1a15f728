"""Environment-based engine settings. Read-only; no business logic."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from CHUNKWISE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CHUNKWISE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="chunkwise", description="Engine name used in logs")
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Runtime environment"
    )
    log_level: str = Field(default="INFO", description="Log level name")

    # Token counting
    tokenizer_encoding: str = Field(
        default="cl100k_base",
        description="tiktoken encoding used as the sizing oracle (gpt-3.5/gpt-4 family)",
    )

    # Strategy selection when the caller does not name one
    default_strategy: str = Field(default="fixed-size", description="Strategy id used by chunk_markup")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance. Use for process lifetime."""
    return Settings()
