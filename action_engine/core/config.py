"""Application configuration loaded via Pydantic settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ACTION_ENGINE_LOG_LEVEL: str = Field(default="info")
    ACTION_ENGINE_LOG_DIR: Path | None = Field(default=None)
    ACTION_ENGINE_LOG_SCHEMA_VERSION: str = Field(default="1.0.0")
    DATA_DIR: Path = Field(default=Path("/data"))

    # Intent naming
    INTENT_PREFIX: str = Field(default="assistant.intent.action")
    MAIN_INTENT: str = Field(default="MAIN")
    ASSISTANT_NAME: str = Field(default="my assistant")
    # Directory of <name>/action.json + <name>/handler.py intent definitions
    INTENTS_DIR: Path | None = Field(default=None)

    # Action package metadata
    PROJECT_ID: str = Field(default="my-project")
    VERSION_LABEL: str = Field(default="1.0.0")
    INVOCATION_NAME: str = Field(default="my assistant")
    VOICE_NAME: str = Field(default="male_1")
    LANGUAGE_CODE: str = Field(default="en-US")
    BASE_URL: str = Field(default="http://localhost:8000")


settings = Settings()


__all__ = ["Settings", "settings"]
