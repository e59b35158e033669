# src/settings.py
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ROOT = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    # core
    APP_NAME: str = Field(default="Stimuli Gateway")
    ENV: str = Field(default="dev")
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")

    # server
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8080)
    SHUTDOWN_GRACE_SECONDS: int = Field(default=10)
    STATIC_DIR: Path = Field(default=ROOT / "static")

    # backend; the key is required, startup fails without it
    GEMINI_STIMULI_KEY: str = Field(min_length=1)
    AI_MODEL_NAME: str = Field(default="gemini-2.0-flash")
    GEMINI_API_BASE: str = Field(default="https://generativelanguage.googleapis.com/v1beta")
    BACKEND_TIMEOUT_SECONDS: float = Field(default=120.0)

    # read root-level .env.dev
    model_config = SettingsConfigDict(
        env_file=".env.dev",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
