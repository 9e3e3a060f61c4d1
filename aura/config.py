"""
Aura Coach — Centralized configuration.

Loads all settings from .env and coerces them into typed values.
This module is the foundation for every other module in the project.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (two levels up from aura/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Chat completion endpoint (OpenAI-compatible)
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_API_URL: str = "https://api.openai.com/v1/chat/completions"
    CHAT_TEMPERATURE: float = 0.7
    CHAT_MAX_TOKENS: int = 300
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # Persistence: "sqlite" | "memory"
    STORAGE_BACKEND: str = "sqlite"
    DATABASE_PATH: str = "data/aura.db"

    # Subscription gate
    FREE_MESSAGE_LIMIT: int = 5
    PREMIUM_ENABLED: bool = False

    LOG_LEVEL: str = "INFO"

    @field_validator("CHAT_MAX_TOKENS", "FREE_MESSAGE_LIMIT", mode="before")
    @classmethod
    def parse_int(cls, v: str | int) -> int:
        return int(v)

    @field_validator("CHAT_TEMPERATURE", "HTTP_TIMEOUT_SECONDS", mode="before")
    @classmethod
    def parse_float(cls, v: str | float) -> float:
        return float(v)

    @field_validator("PREMIUM_ENABLED", mode="before")
    @classmethod
    def parse_bool(cls, v: str | bool) -> bool:
        if isinstance(v, bool):
            return v
        return str(v).strip().lower() in ("1", "true", "yes", "on")

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def parse_log_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()


def _load_settings() -> Settings:
    """Load settings from environment.

    A missing OPENAI_API_KEY is not fatal: the chat bridge reports it in-band.
    """
    return Settings(
        OPENAI_API_KEY=os.getenv("OPENAI_API_KEY", ""),
        OPENAI_MODEL=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        OPENAI_API_URL=os.getenv(
            "OPENAI_API_URL", "https://api.openai.com/v1/chat/completions"
        ),
        CHAT_TEMPERATURE=os.getenv("CHAT_TEMPERATURE", "0.7"),
        CHAT_MAX_TOKENS=os.getenv("CHAT_MAX_TOKENS", "300"),
        HTTP_TIMEOUT_SECONDS=os.getenv("HTTP_TIMEOUT_SECONDS", "30"),
        STORAGE_BACKEND=os.getenv("STORAGE_BACKEND", "sqlite"),
        DATABASE_PATH=os.getenv("DATABASE_PATH", "data/aura.db"),
        FREE_MESSAGE_LIMIT=os.getenv("FREE_MESSAGE_LIMIT", "5"),
        PREMIUM_ENABLED=os.getenv("PREMIUM_ENABLED", "false"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
    )


# Singleton, imported by all other modules as:
#   from aura.config import settings
settings = _load_settings()
