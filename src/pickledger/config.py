"""Environment-driven configuration helpers for PickLedger."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or .env files."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: AnyUrl | str = Field(default="sqlite:///./pickledger.db")
    log_level: str = Field(default="INFO")

    default_bankroll: int = Field(default=1000, ge=0)
    demo_username: str = Field(default="demo_user")
    default_strategy: str = Field(
        default=(
            "Focus on WTA, ATP, and NHL. NHL: look for +1.5 puckline spreads priced at -200 "
            "or shorter. Tennis: name specific players on win streaks with a clear edge."
        )
    )
    venue_timezone: str = Field(default="America/Chicago")
    banned_team_codes: list[str] = Field(default_factory=lambda: ["NYR", "NJD"])
    weak_team_codes: list[str] = Field(default_factory=lambda: ["ANA", "SJS", "CHI"])

    lookup_cache_ttl_seconds: float = Field(default=30 * 60, gt=0)

    openai_api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o-mini")

    api_tennis_key: str = Field(default="", validation_alias="API_TENNIS_KEY")
    api_tennis_base_url: str = Field(default="https://api.api-tennis.com/tennis/")

    pickledger_api_key: str = Field(default="", validation_alias="PICKLEDGER_API_KEY")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()  # type: ignore[call-arg]


def get_openai_api_key() -> str:
    """Return the OpenAI API key or raise a helpful error."""

    key = os.getenv("OPENAI_API_KEY") or get_settings().openai_api_key
    if not key:
        raise RuntimeError("OPENAI_API_KEY is not configured. Set it in .env for local dev.")
    return key


def get_api_tennis_key() -> str:
    key = os.getenv("API_TENNIS_KEY") or get_settings().api_tennis_key
    if not key:
        raise RuntimeError(
            "API_TENNIS_KEY is not configured. Tennis insights are unavailable without it."
        )
    return key


def get_api_access_key() -> str:
    key = os.getenv("PICKLEDGER_API_KEY") or get_settings().pickledger_api_key
    if not key:
        raise RuntimeError(
            "PICKLEDGER_API_KEY is not configured. Set it in your environment before serving."
        )
    return key
