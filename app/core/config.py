# app/core/config.py
from __future__ import annotations

import json
from datetime import date
from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


EnvType = Literal["local", "dev", "staging", "prod"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    APP_NAME: str = "SleeperFantasyAPI"
    APP_ENV: EnvType = "local"
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str | List[str] = Field(
        default='["http://localhost:5173","http://127.0.0.1:5173"]',
        description='JSON list or comma-separated origins',
    )

    # DB (admin-authored start/sit overrides)
    DATABASE_URL: Optional[str] = None

    # Sleeper
    SLEEPER_API_BASE: str = "https://api.sleeper.app/v1"
    SLEEPER_TIMEOUT_SECONDS: float = 30.0
    SLEEPER_SEASON: str = Field(default_factory=lambda: str(date.today().year))

    # Player directory
    PLAYER_CACHE_TTL_SECONDS: int = 10 * 60
    PLAYER_FETCH_COALESCE: bool = False

    # Dev toggle: serve fallback data without touching the network
    SLEEPER_FAKE_MODE: bool = False

    @property
    def IS_LOCAL(self) -> bool:
        return self.APP_ENV == "local"

    # ---------- Validators ----------

    @field_validator("CORS_ORIGINS")
    @classmethod
    def _parse_cors(cls, v):
        # Accept JSON list or comma-separated string
        if isinstance(v, list):
            return v
        s = str(v).strip()
        if not s:
            return []
        try:
            parsed = json.loads(s)
            if isinstance(parsed, list):
                return parsed
        except ValueError:
            pass
        return [p.strip() for p in s.split(",") if p.strip()]

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()

    # ---------- Runtime validations ----------

    def validate_at_startup(self) -> None:
        """Fail fast with clear messages for misconfigurations."""
        problems: list[str] = []

        if self.SLEEPER_TIMEOUT_SECONDS <= 0:
            problems.append("SLEEPER_TIMEOUT_SECONDS must be positive.")
        if self.PLAYER_CACHE_TTL_SECONDS <= 0:
            problems.append("PLAYER_CACHE_TTL_SECONDS must be positive.")
        if not self.SLEEPER_SEASON.isdigit():
            problems.append("SLEEPER_SEASON must be a four-digit year.")

        if not self.IS_LOCAL:
            # hosted envs keep overrides in Postgres, never the local sqlite file
            if not self.DATABASE_URL:
                problems.append("DATABASE_URL is required in non-local env.")
            if not self.CORS_ORIGINS:
                problems.append("CORS_ORIGINS must contain at least one allowed origin in non-local env.")
            if self.SLEEPER_FAKE_MODE:
                problems.append("SLEEPER_FAKE_MODE is only allowed in local env.")

        if problems:
            raise RuntimeError("Config validation failed: " + " ".join(problems))


settings = Settings()
