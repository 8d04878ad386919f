from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic.aliases import AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


BACKEND_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=BACKEND_DIR / ".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str = Field(
        default=f"sqlite:///{BACKEND_DIR / 'schedule.db'}",
        validation_alias=AliasChoices("database_url", "DATABASE_URL", "SUPABASE_DB_URL"),
    )

    # Suggestion generator (Gemini REST API)
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "GEMINI_API_KEY", "API_KEY", "VITE_GEMINI_API_KEY"),
    )
    gemini_model: str = Field(
        default="gemini-3-pro-preview",
        validation_alias=AliasChoices("gemini_model", "GEMINI_MODEL"),
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        validation_alias=AliasChoices("gemini_base_url", "GEMINI_BASE_URL"),
    )
    suggestion_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        validation_alias=AliasChoices("suggestion_timeout_seconds", "SUGGESTION_TIMEOUT_SECONDS"),
    )

    # Runtime
    environment: str = Field(default="development", validation_alias=AliasChoices("environment", "ENVIRONMENT"))
    frontend_origin: str = Field(
        default="http://localhost:5173",
        validation_alias=AliasChoices("frontend_origin", "FRONTEND_ORIGIN"),
    )
    school_name: str = Field(
        default="SMK Negeri 1 Purbalingga",
        validation_alias=AliasChoices("school_name", "SCHOOL_NAME"),
    )

    @field_validator("frontend_origin")
    @classmethod
    def _normalize_frontend_origin(cls, v: str) -> str:
        # Starlette CORS expects the Origin to match exactly (no trailing slash).
        return v.strip().rstrip("/")

    @field_validator("gemini_api_key")
    @classmethod
    def _normalize_gemini_api_key(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("gemini_base_url")
    @classmethod
    def _normalize_gemini_base_url(cls, v: str) -> str:
        return v.strip().rstrip("/")


settings = Settings()
