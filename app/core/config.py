# app/core/config.py
from __future__ import annotations

"""
# VidShare · Centralized Configuration (Pydantic v2)

Single `settings` object with strongly-typed, environment-driven config.

## Goals
- Safe defaults for local/dev; explicit where prod needs secrets.
- CSV → list helpers for origins.
- Optional S3/CDN so imports never crash in dev (local media store is the default).
- Bounded pagination and JWT TTLs.

## Usage
    from app.core.config import settings
"""

import logging
from pathlib import Path
from typing import Annotated, List, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

log = logging.getLogger(__name__)
load_dotenv()  # harmless in prod; convenient in dev


# ─────────────────────────────────────────────────────────────
# Small helpers
# ─────────────────────────────────────────────────────────────
def _split_csv(v: str | None) -> list[str]:
    """Split a comma-separated string into a trimmed list (empty-safe)."""
    if not v:
        return []
    return [s.strip() for s in str(v).split(",") if s and s.strip()]


def _normalize_url_like(v: str | None) -> str:
    """Normalize to a string URL without trailing slash."""
    return (v or "").strip().rstrip("/")


# ─────────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────────
class Settings(BaseSettings):
    """
    Global application settings sourced from environment.

    Security:
        - `JWT_SECRET_KEY` and `POSTGRES_PASSWORD` are required secrets.

    Media:
        - `MEDIA_BACKEND=local` writes uploads under `MEDIA_LOCAL_DIR` and
          serves them from `/static`; `s3` uploads to `AWS_BUCKET_NAME`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # don't crash on unknown keys
    )

    # ── App meta ──────────────────────────────────────────────
    PROJECT_NAME: str = "VidShare API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    ENV: Literal["development", "staging", "production"] = "development"
    ENABLE_DOCS: bool = True

    # ── Security / JWT ────────────────────────────────────────
    JWT_SECRET_KEY: SecretStr = Field(...)
    JWT_ALGORITHM: Literal["HS256", "HS384", "HS512"] = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60, ge=5, le=24 * 60)
    ACCESS_TOKEN_COOKIE_NAME: str = "accessToken"

    # ── Database (PostgreSQL) ─────────────────────────────────
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: SecretStr = Field(...)
    POSTGRES_DB: str = "vidshare"
    DATABASE_URL: Optional[str] = None  # full override, sync or async form

    # ── Pagination ────────────────────────────────────────────
    DEFAULT_PAGE_LIMIT: int = Field(10, ge=1, le=1000)
    MAX_PAGE_LIMIT: int = Field(100, ge=1, le=1000)

    # ── Media storage ─────────────────────────────────────────
    MEDIA_BACKEND: Literal["local", "s3"] = "local"
    MEDIA_LOCAL_DIR: Path = Path("uploads")
    MEDIA_PUBLIC_BASE_URL: str = "http://localhost:8000/static"
    UPLOAD_TMP_DIR: Path = Path("tmp/uploads")

    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[SecretStr] = None
    AWS_REGION: str = "us-east-1"
    AWS_BUCKET_NAME: Optional[str] = None
    AWS_S3_ENDPOINT_URL: Optional[str] = None  # LocalStack / MinIO
    CDN_BASE_URL: Optional[str] = None  # e.g., https://cdn.example.com

    # ── CORS ─────────────────────────────────────────────────
    # NoDecode: CSV strings reach the validator instead of JSON parsing
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:8000", "http://localhost:5173"]
    )

    # ── Validators / normalizers ──────────────────────────────
    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def _assemble_cors_origins(cls, v: str | List[str]):
        if isinstance(v, str):
            return _split_csv(v)
        return v

    @field_validator("MEDIA_PUBLIC_BASE_URL", "CDN_BASE_URL", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, v):
        return None if v is None else _normalize_url_like(str(v))

    @field_validator("MAX_PAGE_LIMIT")
    @classmethod
    def _max_not_below_default(cls, v: int, info) -> int:
        default = info.data.get("DEFAULT_PAGE_LIMIT", 10)
        return max(v, default)

    # ── Derived values ────────────────────────────────────────
    @property
    def ASYNC_DATABASE_URL(self) -> str:
        """asyncpg URL for the app engine and Alembic."""
        if self.DATABASE_URL:
            url = self.DATABASE_URL.strip()
            if url.startswith("postgresql://"):
                return url.replace("postgresql://", "postgresql+asyncpg://", 1)
            return url
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:"
            f"{self.POSTGRES_PASSWORD.get_secret_value()}@"
            f"{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


settings = Settings()

__all__ = ["Settings", "settings"]
