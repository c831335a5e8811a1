"""Application configuration via pydantic-settings."""

import os
from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from lptagger.static.locator import EnvironmentSignals

# Package directory (where this file lives: backend/lptagger/config.py)
_PACKAGE_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _PACKAGE_DIR.parent

# Default to SQLite in standalone mode
_DEFAULT_DB = f"sqlite+aiosqlite:///{_BACKEND_DIR / 'lptagger.db'}"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database: defaults to local SQLite so the app works without Docker
    DATABASE_URL: str = _DEFAULT_DB

    # Runtime environment: "development" or "production"
    APP_ENV: str = "production"

    # Packaged/deployed run (serverless bundles set VERCEL=1)
    DEPLOYED: bool = Field(False, validation_alias=AliasChoices("DEPLOYED", "VERCEL"))

    # Explicit build output directory; skips candidate discovery when set
    STATIC_DIR: Optional[str] = None

    # Paths under this prefix are never served from disk
    API_PREFIX: str = "/api/"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "info"

    @property
    def is_sqlite(self) -> bool:
        return "sqlite" in self.DATABASE_URL

    @property
    def is_development(self) -> bool:
        return self.APP_ENV.lower() == "development"

    def environment_signals(self) -> EnvironmentSignals:
        """Collect the startup signals the build-output locator needs."""
        return EnvironmentSignals(
            is_development=self.is_development,
            is_deployed=self.DEPLOYED,
            cwd=Path(os.getcwd()),
            program_dir=_PACKAGE_DIR,
            override=Path(self.STATIC_DIR) if self.STATIC_DIR else None,
        )


def _build_settings() -> Settings:
    """Build settings, fixing relative paths to be absolute."""
    s = Settings(
        _env_file=str(_BACKEND_DIR.parent / ".env"),
        _env_file_encoding="utf-8",
    )
    # Fix relative SQLite path to be absolute from backend dir
    if s.is_sqlite and ":///" in s.DATABASE_URL:
        db_path = s.DATABASE_URL.split(":///", 1)[1]
        if not os.path.isabs(db_path):
            abs_path = str(_BACKEND_DIR / db_path)
            s.DATABASE_URL = f"sqlite+aiosqlite:///{abs_path}"
    # Fix relative STATIC_DIR against the working directory
    if s.STATIC_DIR and not os.path.isabs(s.STATIC_DIR):
        s.STATIC_DIR = os.path.abspath(s.STATIC_DIR)
    # Normalize the API prefix to "/name/"
    s.API_PREFIX = "/" + s.API_PREFIX.strip("/") + "/"
    return s


settings = _build_settings()
