"""Configuration management for the receipt AI service.

This module defines a ``Settings`` class that reads configuration
values from environment variables and ``.env`` files and provides
sensible defaults. ``.env`` support is implemented by loading files
from the repository root in a defined order. You can override any
value via environment variables.

The receipt pipeline never reads the module level ``settings``
instance on its own; a ``Settings`` value is handed to
``ReceiptService`` when it is constructed.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv, find_dotenv

# -----------------------------------------------------------------------------
# .env loading
#
# Prefer a .env in the repository root but allow fallback to whatever
# python-dotenv discovers from the current working directory. Files are
# loaded in order without overriding already-set variables.

_THIS_FILE = Path(__file__).resolve()
_REPO_ROOT = _THIS_FILE.parents[3]
_ROOT_ENV = _REPO_ROOT / ".env"

_candidate_envs: list[str] = []
if _ROOT_ENV.exists():
    _candidate_envs.append(str(_ROOT_ENV))

_FOUND_ENV = find_dotenv(usecwd=True)
if _FOUND_ENV and _FOUND_ENV not in _candidate_envs:
    _candidate_envs.append(_FOUND_ENV)

_BACKEND_ENV = (_THIS_FILE.parents[2] / ".env").as_posix()
if os.path.exists(_BACKEND_ENV) and _BACKEND_ENV not in _candidate_envs:
    _candidate_envs.append(_BACKEND_ENV)

for _env_path in _candidate_envs:
    load_dotenv(dotenv_path=_env_path, override=False)


class Settings(BaseSettings):
    """Application settings.

    Values are loaded from the environment with sensible defaults. Any
    attribute defined here can be overridden by setting the corresponding
    environment variable.
    """

    model_config = SettingsConfigDict(
        env_file=tuple(_candidate_envs) if _candidate_envs else (".env",),
        case_sensitive=True,
        extra="ignore",
    )

    # API Settings
    PROJECT_NAME: str = "Car Line Receipt AI"
    ENVIRONMENT: str = Field(default="development")
    LOG_LEVEL: str = Field(default="INFO")

    # OpenAI (completion service)
    OPENAI_API_KEY: Optional[str] = Field(default=None)
    OPENAI_BASE_URL: str = Field(default="https://api.openai.com/v1")
    # Transport timeout for the single outbound call; the pipeline adds none of its own
    OPENAI_TIMEOUT_SECONDS: float = Field(default=60.0, gt=0)

    # Receipt extraction
    RECEIPT_MODEL: str = Field(default="gpt-4o-mini")
    RECEIPT_MAX_TOKENS: int = Field(default=500, gt=0)
    RECEIPT_TEMPERATURE: float = Field(default=0.2, ge=0.0, le=2.0)
    RECEIPT_CONFIDENCE_THRESHOLD: float = Field(default=0.8, ge=0.0, le=1.0)

    # CORS
    FRONTEND_URL: str = Field(default="http://localhost:3000")
    BACKEND_CORS_ORIGINS: list[str] = Field(default_factory=list)

    # Sentry
    SENTRY_DSN: Optional[str] = Field(default=None)
    SENTRY_TRACES_SAMPLE_RATE: float = Field(default=0.0)
    SENTRY_RELEASE: Optional[str] = Field(default=None)

    @field_validator("OPENAI_API_KEY", "SENTRY_DSN", mode="before")
    @classmethod
    def _blank_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @property
    def openai_configured(self) -> bool:
        """True when the completion service credential is present."""
        return self.OPENAI_API_KEY is not None


# Instantiate global settings
settings = Settings()
