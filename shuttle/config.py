"""Environment-bound configuration.

``Settings`` is a pydantic-settings model read from ``SHUTTLE_*`` variables
and a local ``.env``. ``ConfigLoader`` is the plain string-keyed lookup for
anything else (API keys, provider-specific knobs)::

    settings = get_settings()
    ctx = ModelContext(provider, options=settings.call_options())

    config = ConfigLoader()
    api_key = config.get("OPENAI_API_KEY")
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .agent import AgentOptions
from .types import CallOptions

logger = logging.getLogger(__name__)

DEFAULT_ENV_PATHS = (".env", "../.env", "../../.env", "~/.shuttle/.env")


class Settings(BaseSettings):
    provider: str = "openai"
    model: str = ""
    api_key: str | None = None
    base_url: str | None = None

    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1024, gt=0)
    request_timeout: float = Field(default=30.0, gt=0)
    max_iterations: int = Field(default=10, gt=0)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SHUTTLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def call_options(self) -> CallOptions:
        return CallOptions(
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            timeout=self.request_timeout,
        )

    def agent_options(self) -> AgentOptions:
        return AgentOptions(max_iterations=self.max_iterations)


@lru_cache
def get_settings() -> Settings:
    return Settings()


class ConfigLoader:
    """String-keyed lookup: first ``.env`` found on the search path, then the process environment."""

    def __init__(self, paths: list[str | Path] | None = None) -> None:
        self._paths = [Path(p).expanduser() for p in (paths or DEFAULT_ENV_PATHS)]
        self._values: dict[str, str] = {}
        self.source: Path | None = None
        self.reload()

    def reload(self) -> None:
        self._values = {}
        self.source = None
        for path in self._paths:
            if path.is_file():
                self._values = {k: v for k, v in dotenv_values(path).items() if v is not None}
                self.source = path
                logger.debug("Loaded %d config values from %s", len(self._values), path)
                break

    def get(self, key: str, default: str = "") -> str:
        if key in self._values:
            return self._values[key]
        return os.environ.get(key, default)

    def has(self, key: str) -> bool:
        return key in self._values or key in os.environ
