"""Runtime configuration loaded from CONSOLECTL_* environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

ConsoleEnv = Literal["prod", "stage"]

DEFAULT_ENV: ConsoleEnv = "prod"

BASE_URLS: dict[str, str] = {
    "prod": "https://developers.adobe.io/console",
    "stage": "https://developers-stage.adobe.io/console",
}

API_KEYS: dict[str, str] = {
    "prod": "aio-cli-console-auth",
    "stage": "aio-cli-console-auth-stage",
}


def default_config_file() -> Path:
    return Path.home() / ".config" / "consolectl" / "config.json"


class ConsoleSettings(BaseSettings):
    """consolectl settings.

    All fields are read from environment variables with the ``CONSOLECTL_``
    prefix.  For example, ``CONSOLECTL_ENV=stage`` maps to ``env``.

    ``env`` and ``access_token`` may also come from the config file
    (``cli.env`` and ``auth.token``); environment variables win.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONSOLECTL_",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "WARNING"

    # -- Local state -------------------------------------------------------------
    config_file: Path = default_config_file()
    """JSON file holding the selection and user preferences."""

    # -- Console service ---------------------------------------------------------
    env: ConsoleEnv | None = None
    access_token: SecretStr | None = None
    api_key: str | None = None
    """Overrides the per-environment default API key."""

    base_url: str | None = None
    """Overrides the per-environment service URL."""

    timeout: float = 30.0
    """HTTP timeout in seconds."""

    # -- Helpers ---------------------------------------------------------------

    def resolve_api_key(self, env: str) -> str:
        return self.api_key or API_KEYS[env]

    def resolve_base_url(self, env: str) -> str:
        return (self.base_url or BASE_URLS[env]).rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> ConsoleSettings:
    """Return a cached settings instance.

    Call ``get_settings.cache_clear()`` in tests to force a re-read after
    overriding env vars.
    """
    return ConsoleSettings()
