"""Access-token and environment resolution.

Acquiring and refreshing tokens is left to the identity tooling; this
module only locates a token that was already issued.
"""

from __future__ import annotations

from loguru import logger

from consolectl.core.protocols import ConfigStore
from consolectl.exceptions import AuthenticationError, ConfigError
from consolectl.settings import BASE_URLS, DEFAULT_ENV, ConsoleSettings

TOKEN_CONFIG_KEY: str = "auth.token"
ENV_CONFIG_KEY: str = "cli.env"


def resolve_env(settings: ConsoleSettings, store: ConfigStore) -> str:
    """Return the console environment: settings, then ``cli.env``, then prod."""
    env = settings.env or store.get(ENV_CONFIG_KEY) or DEFAULT_ENV
    if env not in BASE_URLS:
        raise ConfigError(
            f"Unknown console environment: {env}",
            hint=f"Use one of: {', '.join(sorted(BASE_URLS))}",
        )
    return str(env)


def resolve_access_token(settings: ConsoleSettings, store: ConfigStore) -> str:
    """Return the bearer token from the environment or the config file.

    Raises
    ------
    AuthenticationError
        When neither source holds a token.
    """
    logger.debug("Retrieving Auth Token")
    if settings.access_token is not None:
        token = settings.access_token.get_secret_value()
        if token:
            return token

    stored = store.get(TOKEN_CONFIG_KEY)
    if isinstance(stored, str) and stored:
        return stored

    raise AuthenticationError(
        "No access token available.",
        hint="Set CONSOLECTL_ACCESS_TOKEN or store one under auth.token.",
    )
