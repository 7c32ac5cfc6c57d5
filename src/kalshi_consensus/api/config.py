"""Kalshi environment selection for market-data requests.

The active environment is process-wide: the CLI resolves it once (flag, then
`KALSHI_ENVIRONMENT`, then production) and every client built afterwards reads it.
"""

from __future__ import annotations

import os
from enum import Enum

from pydantic import BaseModel, ConfigDict

ENVIRONMENT_ENV_VAR = "KALSHI_ENVIRONMENT"


class Environment(str, Enum):
    """Kalshi deployments a client can read markets from."""

    PRODUCTION = "prod"
    DEMO = "demo"


_BASE_URLS: dict[Environment, str] = {
    Environment.PRODUCTION: "https://api.elections.kalshi.com/trade-api/v2",
    Environment.DEMO: "https://demo-api.kalshi.co/trade-api/v2",
}


class APIConfig(BaseModel):
    """Which Kalshi deployment market-data requests are sent to."""

    model_config = ConfigDict(frozen=True)

    environment: Environment = Environment.PRODUCTION

    @property
    def base_url(self) -> str:
        return _BASE_URLS[self.environment]


def resolve_environment(value: Environment | str | None = None) -> Environment:
    """Resolve `value`, else `KALSHI_ENVIRONMENT`, else production.

    Names are matched case-insensitively; an unknown name raises ValueError.
    """
    if isinstance(value, Environment):
        return value
    raw = value or os.getenv(ENVIRONMENT_ENV_VAR) or Environment.PRODUCTION.value
    return Environment(raw.strip().lower())


_config = APIConfig()


def get_config() -> APIConfig:
    """The environment every new client uses unless told otherwise."""
    return _config


def set_environment(env: Environment) -> None:
    global _config  # noqa: PLW0603 - CLI sets this once per invocation
    _config = APIConfig(environment=env)
