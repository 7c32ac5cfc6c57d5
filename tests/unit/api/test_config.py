"""Tests for API environment configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from kalshi_consensus.api.config import (
    APIConfig,
    Environment,
    get_config,
    resolve_environment,
    set_environment,
)

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _reset_environment() -> Iterator[None]:
    set_environment(Environment.PRODUCTION)
    yield
    set_environment(Environment.PRODUCTION)


def test_default_is_production() -> None:
    assert APIConfig().environment == Environment.PRODUCTION
    assert APIConfig().base_url == "https://api.elections.kalshi.com/trade-api/v2"


def test_demo_base_url() -> None:
    assert (
        APIConfig(environment=Environment.DEMO).base_url
        == "https://demo-api.kalshi.co/trade-api/v2"
    )


def test_set_environment_updates_singleton() -> None:
    set_environment(Environment.DEMO)
    assert get_config().environment == Environment.DEMO


def test_environment_values() -> None:
    assert Environment("prod") is Environment.PRODUCTION
    assert Environment("demo") is Environment.DEMO
    with pytest.raises(ValueError):
        Environment("staging")


def test_resolve_environment_prefers_explicit_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KALSHI_ENVIRONMENT", "demo")
    assert resolve_environment(" PROD ") is Environment.PRODUCTION
    assert resolve_environment(Environment.DEMO) is Environment.DEMO


def test_resolve_environment_falls_back_to_env_then_production(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("KALSHI_ENVIRONMENT", "Demo")
    assert resolve_environment() is Environment.DEMO

    monkeypatch.delenv("KALSHI_ENVIRONMENT")
    assert resolve_environment() is Environment.PRODUCTION


def test_resolve_environment_rejects_unknown_name() -> None:
    with pytest.raises(ValueError):
        resolve_environment("staging")


def test_config_is_frozen() -> None:
    with pytest.raises(ValidationError):
        APIConfig().environment = Environment.DEMO  # type: ignore[misc]
