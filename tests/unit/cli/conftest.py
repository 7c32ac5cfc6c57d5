from __future__ import annotations

import pytest

from kalshi_consensus.api.config import Environment, set_environment


@pytest.fixture(autouse=True)
def _reset_api_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "KALSHI_ENVIRONMENT",
        "KALSHI_KEY_ID",
        "KALSHI_PRIVATE_KEY_PATH",
        "KALSHI_PRIVATE_KEY_B64",
        "KALSHI_DEMO_KEY_ID",
        "KALSHI_DEMO_PRIVATE_KEY_PATH",
        "KALSHI_DEMO_PRIVATE_KEY_B64",
    ):
        monkeypatch.delenv(name, raising=False)
    # The CLI callback loads .env; keep a developer's real file out of tests.
    monkeypatch.setattr("kalshi_consensus.cli.find_dotenv", lambda **_kwargs: "")
    set_environment(Environment.PRODUCTION)
    yield
    set_environment(Environment.PRODUCTION)
