"""Event records from `GET /events`.

Events are the only listing that carries a category, so market listings are read
through them with `with_nested_markets=true`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kalshi_consensus.api.models.market import Market  # noqa: TC001


class Event(BaseModel):
    """One event and, when requested, its markets."""

    model_config = ConfigDict(frozen=True)

    event_ticker: str
    series_ticker: str = ""
    title: str
    sub_title: str = ""
    category: str | None = None

    markets: list[Market] | None = Field(
        default=None, description="Present only when with_nested_markets=true."
    )

    @field_validator("series_ticker", "sub_title", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("category", mode="before")
    @classmethod
    def _blank_category_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def nested_markets(self) -> list[Market]:
        return list(self.markets or [])
