"""Markets command: list open markets from event listings."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Annotated

import typer
from rich.table import Table

from kalshi_consensus.analysis.markets import (
    MarketSort,
    filter_high_volume_markets,
    search_markets,
    sort_markets,
)
from kalshi_consensus.api.exceptions import KalshiError
from kalshi_consensus.cli.client_factory import market_client
from kalshi_consensus.cli.utils import console, exit_kalshi_api_error, format_percent, run_async
from kalshi_consensus.constants import DEFAULT_EVENTS_LIMIT, DEFAULT_MARKETS_LIMIT

if TYPE_CHECKING:
    from kalshi_consensus.agent.schemas import MarketSnapshot


async def fetch_listed_markets(*, events_limit: int) -> list[MarketSnapshot]:
    """Markets nested under the first page of open events."""
    from kalshi_consensus.agent.providers.kalshi import fetch_event_snapshots, flatten_markets

    async with market_client() as client:
        events = await fetch_event_snapshots(client, limit=events_limit)
    return flatten_markets(events)


def render_markets_table(markets: list[MarketSnapshot], *, title: str) -> None:
    table = Table(title=title)
    table.add_column("Ticker", style="cyan", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Category", style="dim")
    table.add_column("Implied", style="green", justify="right")
    table.add_column("Volume", justify="right")
    table.add_column("24h", justify="right")
    table.add_column("Closes", style="dim")

    for market in markets:
        label = market.outcome_label
        name = f"{market.title} ({label})" if label else market.title
        table.add_row(
            market.ticker,
            name[:60] + ("..." if len(name) > 60 else ""),
            market.category,
            format_percent(market.implied_probability),
            f"{market.volume:,}",
            f"{market.volume_24h:,}",
            market.close_time.strftime("%Y-%m-%d"),
        )
    console.print(table)


def markets_list(
    limit: Annotated[
        int, typer.Option("--limit", "-n", help="Maximum markets to show.")
    ] = DEFAULT_MARKETS_LIMIT,
    sort: Annotated[
        MarketSort, typer.Option("--sort", "-s", help="Sort order.")
    ] = MarketSort.VOLUME,
    category: Annotated[
        str | None, typer.Option("--category", "-c", help="Only this event category.")
    ] = None,
    search: Annotated[
        str | None, typer.Option("--search", "-q", help="Match title or outcome label.")
    ] = None,
    min_volume: Annotated[
        int, typer.Option("--min-volume", help="Minimum total volume (0 disables).")
    ] = 0,
    events: Annotated[
        int, typer.Option("--events", help="Events to fetch (one page).")
    ] = DEFAULT_EVENTS_LIMIT,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List open markets, sorted and filtered."""
    try:
        markets = run_async(fetch_listed_markets(events_limit=events))
    except KalshiError as e:
        exit_kalshi_api_error(e)

    if min_volume > 0:
        markets = filter_high_volume_markets(markets, min_volume)
    markets = search_markets(markets, term=search, category=category)
    markets = sort_markets(markets, sort)[: max(0, limit)]

    if output_json:
        typer.echo(json.dumps([m.model_dump(mode="json") for m in markets], indent=2))
        return

    if not markets:
        console.print("[yellow]No markets match.[/yellow]")
        return

    render_markets_table(markets, title=f"Markets (sort={sort.value})")
