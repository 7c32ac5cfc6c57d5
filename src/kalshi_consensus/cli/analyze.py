"""Consensus commands: analyze one market or scan the busiest ones."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Annotated

import typer
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from kalshi_consensus.agent.consensus import build_engine
from kalshi_consensus.agent.orchestrator import ConsensusService
from kalshi_consensus.analysis.scanner import BatchScanner
from kalshi_consensus.analysis.top_picks import TopPicks
from kalshi_consensus.api.exceptions import KalshiError
from kalshi_consensus.cli.client_factory import market_client
from kalshi_consensus.cli.utils import (
    console,
    exit_kalshi_api_error,
    format_edge,
    format_percent,
    run_async,
)
from kalshi_consensus.constants import (
    DEFAULT_EVENTS_LIMIT,
    DEFAULT_SCAN_CANDIDATES,
    DEFAULT_SCAN_DELAY_SECONDS,
    TOP_PICKS_LIMIT,
)

if TYPE_CHECKING:
    from kalshi_consensus.agent.consensus import ConsensusEngine
    from kalshi_consensus.agent.schemas import ConsensusResult, Recommendation

_RECOMMENDATION_STYLES = {
    "strong_buy_yes": "bold green",
    "buy_yes": "green",
    "strong_buy_no": "bold red",
    "buy_no": "red",
}


def _styled(recommendation: Recommendation) -> str:
    style = _RECOMMENDATION_STYLES.get(recommendation.value, "dim")
    return f"[{style}]{recommendation.value}[/{style}]"


def _build_engine_or_exit(backend: str | None, taxonomy: str | None) -> ConsensusEngine:
    from kalshi_consensus.agent.taxonomy import get_taxonomy

    try:
        return build_engine(backend=backend, taxonomy=get_taxonomy(taxonomy))
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None


def render_result(result: ConsensusResult) -> None:
    market = result.market
    console.print(f"\n[bold]{market.title}[/bold] [dim]({market.ticker})[/dim]")
    if market.outcome_label:
        console.print(f"[dim]{market.outcome_label}[/dim]")

    table = Table(title="Provider Estimates")
    table.add_column("Provider", style="cyan")
    table.add_column("Estimate", justify="right")
    table.add_column("Confidence", justify="right")
    table.add_column("Action")
    table.add_column("Status", style="dim")
    table.add_column("Reasoning", style="white")
    for estimate in result.analyses:
        table.add_row(
            estimate.provider.value,
            format_percent(estimate.estimated_probability),
            format_percent(estimate.confidence),
            estimate.recommendation.value,
            estimate.status.value,
            estimate.reasoning[:80] + ("..." if len(estimate.reasoning) > 80 else ""),
        )
    console.print(table)

    console.print(f"Market implied:   {format_percent(result.implied_probability)}")
    console.print(f"Consensus:        {format_percent(result.consensus_probability)}")
    console.print(f"Confidence:       {format_percent(result.consensus_confidence)}")
    console.print(f"Edge:             {format_edge(result.edge_percentage)}")
    console.print(f"Mispricing score: {result.mispricing_score:.2f}")
    console.print(f"Recommendation:   {_styled(result.recommendation)}")
    if not result.has_signal:
        console.print("[yellow]No provider returned a usable estimate.[/yellow]")


def render_ranking(results: list[ConsensusResult], *, title: str) -> None:
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Ticker", style="cyan", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Implied", justify="right")
    table.add_column("Consensus", justify="right")
    table.add_column("Edge", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Action")
    for rank, result in enumerate(results, start=1):
        title_text = result.market.title
        table.add_row(
            str(rank),
            result.ticker,
            title_text[:45] + ("..." if len(title_text) > 45 else ""),
            format_percent(result.implied_probability),
            format_percent(result.consensus_probability),
            format_edge(result.edge_percentage),
            f"{result.mispricing_score:.2f}",
            _styled(result.recommendation),
        )
    console.print(table)


def analyze_market(
    ticker: Annotated[str, typer.Argument(help="Market ticker to analyze.")],
    backend: Annotated[
        str | None, typer.Option("--backend", help="Generator backend (live/mock).")
    ] = None,
    taxonomy: Annotated[
        str | None, typer.Option("--taxonomy", help="five_way or three_way.")
    ] = None,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Ask every provider about one market and print the consensus."""
    engine = _build_engine_or_exit(backend, taxonomy)

    async def _analyze() -> ConsensusResult:
        async with market_client() as client:
            service = ConsensusService(kalshi_client=client, engine=engine)
            return await service.analyze_ticker(ticker)

    try:
        result = run_async(_analyze())
    except KalshiError as e:
        exit_kalshi_api_error(e)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    if output_json:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return
    render_result(result)


def scan_markets(
    limit: Annotated[
        int, typer.Option("--limit", "-n", help="Markets to analyze (top by volume).")
    ] = DEFAULT_SCAN_CANDIDATES,
    top: Annotated[int, typer.Option("--top", help="Top picks to show.")] = TOP_PICKS_LIMIT,
    events: Annotated[
        int, typer.Option("--events", help="Events to fetch (one page).")
    ] = DEFAULT_EVENTS_LIMIT,
    min_volume: Annotated[
        int, typer.Option("--min-volume", help="Minimum total volume (0 disables).")
    ] = 0,
    delay: Annotated[
        float, typer.Option("--delay", help="Seconds to pause between batches.")
    ] = DEFAULT_SCAN_DELAY_SECONDS,
    backend: Annotated[
        str | None, typer.Option("--backend", help="Generator backend (live/mock).")
    ] = None,
    taxonomy: Annotated[
        str | None, typer.Option("--taxonomy", help="five_way or three_way.")
    ] = None,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Scan the highest-volume open markets and rank them by mispricing."""
    if top <= 0 or delay < 0:
        console.print("[red]Error:[/red] --top must be positive and --delay non-negative")
        raise typer.Exit(1)

    engine = _build_engine_or_exit(backend, taxonomy)
    picks = TopPicks(limit=top)

    async def _scan() -> list[ConsensusResult]:
        async with market_client() as client:
            service = ConsensusService(
                kalshi_client=client,
                engine=engine,
                scanner=BatchScanner(engine, delay_seconds=delay),
            )
            candidates = await service.find_scan_candidates(
                events_limit=events, candidates=limit, min_volume=min_volume
            )
            if not candidates:
                return []

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
                disable=output_json,
            ) as progress:
                task = progress.add_task(f"Analyzing {len(candidates)} markets...", total=None)
                done = 0

                def _on_batch(batch: list[ConsensusResult]) -> None:
                    nonlocal done
                    done += len(batch)
                    picks.extend(batch)
                    progress.update(
                        task, description=f"Analyzed {done}/{len(candidates)} markets..."
                    )

                return await service.scan(candidates, on_batch=_on_batch)

    try:
        results = run_async(_scan())
    except KalshiError as e:
        exit_kalshi_api_error(e)

    if output_json:
        payload = {
            "results": [r.model_dump(mode="json") for r in results],
            "top_picks": [r.ticker for r in picks.ranked()],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    if not results:
        console.print("[yellow]No markets to scan.[/yellow]")
        return

    render_ranking(results, title=f"Scan Results ({len(results)} markets)")
    ranked_picks = picks.ranked()
    if ranked_picks:
        render_ranking(ranked_picks, title="Top Picks")
    else:
        console.print("[dim]No actionable picks.[/dim]")
