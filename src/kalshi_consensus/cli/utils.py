"""Shared utilities for CLI commands (console output, async helpers, error exits)."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, NoReturn, TypeVar

import typer
from rich.console import Console

if TYPE_CHECKING:
    from collections.abc import Coroutine

    from kalshi_consensus.api.exceptions import KalshiError

console = Console()

T = TypeVar("T")


def run_async(coro: Coroutine[object, object, T]) -> T:
    """Run a coroutine from a sync CLI command.

    Raises:
        typer.Exit: With code 130 on KeyboardInterrupt (standard SIGINT exit code).
    """
    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        raise typer.Exit(130) from None


def exit_kalshi_api_error(error: KalshiError) -> NoReturn:
    """Print a Kalshi error in the CLI's house style and exit with code 1."""
    from kalshi_consensus.api.exceptions import KalshiAPIError, MarketNotFoundError

    if isinstance(error, MarketNotFoundError):
        console.print(f"[red]Error:[/red] Market not found: {error.ticker}")
    elif isinstance(error, KalshiAPIError):
        console.print(f"[red]API Error {error.status_code}:[/red] {error.message}")
    else:
        console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(1)


def format_percent(fraction: float) -> str:
    """0.4512 -> '45.1%'."""
    return f"{fraction * 100:.1f}%"


def format_edge(edge_percentage: float) -> str:
    """Signed percentage points, e.g. '+12.5pp'."""
    return f"{edge_percentage:+.1f}pp"
