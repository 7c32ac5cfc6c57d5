"""
CLI application for Kalshi Consensus.

Lists markets, analyzes a single market across every provider, and scans the
busiest markets for consensus mispricing.
"""

from __future__ import annotations

from typing import Annotated

import typer
from dotenv import find_dotenv, load_dotenv

from kalshi_consensus.cli.analyze import analyze_market, scan_markets
from kalshi_consensus.cli.market import markets_list
from kalshi_consensus.cli.utils import console

app = typer.Typer(
    name="kalshi-consensus",
    help="Kalshi Consensus CLI - multi-model probability estimates for prediction markets.",
    add_completion=False,
)

app.command("markets")(markets_list)
app.command("analyze")(analyze_market)
app.command("scan")(scan_markets)


@app.callback()
def main(
    environment: Annotated[
        str | None,
        typer.Option(
            "--env",
            "-e",
            help="API environment (prod/demo). Defaults to KALSHI_ENVIRONMENT or prod.",
            show_default=False,
        ),
    ] = None,
) -> None:
    """Kalshi Consensus CLI."""
    import os

    from kalshi_consensus.api.config import (
        ENVIRONMENT_ENV_VAR,
        resolve_environment,
        set_environment,
    )

    load_dotenv(find_dotenv(usecwd=True))

    try:
        set_environment(resolve_environment(environment))
    except ValueError:
        requested = environment or os.getenv(ENVIRONMENT_ENV_VAR)
        console.print(
            f"[red]Error:[/red] Invalid environment '{requested}'. "
            "Expected 'prod' or 'demo'."
        )
        raise typer.Exit(1) from None


@app.command()
def version() -> None:
    """Show version information."""
    from kalshi_consensus import __version__

    console.print(f"kalshi-consensus v{__version__}")
