"""
Health Command

Connectivity check against the semantic scorer.
"""

import asyncio
import dataclasses
import sys

import click
from rich.console import Console

from markwise.cli.formatting import format_table
from markwise.core.config import get_config
from markwise.scoring.http_client import HttpScorerClient
from markwise.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


@click.command()
@click.option('--scorer-url', help='Semantic scorer base URL')
@click.option('--verbose', '-v', is_flag=True, help='Show endpoint details')
@click.pass_context
def health(ctx, scorer_url, verbose):
    """Check that the semantic scorer is reachable.

    \b
    EXAMPLES:

    markwise health
    markwise health --scorer-url http://localhost:8000 -v
    """
    config = (ctx.obj or {}).get('config') or get_config()
    scorer_config = config.scorer
    if scorer_url:
        scorer_config = dataclasses.replace(scorer_config, base_url=scorer_url)

    async def run_health_check():
        async with HttpScorerClient(config=scorer_config) as client:
            healthy = await client.health_check()
            return healthy, client.get_status() if verbose else {}

    console.print(f"[blue]Checking scorer at {scorer_config.base_url}...[/blue]")
    try:
        healthy, status = asyncio.run(run_health_check())
    except Exception as e:
        console.print(f"[red]✗ Scorer health check: ERROR - {str(e)}[/red]")
        logger.exception("Scorer health check failed")
        sys.exit(1)

    if verbose:
        rows = [{"Setting": key, "Value": value} for key, value in status.items()]
        console.print(format_table(rows, title="Scorer Endpoints"))

    if healthy:
        console.print("[green]✓ Scorer: OK[/green]")
    else:
        console.print("[red]✗ Scorer: UNAVAILABLE[/red]")
        sys.exit(1)
