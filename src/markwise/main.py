"""
CLI Entry Point

Command-line interface for markwise using Click with rich output formatting.
"""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel

from markwise import __version__
from markwise.core.config import get_config, reload_config
from markwise.core.exceptions import MarkwiseException
from markwise.utils.logging import setup_logging, get_logger

from markwise.commands.evaluate import evaluate
from markwise.commands.health import health
from markwise.commands.stats import stats

console = Console()
logger = get_logger(__name__)


@click.group(invoke_without_command=True)
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.option('--json-logs', is_flag=True, help='Emit structured JSON logs')
@click.version_option(__version__, prog_name='markwise')
@click.pass_context
def cli(ctx, config, verbose, debug, json_logs):
    """markwise - answer script evaluation against a model answer key"""
    ctx.ensure_object(dict)

    try:
        if config:
            app_config = reload_config(Path(config))
        else:
            app_config = get_config()

        if debug:
            app_config.debug = debug

        if verbose or debug:
            app_config.logging.level = 'DEBUG'
            app_config.logging.console_level = 'DEBUG'
        setup_logging(app_config, enable_json=json_logs)

        ctx.obj['config'] = app_config

        if not ctx.invoked_subcommand:
            _display_banner()

    except MarkwiseException as e:
        console.print(f"[red]Error initializing application: {str(e)}[/red]")
        sys.exit(1)


def _display_banner():
    """Display application banner."""
    banner = Panel.fit(
        "[bold blue]markwise[/bold blue]\n"
        "[dim]Answer script evaluation engine[/dim]\n\n"
        "Use --help for available commands",
        title="markwise",
        border_style="blue"
    )
    console.print(banner)


cli.add_command(evaluate)
cli.add_command(stats)
cli.add_command(health)


def main():
    """Main entry point with top-level error handling."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)
    except MarkwiseException as e:
        logger.error(f"Application error: {str(e)}")
        console.print(f"[red]Error: {str(e)}[/red]")
        sys.exit(1)


if __name__ == '__main__':
    main()
