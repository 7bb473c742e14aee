"""
Stats Command

Reloads an exported batch and prints its statistics.
"""

import json
import sys

import click
from rich.console import Console

from markwise.cli.formatting import (
    format_leaderboard,
    format_statistics,
    format_student_report,
)
from markwise.core.config import get_config
from markwise.evaluation.aggregator import BatchAggregator
from markwise.evaluation.types import BatchEvaluation
from markwise.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


def load_batch(path: str) -> BatchEvaluation:
    """Read a batch exported by ``markwise evaluate --output``."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    # Exports wrap the batch alongside its statistics
    if isinstance(data, dict) and 'batch' in data:
        data = data['batch']
    return BatchEvaluation.from_dict(data)


@click.command()
@click.argument('results', type=click.Path(exists=True, dir_okay=False))
@click.option('--student', 'student_index', type=int,
              help='Show the per-question report for the student at this position (1-based)')
@click.pass_context
def stats(ctx, results, student_index):
    """Show statistics for an exported evaluation.

    \b
    EXAMPLES:

    markwise stats results.json
    markwise stats results.json --student 3
    """
    config = (ctx.obj or {}).get('config') or get_config()

    try:
        batch = load_batch(results)
        aggregator = BatchAggregator(config.evaluation.good_threshold,
                                     config.evaluation.average_threshold)

        if student_index is not None:
            if not 1 <= student_index <= len(batch):
                console.print(f"[red]No student at position {student_index} "
                              f"(batch has {len(batch)})[/red]")
                sys.exit(1)
            console.print(format_student_report(aggregator.student_report(batch[student_index - 1])))
            return

        batch_stats = aggregator.aggregate(batch)
        console.print(format_statistics(batch_stats))
        console.print(format_leaderboard(batch_stats.leaderboard,
                                         config.evaluation.good_threshold,
                                         config.evaluation.average_threshold))

    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        console.print(f"[red]Could not read results from {results}: {str(e)}[/red]")
        logger.error(f"Failed to load results {results}: {str(e)}")
        sys.exit(1)
