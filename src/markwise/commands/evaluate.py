"""
Evaluate Command

Runs a batch evaluation of student submissions against a model answer key.
"""

import asyncio
import dataclasses
import signal
import sys
from pathlib import Path

import click
from rich.console import Console

from markwise.cli.formatting import (
    format_leaderboard,
    format_progress,
    format_results_json,
    format_statistics,
    format_student_report,
)
from markwise.core.config import AppConfig, get_config
from markwise.core.exceptions import MarkwiseException
from markwise.data.loading import load_model_key, load_submissions
from markwise.evaluation.aggregator import BatchAggregator
from markwise.evaluation.batch import evaluate_batch
from markwise.scoring.http_client import HttpScorerClient
from markwise.utils.async_helpers import CancellationToken
from markwise.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


def _apply_overrides(config: AppConfig, scorer_url, timeout, legacy_matching) -> AppConfig:
    scorer = config.scorer
    if scorer_url:
        scorer = dataclasses.replace(scorer, base_url=scorer_url)
    if timeout is not None:
        scorer = dataclasses.replace(scorer, timeout=timeout)

    evaluation = config.evaluation
    if legacy_matching:
        evaluation = dataclasses.replace(evaluation, legacy_question_matching=True)

    return dataclasses.replace(config, scorer=scorer, evaluation=evaluation)


@click.command()
@click.option('--model-key', '-m', required=True, type=click.Path(exists=True, dir_okay=False),
              help='Model answer key (JSON, YAML or CSV)')
@click.option('--submissions', '-s', required=True, type=click.Path(exists=True, dir_okay=False),
              help='Student submissions (JSON or YAML)')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write results as JSON to this file')
@click.option('--save', is_flag=True, help='Write results as JSON into the configured export directory')
@click.option('--format', 'output_format', type=click.Choice(['terminal', 'json']),
              default=None, help='Output format')
@click.option('--legacy-matching', is_flag=True, help='Match questions one model entry at a time, '
              'asking the scorer when local matching fails')
@click.option('--scorer-url', help='Semantic scorer base URL')
@click.option('--timeout', type=float, help='Scorer request timeout in seconds')
@click.option('--details', is_flag=True, help='Show a per-question report for every student')
@click.pass_context
def evaluate(ctx, model_key, submissions, output, save, output_format, legacy_matching,
             scorer_url, timeout, details):
    """Evaluate student submissions against a model answer key.

    \b
    EXAMPLES:

    markwise evaluate -m key.json -s students.json
    markwise evaluate -m key.csv -s students.yaml --format json -o results.json
    markwise evaluate -m key.json -s students.json --scorer-url http://scorer:8000
    markwise evaluate -m key.json -s students.json --save
    """
    base_config = (ctx.obj or {}).get('config') or get_config()
    config = _apply_overrides(base_config, scorer_url, timeout, legacy_matching)
    output_format = output_format or config.reporting.default_format
    if save and not output:
        output = str(Path(config.reporting.export_path) / f"{Path(model_key).stem}_results.json")

    async def run_evaluation(on_progress=None):
        model_entries = load_model_key(model_key)
        students = load_submissions(submissions)
        cancel_token = CancellationToken()

        def signal_handler(signum, frame):
            logger.info(f"Received signal {signum}, cancelling evaluation")
            cancel_token.cancel(reason="interrupted by user")

        previous_handler = signal.signal(signal.SIGINT, signal_handler)
        try:
            async with HttpScorerClient(config=config.scorer) as client:
                return await evaluate_batch(
                    students, model_entries, client,
                    config=config.evaluation,
                    cancel_token=cancel_token,
                    on_progress=on_progress,
                    session_id=Path(model_key).stem,
                )
        finally:
            signal.signal(signal.SIGINT, previous_handler)

    try:
        if output_format == 'terminal':
            with format_progress() as progress:
                task = progress.add_task("Evaluating students", total=None)

                def update_progress(state):
                    progress.update(task, total=state.total_students,
                                    completed=state.completed_students,
                                    description=f"Evaluating {state.current_student or 'students'}")

                batch = asyncio.run(run_evaluation(update_progress))
        else:
            batch = asyncio.run(run_evaluation())

        aggregator = BatchAggregator(config.evaluation.good_threshold,
                                     config.evaluation.average_threshold)
        stats = aggregator.aggregate(batch)

        if output:
            output_path = Path(output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(format_results_json(batch, stats), encoding='utf-8')
            logger.info(f"Results written to {output_path}")

        if output_format == 'json':
            click.echo(format_results_json(batch, stats))
        else:
            if batch.cancelled:
                console.print(f"[yellow]Evaluation cancelled after {len(batch)} students[/yellow]")
            console.print(format_statistics(stats))
            console.print(format_leaderboard(stats.leaderboard,
                                             config.evaluation.good_threshold,
                                             config.evaluation.average_threshold))
            if details:
                for evaluation in batch:
                    console.print(format_student_report(aggregator.student_report(evaluation)))
            if output:
                console.print(f"[green]Results saved to {output}[/green]")

    except MarkwiseException as e:
        console.print(f"[red]Error: {str(e)}[/red]")
        logger.error(f"Evaluation failed: {str(e)}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Evaluation failed: {str(e)}[/red]")
        logger.exception("Evaluation failed")
        sys.exit(1)
