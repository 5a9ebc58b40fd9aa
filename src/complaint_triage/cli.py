"""Command-line interface for complaint triage.

Provides ``tokens``, ``classify``, ``evaluate`` and ``inspect`` commands
with rich terminal output using the ``click`` and ``rich`` libraries.

Usage::

    complaint-triage tokens "My phone was stolen from the bus"
    complaint-triage classify --examples examples.json "Lost my passport"
    complaint-triage evaluate examples.json --folds 5
    complaint-triage inspect --examples examples.json --top 10
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .classifier import ComplaintClassifier
from .config import Settings
from .evaluation import ACCURACY_THRESHOLD, cross_validate, mean_accuracy
from .evaluation import evaluate as evaluate_examples
from .models import Label, ModelState, TrainingExample, TrainingOutcome
from .orchestrator import initialize_model
from .pipeline import source_from_settings
from .preprocessing import preprocess
from .sources import JsonFileRecordSource, RecordSource
from .trainer import Trainer

console = Console()


def _label_style(label: Label) -> str:
    """Return a rich style string for a label."""
    return "bold red" if label is Label.FIR else "bold green"


def _load_examples(path: Path) -> list[TrainingExample]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise click.BadParameter(f"{path} must contain a JSON array of examples")
    return [TrainingExample.from_mapping(item) for item in data if isinstance(item, dict)]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _train(
    state: ModelState,
    settings: Settings,
    examples: Optional[Path],
    records: Optional[Path],
    mongo: bool,
) -> TrainingOutcome:
    """Train ``state`` from whichever data the options point at."""
    if examples is not None:
        return Trainer(state).fit_examples(_load_examples(examples))

    source: Optional[RecordSource] = None
    if records is not None:
        source = JsonFileRecordSource(records)
    elif mongo:
        source = source_from_settings(settings)
        if source is None:
            raise click.UsageError("--mongo requires COMPLAINT_TRIAGE_MONGO_URI to be set")

    return asyncio.run(initialize_model(
        state,
        source,
        limit=settings.fetch_limit,
        timeout=settings.fetch_timeout,
        attempts=settings.fetch_attempts,
    ))


_examples_option = click.option(
    "--examples", "-e", type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None, help="JSON array of {text, label} examples to train from.",
)
_records_option = click.option(
    "--records", "-r", type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None, help="JSON array of {description, category} records to train from.",
)
_mongo_option = click.option(
    "--mongo", is_flag=True, default=False,
    help="Train from the configured MongoDB complaint collection.",
)
_output_option = click.option(
    "--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
    help="Output format.",
)


@click.group()
@click.version_option(package_name="complaint-triage")
@click.option("--log-level", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Logging level (overrides COMPLAINT_TRIAGE_LOG_LEVEL).")
@click.pass_context
def main(ctx: click.Context, log_level: Optional[str]) -> None:
    """Complaint triage: label complaints as FIR or non-FIR.

    Trains a small naive-Bayes model from labeled examples, stored
    complaint records, or built-in seed keywords, then classifies
    complaint descriptions.
    """
    load_dotenv()
    try:
        settings = Settings.from_env()
    except ValueError as e:
        console.print(f"[bold red]Error:[/] {e}")
        sys.exit(1)
    _configure_logging((log_level or settings.log_level).upper())
    ctx.obj = settings


@main.command()
@click.argument("text")
@_output_option
def tokens(text: str, output: str) -> None:
    """Show the normalized tokens for TEXT.

    Example: complaint-triage tokens "My phone was stolen from the bus"
    """
    toks = preprocess(text)
    if output == "json":
        click.echo(json.dumps(toks))
    else:
        console.print(" ".join(f"[cyan]{t}[/]" for t in toks) or "[dim](no tokens)[/]")


@main.command()
@click.argument("texts", nargs=-1, required=True)
@_examples_option
@_records_option
@_mongo_option
@_output_option
@click.pass_obj
def classify(
    settings: Settings,
    texts: tuple[str, ...],
    examples: Optional[Path],
    records: Optional[Path],
    mongo: bool,
    output: str,
) -> None:
    """Train a model, then classify one or more complaint TEXTS.

    Without --examples, --records or --mongo the seed keywords are used.

    Example: complaint-triage classify --examples examples.json "Lost my passport"
    """
    state = ModelState()
    with console.status("[bold blue]Training model...", spinner="dots"):
        try:
            outcome = _train(state, settings, examples, records, mongo)
        except (OSError, ValueError) as e:
            console.print(f"[bold red]Error:[/] {e}")
            sys.exit(1)

    results = ComplaintClassifier(state).classify_batch(texts)

    if output == "json":
        click.echo(json.dumps({
            "training": outcome.to_dict(),
            "results": [dict(r.to_dict(), text=t) for t, r in zip(texts, results)],
        }, indent=2))
        return

    _render_outcome(outcome)
    table = Table(title="Classification", show_lines=True)
    table.add_column("#", justify="right", width=4)
    table.add_column("Complaint", style="white", max_width=60)
    table.add_column("Label", justify="center", width=9)
    table.add_column("P(fir)", justify="center", width=8)
    table.add_column("Tier", style="dim", width=11)

    for i, (text, result) in enumerate(zip(texts, results), 1):
        excerpt = text[:120] + ("..." if len(text) > 120 else "")
        table.add_row(
            str(i),
            excerpt,
            Text(result.label.value, style=_label_style(result.label)),
            f"{result.prob_fir:.0%}",
            result.tier,
        )

    console.print(table)
    console.print()


@main.command()
@click.argument("examples", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--folds", "-k", type=int, default=0,
              help="Also run stratified k-fold cross-validation with K folds.")
@_output_option
def evaluate(examples: Path, folds: int, output: str) -> None:
    """Train on EXAMPLES and report training-set accuracy.

    Exits with status 1 when accuracy is below the acceptance floor.

    Example: complaint-triage evaluate examples.json --folds 5
    """
    try:
        labeled = _load_examples(examples)
    except (OSError, ValueError) as e:
        console.print(f"[bold red]Error:[/] {e}")
        sys.exit(1)

    state = ModelState()
    Trainer(state).fit_examples(labeled)
    metrics = evaluate_examples(ComplaintClassifier(state), labeled)
    fold_metrics = cross_validate(labeled, k=folds) if folds >= 2 else []

    if output == "json":
        click.echo(json.dumps({
            "training": metrics.to_dict(),
            "vocab_size": state.vocab_size,
            "cross_validation": [m.to_dict() for m in fold_metrics],
        }, indent=2))
    else:
        console.print(Panel(
            metrics.summary(),
            title=f"Training-set evaluation ({len(labeled)} examples, vocab {state.vocab_size})",
            border_style="blue",
        ))
        if fold_metrics:
            console.print(
                f"Cross-validation ({len(fold_metrics)} folds): "
                f"mean accuracy [bold]{mean_accuracy(fold_metrics):.2%}[/]"
            )

    if not metrics.passes_threshold:
        console.print(
            f"[bold red]Accuracy {metrics.accuracy:.3f} below threshold "
            f"{ACCURACY_THRESHOLD}[/]"
        )
        sys.exit(1)


@main.command()
@_examples_option
@_records_option
@_mongo_option
@click.option("--top", "-n", type=int, default=10, help="Tokens to show per class.")
@click.pass_obj
def inspect(
    settings: Settings,
    examples: Optional[Path],
    records: Optional[Path],
    mongo: bool,
    top: int,
) -> None:
    """Show model statistics and the most informative tokens per class.

    Example: complaint-triage inspect --examples examples.json --top 10
    """
    state = ModelState()
    try:
        outcome = _train(state, settings, examples, records, mongo)
    except (OSError, ValueError) as e:
        console.print(f"[bold red]Error:[/] {e}")
        sys.exit(1)

    _render_outcome(outcome)
    console.print(
        f"Vocabulary: [bold]{state.vocab_size}[/] | "
        f"P(fir) prior: {state.priors['fir']:.3f} | "
        f"P(non-fir) prior: {state.priors['nonfir']:.3f}"
    )

    classifier = ComplaintClassifier(state)
    for label in Label:
        table = Table(title=f"Most informative tokens: {label.value}")
        table.add_column("Token", style="cyan")
        table.add_column("Log ratio", justify="right")
        for token, ratio in classifier.most_informative_tokens(label, top):
            table.add_row(token, f"{ratio:.3f}")
        console.print(table)
    console.print()


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_outcome(outcome: TrainingOutcome) -> None:
    """Render a one-line training summary."""
    line = (
        f"Trained from [bold]{outcome.strategy.value}[/]: "
        f"{outcome.documents} docs ({outcome.fir_documents} fir / "
        f"{outcome.nonfir_documents} non-fir), vocab {outcome.vocab_size}"
    )
    console.print(line)
    if outcome.error:
        console.print(f"  [yellow]Source failed, used seed keywords:[/] {outcome.error}")


if __name__ == "__main__":
    main()
