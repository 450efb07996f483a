"""Typer CLI definition for embedcompare."""

import asyncio
import logging
from pathlib import Path

import typer

from . import config as settings
from .comparison.models import BoxPlotStats, DistanceEntry, EntryState
from .comparison.orchestrator import ComparisonOrchestrator
from .core import calculate_distance, compare_csv, list_models
from .embeddings.distance import format_embedding
from .errors import ComparisonError, ImportFormatError, ProviderError
from .providers import ModelRouter

app = typer.Typer(help="Compare text pairs across embedding models")

TEXT_PREVIEW = 30


def configure_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


def read_embedding_argument(value: str) -> str:
    """Return embedding text, reading it from a file for ``@path`` values."""
    if value.startswith("@"):
        return Path(value[1:]).read_text()
    return value


def preview(text: str, width: int = TEXT_PREVIEW) -> str:
    text = " ".join(text.split())
    return text if len(text) <= width else text[: width - 3] + "..."


def format_entry(entry: DistanceEntry, applicable: bool) -> str:
    """Render one slot; blank pairs show n/a, distinct from errors."""
    if not applicable:
        return "n/a"
    if entry.state is EntryState.VALUE:
        return f"{entry.value:.4f}"
    if entry.state is EntryState.ERROR:
        return "error"
    if entry.state is EntryState.PENDING:
        return "..."
    return "-"


def format_stats(stats: BoxPlotStats | None) -> str:
    if stats is None:
        return "no data"
    return (
        f"min {stats.min:.4f}  q1 {stats.q1:.4f}  median {stats.median:.4f}  "
        f"q3 {stats.q3:.4f}  max {stats.max:.4f}  (n={stats.count})"
    )


def print_results(orchestrator: ComparisonOrchestrator) -> None:
    models = orchestrator.active_models()
    typer.echo("\t".join(["#", "Query Text", "Stored Text", "Related", *models]))

    errors = []
    for position, pair in enumerate(orchestrator.pairs, 1):
        applicable = orchestrator.is_applicable(pair.index)
        cells = [
            str(position),
            preview(pair.query_text),
            preview(pair.stored_text),
            "yes" if orchestrator.labels.get(pair.index) else "no",
        ]
        for model in models:
            entry = orchestrator.entry(pair.index, model)
            cells.append(format_entry(entry, applicable))
            if entry.state is EntryState.ERROR:
                errors.append(f"  row {position}, {model}: {entry.reason}")
        typer.echo("\t".join(cells))

    if errors:
        typer.echo("\nErrors:", err=True)
        for line in errors:
            typer.echo(line, err=True)

    for summary in orchestrator.summary():
        threshold = (
            f"{summary.threshold:.4f}" if summary.threshold is not None else "unset"
        )
        typer.echo(f"\n=== {summary.model} ===")
        typer.echo(f"Optimal threshold: {threshold}")
        typer.echo(f"Related:   {format_stats(summary.related)}")
        typer.echo(f"Unrelated: {format_stats(summary.unrelated)}")


@app.command()
def compare(
    input_file: Path = typer.Argument(
        ..., help="CSV with Query Text, Stored Text and Related columns"
    ),
    model: list[str] | None = typer.Option(
        None, "-m", "--model", help="Model to compare (repeatable, from config if omitted)"
    ),
    output: Path | None = typer.Option(
        None, "-o", "--output", help="Export distances and thresholds to CSV"
    ),
    report: Path | None = typer.Option(
        None, "--report", help="Write an HTML box-plot report"
    ),
    debug: bool = typer.Option(False, "--debug", help="Show verbose error messages"),
) -> None:
    """Compute cosine distances and thresholds for every pair and model."""
    configure_logging(debug)

    # Explicit models run without a config file
    config = None
    if not model or settings.CONFIG_PATH.exists():
        config = settings.load_config()
    models = settings.parse_slots(model) if model else config.models.slots
    provider = ModelRouter.from_config(config) if config else ModelRouter()

    try:
        orchestrator = asyncio.run(
            compare_csv(
                input_file,
                models,
                provider,
                output_path=output,
                report_path=report,
            )
        )
    except ImportFormatError as e:
        if debug:
            typer.echo(f"Debug - Import error: {e!r}", err=True)
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    except ValueError as e:
        if debug:
            typer.echo(f"Debug - Input error: {e!r}", err=True)
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    except OSError as e:
        if debug:
            typer.echo(f"Debug - File system error: {e!r}", err=True)
        else:
            typer.echo(f"Error: Failed to write output: {e}", err=True)
        raise typer.Exit(1) from None
    except Exception as e:
        if debug:
            typer.echo(f"Debug - Unexpected error: {e!r}", err=True)
        else:
            typer.echo("Error: An unexpected error occurred", err=True)
        raise typer.Exit(1) from None

    print_results(orchestrator)

    if output:
        typer.echo(f"\nResults saved to {output}")
    if report:
        typer.echo(f"Report saved to {report}")
        if config and config.report.open_browser:
            typer.launch(str(report))


@app.command()
def distance(
    embedding_a: str = typer.Argument(..., help="JSON array, or @file"),
    embedding_b: str = typer.Argument(..., help="JSON array, or @file"),
    debug: bool = typer.Option(False, "--debug", help="Show verbose error messages"),
) -> None:
    """Calculate cosine distance between two pasted embeddings."""
    configure_logging(debug)

    try:
        result = calculate_distance(
            read_embedding_argument(embedding_a),
            read_embedding_argument(embedding_b),
        )
    except OSError as e:
        typer.echo(f"Error: Failed to read embedding file: {e}", err=True)
        raise typer.Exit(1) from None
    except ComparisonError as e:
        if debug:
            typer.echo(f"Debug - Distance error: {e!r}", err=True)
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    typer.echo(f"Distance: {result.distance:.4f}")
    typer.echo(f"Similarity: {result.similarity:.2f}%")
    typer.echo(f"Dimensions: {result.dimensions}")


@app.command()
def models() -> None:
    """List supported embedding models."""
    for spec in list_models():
        typer.echo(f"{spec.model_id}: {spec.label}")


@app.command()
def embed(
    text: str = typer.Argument(..., help="Text to embed"),
    model: str = typer.Option(..., "-m", "--model", help="Model to embed with"),
    debug: bool = typer.Option(False, "--debug", help="Show verbose error messages"),
) -> None:
    """Generate one embedding and print a preview."""
    configure_logging(debug)
    provider = ModelRouter.from_config(settings.load_config())

    try:
        embedding = asyncio.run(provider.generate(text, model))
    except (ProviderError, ValueError) as e:
        if debug:
            typer.echo(f"Debug - Provider error: {e!r}", err=True)
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    typer.echo(f"{len(embedding)}-dimensional vector:")
    typer.echo(format_embedding(embedding))


@app.command("init-config")
def init_config(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config"),
) -> None:
    """Write the default config file."""
    if settings.CONFIG_PATH.exists() and not force:
        typer.echo(f"Config already exists at {settings.CONFIG_PATH}")
        raise typer.Exit(0)
    typer.echo(f"Config written to {settings.generate_config()}")
