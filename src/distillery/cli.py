"""Command-line interface for distillery."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
import structlog
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from distillery import __version__
from distillery.config import ExtractionConfig, ExtractionMode, Settings, load_settings
from distillery.dom import Document
from distillery.extractor import CandidateCollector, Extractor
from distillery.observability import configure_from_settings
from distillery.render import DEFAULT_FILTER_CATEGORIES
from distillery.scoring import NoiseClassifier, ScoringEngine

console = Console(stderr=True)
logger = structlog.get_logger(__name__)


def _read_html(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8", errors="replace")


def _load_document(source: str, url: str, title: Optional[str], selection: Optional[str],
                   selection_selector: Optional[str]) -> Document:
    if not url and source != "-":
        url = Path(source).resolve().as_uri()
    return Document.from_html(
        _read_html(source),
        url=url,
        title=title,
        selection=selection,
        selection_selector=selection_selector,
    )


def _extraction_config(settings: Settings, overrides: Dict[str, Any]) -> ExtractionConfig:
    data = settings.extraction.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return ExtractionConfig.model_validate(data)
    except ValidationError as e:
        raise click.BadParameter(str(e)) from e


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (overrides the config file)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """distillery - main-content extraction from HTML pages."""
    ctx.ensure_object(dict)
    settings = load_settings(Path(config) if config else None)
    configure_from_settings(settings.monitoring, log_level)
    ctx.obj["settings"] = settings


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option("--url", default="", help="Source URL recorded in the header")
@click.option("--title", default=None, help="Page title; defaults to <title>")
@click.option("--mode", type=click.Choice([m.value for m in ExtractionMode]), default=None, help="Threshold preset")
@click.option("--filters", "filters_file", type=click.File("r"), default=None, help="Boilerplate keyword file")
@click.option("--selection", default=None, help="Text of the user's active selection")
@click.option("--selection-selector", default=None, help="CSS selector of the selection container")
@click.option("--no-semantic", is_flag=True, help="Trust the first selector candidate")
@click.option("--no-noise-filter", is_flag=True, help="Keep candidates regardless of noise score")
@click.option("--no-boundary", is_flag=True, help="Disable related/comments section trimming")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Write output to a file")
@click.pass_context
def extract(
    ctx: click.Context,
    source: str,
    url: str,
    title: Optional[str],
    mode: Optional[str],
    filters_file: Any,
    selection: Optional[str],
    selection_selector: Optional[str],
    no_semantic: bool,
    no_noise_filter: bool,
    no_boundary: bool,
    as_json: bool,
    output: Optional[str],
) -> None:
    """Extract the main content of an HTML file (or '-' for stdin)."""
    overrides: Dict[str, Any] = {
        "mode": mode,
        "filter_keywords": filters_file.read() if filters_file else None,
    }
    if no_semantic:
        overrides["enable_semantic_analysis"] = False
    if no_noise_filter:
        overrides["enable_noise_filtering"] = False
    if no_boundary:
        overrides["enable_boundary_detection"] = False
    config = _extraction_config(ctx.obj["settings"], overrides)

    document = _load_document(source, url, title, selection, selection_selector)
    result = Extractor(config).extract(document)
    logger.info("extracted", source=source, tier=result.tier.value, length=len(result.text))

    rendered = json.dumps(result.to_dict(), indent=2, ensure_ascii=False) if as_json else result.text
    if output:
        Path(output).write_text(rendered if rendered.endswith("\n") else rendered + "\n", encoding="utf-8")
        console.print(f"[green]Saved to {output}[/green]")
    else:
        click.echo(rendered, nl=not rendered.endswith("\n"))

    if not result.ok:
        console.print("[red]No content could be extracted[/red]")
        sys.exit(1)


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option("--mode", type=click.Choice([m.value for m in ExtractionMode]), default=None, help="Threshold preset")
@click.pass_context
def candidates(ctx: click.Context, source: str, mode: Optional[str]) -> None:
    """Show every content candidate with its sub-scores."""
    config = _extraction_config(ctx.obj["settings"], {"mode": mode})
    document = _load_document(source, "", None, None, None)

    engine = ScoringEngine(NoiseClassifier(config.noise_policy), config.effective_min_content_score)
    ranked = engine.rank(CandidateCollector().collect(document.root, exhaustive=True))

    table = Table(title=f"Candidates (min score {config.effective_min_content_score:.2f}, "
                        f"noise threshold {config.effective_noise_threshold:.2f})")
    table.add_column("#", justify="right")
    table.add_column("Element", style="cyan")
    table.add_column("Source")
    table.add_column("Chars", justify="right")
    for label in ("Quality", "Density", "Structure", "Semantic", "Position", "Meta", "Noise", "Final"):
        table.add_column(label, justify="right")

    for rank, candidate in enumerate(ranked, 1):
        scores = candidate.scores
        assert scores is not None
        noisy = scores.noise_score > config.effective_noise_threshold
        final_style = "green" if engine.passes(candidate) and not noisy else "red"
        table.add_row(
            str(rank),
            candidate.describe(),
            candidate.source.value,
            str(candidate.text_length),
            f"{scores.text_quality:.2f}",
            f"{scores.content_density:.2f}",
            f"{scores.article_structure:.2f}",
            f"{scores.semantic_score:.2f}",
            f"{scores.position_score:.2f}",
            f"{scores.metadata_score:.2f}",
            f"[{'red' if noisy else 'white'}]{scores.noise_score:.2f}[/]",
            f"[{final_style}]{scores.final_score:.3f}[/]",
        )

    Console().print(table)


@cli.command()
def filters() -> None:
    """List the built-in boilerplate filter keywords by category."""
    table = Table(title="Default filter keywords")
    table.add_column("Category", style="cyan")
    table.add_column("Keywords")
    for category, keywords in DEFAULT_FILTER_CATEGORIES.items():
        table.add_row(category, ", ".join(keywords))
    Console().print(table)


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
