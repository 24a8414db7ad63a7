"""
Review Engine - Command Line Interface

Inspect the review policy from a terminal:

    # Does one extraction need review?
    review-engine gate --method ocr --confidence 0.65

    # Append OCR guidance to an extraction prompt
    review-engine gate --method hybrid --confidence 0.5 --prompt base_prompt.txt

    # Gate a batch of extraction records (YAML or JSON list)
    review-engine batch extractions.yaml

    # Print the keyboard legend
    review-engine shortcuts
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import EngineConfig, load_config
from .decision import ConfidenceGate, ExtractionMetadata, ExtractionMethod, enhance_prompt
from .errors import ReviewEngineError
from .review import help_groups


# Configure logging
def setup_logging(verbose: bool = False, log_file: Optional[Path] = None):
    """Configure loguru logging."""
    # Remove default handler
    logger.remove()

    # Console logging
    log_level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=log_level,
        colorize=True
    )

    # File logging
    if log_file:
        logger.add(
            log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}",
            level="DEBUG",
            rotation="10 MB"
        )


def _load_records(path: Path) -> list:
    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix.lower() == '.json':
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if isinstance(data, dict):
        data = data.get('documents', [])
    if not isinstance(data, list):
        raise click.BadParameter(f"{path} must contain a list of extraction records")
    return data


@click.group()
@click.option(
    '--config', '-c',
    'config_path',
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help='Path to engine.yaml configuration file'
)
@click.option(
    '--verbose', '-v',
    is_flag=True,
    help='Enable verbose logging'
)
@click.option(
    '--log-file',
    type=click.Path(path_type=Path),
    default=None,
    help='Write logs to file'
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool, log_file: Optional[Path]):
    """Review Engine - confidence gating and review shortcuts."""
    setup_logging(verbose=verbose, log_file=log_file)

    try:
        ctx.obj = load_config(config_path)
    except ReviewEngineError as e:
        Console(stderr=True).print(f"[bold red]Error: {e}[/]")
        raise SystemExit(1)


@cli.command()
@click.option(
    '--method', '-m',
    type=click.Choice([m.value for m in ExtractionMethod]),
    required=True,
    help='How the document text was extracted'
)
@click.option(
    '--confidence',
    type=float,
    required=True,
    help='Extraction confidence between 0 and 1'
)
@click.option(
    '--prompt', '-p',
    'prompt_path',
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help='Base extraction prompt to enhance with OCR guidance'
)
@click.option('--json', 'as_json', is_flag=True, help='Print the decision as JSON')
@click.pass_obj
def gate(config: EngineConfig, method: str, confidence: float, prompt_path: Optional[Path], as_json: bool):
    """Decide whether one extraction needs human review."""
    console = Console()

    try:
        meta = config.parse_metadata({'extraction_method': method, 'confidence': confidence})
    except ReviewEngineError as e:
        console.print(f"[bold red]Error: {e}[/]")
        raise SystemExit(1)

    outcome = ConfidenceGate(config.review_threshold).evaluate(meta)

    if as_json:
        click.echo(json.dumps(outcome.to_dict(), indent=2))
        return

    style = "bold yellow" if outcome.requires_review else "bold green"
    console.print(f"[{style}]{outcome.display_name}[/] "
                  f"({meta.extraction_method.display_name}, {outcome.confidence_percent}%)")

    if outcome.justification:
        console.print(outcome.justification)

    if prompt_path:
        base_prompt = prompt_path.read_text(encoding='utf-8')
        console.print(Panel(enhance_prompt(base_prompt, meta), title="Enhanced prompt"))
    elif outcome.guidance:
        console.print(Panel(outcome.guidance, title="OCR guidance"))


@cli.command()
@click.argument('records_path', type=click.Path(exists=True, path_type=Path))
@click.option('--json', 'as_json', is_flag=True, help='Print decisions as JSON')
@click.pass_obj
def batch(config: EngineConfig, records_path: Path, as_json: bool):
    """
    Gate a list of extraction records.

    RECORDS_PATH is a YAML or JSON list of
    {id, extraction_method, confidence} records.
    """
    console = Console()
    review_gate = ConfidenceGate(config.review_threshold)

    results = []
    for index, record in enumerate(_load_records(records_path)):
        doc_id = str(record.get('id', index + 1))
        try:
            meta = config.parse_metadata(record)
        except ReviewEngineError as e:
            logger.warning(f"Skipping {doc_id}: {e}")
            results.append({'id': doc_id, 'error': str(e)})
            continue
        results.append({'id': doc_id, **review_gate.evaluate(meta).to_dict()})

    if as_json:
        click.echo(json.dumps(results, indent=2))
        return

    table = Table(title="Review Gate")

    table.add_column("Document", style="cyan")
    table.add_column("Method")
    table.add_column("Confidence", justify="right")
    table.add_column("Decision", style="bold")
    table.add_column("Reason")

    for result in results:
        if 'error' in result:
            table.add_row(result['id'], "", "", "[red]✗ Invalid", result['error'])
            continue

        decision = "[yellow]⚠ Review" if result['requires_review'] else "[green]✓ Accept"
        table.add_row(
            result['id'],
            result['extraction_method'],
            f"{result['confidence_percent']}%",
            decision,
            result['justification'] or "",
        )

    console.print(table)

    flagged = sum(1 for r in results if r.get('requires_review'))
    invalid = sum(1 for r in results if 'error' in r)

    console.print()
    console.print(f"[bold]Total:[/] {len(results)} documents")
    console.print(f"[bold yellow]Needs review:[/] {flagged}")
    if invalid:
        console.print(f"[bold red]Invalid:[/] {invalid}")


@cli.command()
@click.option('--json', 'as_json', is_flag=True, help='Print the legend as JSON')
def shortcuts(as_json: bool):
    """Print the keyboard shortcut legend."""
    groups = help_groups()

    if as_json:
        click.echo(json.dumps([g.to_dict() for g in groups], indent=2, ensure_ascii=False))
        return

    console = Console()
    for group in groups:
        table = Table(title=group.title, show_header=False, title_justify="left")
        table.add_column("Keys", style="bold cyan")
        table.add_column("Action")
        for info in group.shortcuts:
            table.add_row(" + ".join(info.keys), info.description)
        console.print(table)


def main():
    cli()


if __name__ == "__main__":
    main()
