"""CLI interface for lracheck using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from lracheck import __description__, __version__
from lracheck.config import LogLevel, LraCheckConfig, ReportFormat, load_config
from lracheck.discovery import DiscoveryError, discover_class_models
from lracheck.models.classmodel import ClassModel, MarkerKind
from lracheck.validation import AnnotationMetadata, FailureCatalog, RuleEngine

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_DISCOVERY_FAILED = 2

app = typer.Typer(
    name="lracheck",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    LogLevel.ERROR.value: logging.ERROR,
    LogLevel.WARN.value: logging.WARNING,
    LogLevel.INFO.value: logging.INFO,
    LogLevel.DEBUG.value: logging.DEBUG,
}


def _configure_logging(level: str) -> None:
    """Route lracheck logs to stderr through rich."""
    package_logger = logging.getLogger("lracheck")
    package_logger.handlers.clear()
    package_logger.addHandler(RichHandler(console=err_console, show_path=False, markup=False))
    package_logger.setLevel(_LOG_LEVELS.get(level, logging.INFO))
    package_logger.propagate = False


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"lracheck version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """lracheck - Static checker for LRA participant callback annotations."""


def _load_settings(config: Path | None, verbose: bool) -> LraCheckConfig:
    try:
        settings = load_config(config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_DISCOVERY_FAILED)
    _configure_logging(LogLevel.DEBUG.value if verbose else settings.logging.level)
    return settings


def _discover(settings: LraCheckConfig, paths: list[Path] | None,
              fail_when_path_not_exist: bool | None) -> list[ClassModel]:
    scan_paths = [str(p) for p in paths] if paths else settings.scan.paths
    fail_missing = settings.scan.fail_when_path_not_exist if fail_when_path_not_exist is None \
        else fail_when_path_not_exist
    try:
        return discover_class_models(scan_paths, fail_missing, settings.scan.descriptor_suffix)
    except DiscoveryError as e:
        console.print(f"[red]Discovery failed:[/red] {e}", highlight=False)
        raise typer.Exit(EXIT_DISCOVERY_FAILED)


def _print_plain(text: str) -> None:
    console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)


def _output_table(catalog: FailureCatalog, sort: bool) -> None:
    findings = catalog.sorted_findings() if sort else catalog.findings
    table = Table(title="LRA annotation errors")
    table.add_column("Code", style="red")
    table.add_column("Class", style="cyan")
    table.add_column("Method", style="white")
    table.add_column("Message", style="white")
    for finding in findings:
        table.add_row(finding.code.value, finding.class_name, finding.method_name, finding.message)
    console.print(table)


@app.command()
def check(
    paths: Annotated[
        Optional[List[Path]],
        typer.Argument(help="Directories or archives holding class descriptors (default: scan.paths from config)")
    ] = None,
    fail_when_path_not_exist: Annotated[
        Optional[bool],
        typer.Option(
            "--fail-when-path-not-exist/--skip-missing-paths",
            help="Fail on a non-existent path instead of skipping it with a warning"
        )
    ] = None,
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: text, table, json (default: text)")
    ] = None,
    workers: Annotated[
        Optional[int],
        typer.Option("--workers", "-w", help="Validate classes on this many threads")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .lracheck.json)")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging")
    ] = False,
) -> None:
    """Check LRA participant classes for annotation errors."""
    settings = _load_settings(config, verbose)

    output_format = format or settings.report.format
    valid_formats = [f.value for f in ReportFormat]
    if output_format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{output_format}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(EXIT_DISCOVERY_FAILED)

    worker_count = workers if workers is not None else settings.engine.workers
    if worker_count < 1:
        console.print(f"[red]Error:[/red] --workers must be >= 1, got {worker_count}")
        raise typer.Exit(EXIT_DISCOVERY_FAILED)

    class_models = _discover(settings, paths, fail_when_path_not_exist)

    catalog = FailureCatalog()
    RuleEngine().validate_all(class_models, catalog, workers=worker_count)
    # Concurrent runs append in completion order
    sort = settings.report.sort or worker_count > 1

    if output_format == ReportFormat.JSON.value:
        _print_plain(jsonlib.dumps(catalog.to_dict(sort=sort), indent=2))
    elif catalog.is_empty():
        console.print(f"[green]No LRA annotation errors found in {len(class_models)} class(es)[/green]")
    elif output_format == ReportFormat.TABLE.value:
        _output_table(catalog, sort)
    else:
        _print_plain(f"LRA annotation errors:\n{catalog.format_report(sort=sort)}")

    raise typer.Exit(catalog.exit_code)


@app.command()
def inspect(
    paths: Annotated[
        Optional[List[Path]],
        typer.Argument(help="Directories or archives holding class descriptors (default: scan.paths from config)")
    ] = None,
    fail_when_path_not_exist: Annotated[
        Optional[bool],
        typer.Option(
            "--fail-when-path-not-exist/--skip-missing-paths",
            help="Fail on a non-existent path instead of skipping it with a warning"
        )
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .lracheck.json)")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging")
    ] = False,
) -> None:
    """Show the active callback method per marker for each participant class."""
    settings = _load_settings(config, verbose)
    class_models = _discover(settings, paths, fail_when_path_not_exist)

    if not class_models:
        console.print("[yellow]No LRA participant classes found[/yellow]")
        raise typer.Exit(EXIT_OK)

    table = Table(title="LRA participant callbacks")
    table.add_column("Class", style="cyan")
    for kind in MarkerKind:
        table.add_column(kind.value, style="white")

    for class_model in class_models:
        metadata = AnnotationMetadata.load(class_model)
        cells = []
        for kind in MarkerKind:
            if metadata.is_ambiguous(kind):
                cells.append("[red]ambiguous[/red]")
                continue
            method = metadata.active_method(kind)
            if method is None:
                cells.append("[dim]-[/dim]")
            elif method.declaring_type != class_model.type_ref:
                cells.append(f"{method.name} ({method.declaring_type.simple_name})")
            else:
                cells.append(method.name)
        table.add_row(class_model.name, *cells)

    console.print(table)


if __name__ == "__main__":
    app()
