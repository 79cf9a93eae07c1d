import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.config import SETTINGS, SegmenterConfig, Settings
from ..core.errors import ConfigurationError
from ..core.logging import setup_logging
from ..core.models import ValidationReport
from ..segment import optimize, parse_units, validate_lengths

app = typer.Typer(add_completion=False, help="threadfit CLI")


@app.callback()
def _init() -> None:
    setup_logging(SETTINGS.LOG_FORMAT, SETTINGS.LOG_LEVEL)  # type: ignore[arg-type]


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    source = Path(path)
    if not source.exists():
        typer.echo(f"❌ Input not found: {path}", err=True)
        raise typer.Exit(1)
    return source.read_text(encoding="utf-8")


def _build_config(
    config_file: Optional[str],
    min_length: Optional[int],
    max_length: Optional[int],
    collapse: Optional[bool],
) -> SegmenterConfig:
    """Config file -> env -> CLI flags, later sources winning."""
    try:
        base = SegmenterConfig.from_settings(Settings.load_config(config_file))
        overrides: Dict[str, Any] = {}
        if min_length is not None:
            overrides["min_unit_length"] = min_length
        if max_length is not None:
            overrides["max_unit_length"] = max_length
        if collapse is not None:
            overrides["auto_collapse"] = collapse
        if not overrides:
            return base
        return SegmenterConfig(**{**base.model_dump(), **overrides})
    except ConfigurationError as e:
        typer.echo(f"❌ Invalid configuration: {e}", err=True)
        raise typer.Exit(2) from e


def _print_units(console: Console, title: str, units: list[str], report: Optional[ValidationReport]) -> None:
    table = Table(title=title)
    table.add_column("#", style="bold cyan", justify="right")
    table.add_column("Chars", style="bold green", justify="right")
    table.add_column("Status")
    table.add_column("Text", overflow="fold")

    flags = {a.index: a for a in report.analysis} if report else {}
    for i, unit in enumerate(units):
        a = flags.get(i)
        if a and a.too_long:
            status = "[red]too long[/red]"
        elif a and a.too_short:
            status = "[yellow]short[/yellow]"
        else:
            status = "ok"
        table.add_row(str(i + 1), str(len(unit)), status, escape(unit))

    console.print(table)


@app.command("optimize")
def optimize_cmd(
    path: str = typer.Argument("-", help="File with generator output, or - for stdin"),
    min_length: Optional[int] = typer.Option(None, "--min-length", help="Minimum characters per unit"),
    max_length: Optional[int] = typer.Option(None, "--max-length", help="Maximum characters per unit"),
    collapse: Optional[bool] = typer.Option(
        None, "--collapse/--no-collapse", help="Join thin sequences into a single unit"
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config", help="Config file (.threadfit.yaml auto-discovered)"
    ),
    output_format: str = typer.Option("json", "--format", help="Output format: json|plain"),
) -> None:
    """
    Segment generator output into deliverable units.

    Reads raw text (a JSON array of strings, a fenced or malformed array, or
    plain prose) and prints either one unit or an ordered sequence of units,
    each within the length cap.

    Example:
        threadfit optimize draft.txt
        cat draft.txt | threadfit optimize - --max-length 500 --format plain
    """
    if output_format not in ("json", "plain"):
        typer.echo(f"❌ Unknown format: {output_format}", err=True)
        raise typer.Exit(2)

    config = _build_config(config_file, min_length, max_length, collapse)
    result = optimize(_read_input(path), config)

    if output_format == "json":
        typer.echo(json.dumps(result.to_payload(), indent=2, ensure_ascii=False))
        return

    meta = result.metadata
    console = Console()
    kind = "sequence" if result.is_multi_unit else "single unit"
    title = f"{kind}: {meta.unit_count} unit(s), max {config.max_unit_length} chars"
    _print_units(console, title, result.units, meta.validation)
    console.print(f"Parsed via: {meta.parse_strategy}")
    console.print(f"Transformations: {', '.join(meta.transformations) or 'none'}")
    if meta.reason:
        console.print(f"Reason: {meta.reason}")


@app.command()
def check(
    path: str = typer.Argument("-", help="File with generator output, or - for stdin"),
    config_file: Optional[str] = typer.Option(None, "--config", help="Config file"),
    min_length: Optional[int] = typer.Option(None, "--min-length", help="Minimum characters per unit"),
    max_length: Optional[int] = typer.Option(None, "--max-length", help="Maximum characters per unit"),
    json_output: bool = typer.Option(False, "--json", help="Emit the report as JSON"),
) -> None:
    """
    Parse generator output and report unit lengths without changing anything.

    Exits with code 1 when any unit violates the length bounds.
    """
    config = _build_config(config_file, min_length, max_length, None)
    outcome = parse_units(_read_input(path))
    report = validate_lengths(outcome.units, config)

    if json_output:
        payload = {"strategy": outcome.strategy, "units": outcome.units, **report.to_payload()}
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        console = Console()
        _print_units(console, f"{len(outcome.units)} unit(s) via {outcome.strategy}", outcome.units, report)
        for issue in report.issues:
            console.print(f"⚠️  {issue}")
        if report.valid:
            console.print("✅ All units within bounds")

    if not report.valid:
        raise typer.Exit(1)


@app.command()
def version() -> None:
    from .. import __version__

    typer.echo(__version__)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
