import asyncio
import json
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from theme_lens.cli.common import load_docset
from theme_lens.core.errors import ConfigurationError
from theme_lens.core.paths import relative_to
from theme_lens.local import check_theme
from theme_lens.models import Offense, Severity

console = Console()


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


class FailLevel(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


def _render_table(root: str, offenses: list[Offense]) -> None:
    table = Table(show_lines=False)
    for header in ("file", "line", "check", "severity", "message"):
        table.add_column(header)
    for offense in offenses:
        table.add_row(
            relative_to(offense.location, root),
            str(offense.start.row + 1),
            offense.check,
            offense.severity.name.lower(),
            offense.message,
        )
    console.print(table)


def check(
    root: Annotated[Path, typer.Argument(help="Theme directory to check.")] = Path("."),
    config: Annotated[Path | None, typer.Option("--config", "-c", help="Path to a .theme-check.yml file.")] = None,
    docs: Annotated[Path | None, typer.Option(help="JSON file with filter, object and tag docs.")] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format.")] = OutputFormat.TEXT,
    fail_level: Annotated[FailLevel, typer.Option(help="Lowest severity that fails the run.")] = FailLevel.ERROR,
) -> None:
    """Check a theme and report offenses."""
    docset = load_docset(docs)
    root_location = root.resolve().as_posix()

    try:
        theme, offenses = asyncio.run(
            check_theme(root_location, docset, config.resolve().as_posix() if config else None)
        )
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(code=2) from e

    offenses = sorted(offenses, key=lambda o: (o.location, o.start_index))
    if output is OutputFormat.JSON:
        typer.echo(json.dumps([offense.model_dump(mode="json") for offense in offenses], indent=2))
    elif offenses:
        _render_table(root_location, offenses)
        console.print(f"{len(theme)} files inspected, {len(offenses)} offenses found.")
    else:
        console.print(f"[green]{len(theme)} files inspected, no offenses found.[/green]")

    threshold = Severity[fail_level.name]
    if any(offense.severity <= threshold for offense in offenses):
        raise typer.Exit(code=1)
