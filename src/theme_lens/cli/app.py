import logging
import os
from typing import Annotated

import typer
from rich.logging import RichHandler

from theme_lens.cli.check import check
from theme_lens.cli.serve import serve_app

app = typer.Typer(
    name="theme-lens",
    help="Theme Lens CLI: check Liquid themes and serve completions, hover and diagnostics.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    debug = verbose or bool(os.getenv("THEME_LENS_DEBUG"))
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True)] if debug else None,
    )


app.command("check")(check)
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
