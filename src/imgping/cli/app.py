"""Root Typer app with global options."""

from __future__ import annotations

from typing import Optional

import typer

app = typer.Typer(
    name="imgping",
    help="Submit every image under IMAGES/ to the ping endpoint and log responses to CSV.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def _version_callback(value: bool) -> None:
    if value:
        from imgping import __version__

        typer.echo(f"imgping {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=_version_callback, is_eager=True, help="Show version."
    ),
) -> None:
    """imgping: batch image submission client.

    Run without arguments to process IMAGES/ with the default settings.
    """
    if ctx.invoked_subcommand is None:
        from imgping.cli.run import run

        run(verbose=False, as_json=False)


# Import and register commands
from imgping.cli.run import run  # noqa: E402

app.command()(run)
