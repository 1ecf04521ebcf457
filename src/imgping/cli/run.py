"""imgping run command."""

from __future__ import annotations

import typer

from imgping.models.config import RunConfig


def run(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
    as_json: bool = typer.Option(False, "--json", help="Print the run summary as JSON"),
) -> None:
    """Encode each image under IMAGES/, POST it, and append responses to api_responses.csv."""
    import orjson

    from imgping.pipeline.runner import run as run_batch
    from imgping.utils import configure_logging

    configure_logging(verbose)
    config = RunConfig()

    try:
        summary = run_batch(config)
    except OSError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(orjson.dumps(summary.to_dict(), option=orjson.OPT_INDENT_2).decode())
