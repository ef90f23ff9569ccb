"""CLI implementation for remoteseek."""

import logging
import sys

import typer

from .io import make_client, open_remote_reader
from .io.base import DEFAULT_TIMEOUT
from .lister import detect_format, list_entries

app = typer.Typer(add_completion=False, help="List the entries of a remote .tar or .zip archive.")


def _configure_logging(verbose: bool) -> logging.Logger:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        stream=sys.stderr,
        force=True,
    )
    return logging.getLogger("remoteseek.cli")


@app.command()
def main(
    url: str = typer.Argument(..., help="URL of an archive ending in .tar or .zip"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Add debug-level diagnostics to the request log"),
    transport: str = typer.Option("requests", "--transport", help="HTTP client to use: requests or httpx"),
    timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", min=0, help="Per-request timeout in seconds"),
    stats: bool = typer.Option(False, "--stats", help="Report requests made and bytes fetched on stderr"),
):
    """Print one line per entry found in the archive at URL."""
    logger = _configure_logging(verbose)

    try:
        detect_format(url)
        client = make_client(transport, timeout=timeout)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    reader = open_remote_reader(url, client=client, logger=logger)
    try:
        for name in list_entries(reader, url):
            typer.echo(name)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        client.close()
        if stats:
            typer.echo(
                f"requests_made={reader.requests_made} bytes_fetched={reader.bytes_fetched}",
                err=True,
            )


if __name__ == "__main__":
    app()
