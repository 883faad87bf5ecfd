"""CLI interface using typer."""

import asyncio
import logging

import typer

from .core import Fetcher
from .errors import AnyFetchError

app = typer.Typer(
    name="anyfetch",
    help="Fetch http(s), file, data and script URLs",
    no_args_is_help=True,
)


def parse_header(value: str) -> tuple[str, str]:
    """Split a ``Name: value`` header argument."""
    name, sep, rest = value.partition(":")
    if not sep or not name.strip():
        raise typer.BadParameter(f"Header must look like 'Name: value', got {value!r}")
    return name.strip(), rest.strip()


async def _fetch(url: str, method: str, headers: list[tuple[str, str]], data: str | None, redirect: str) -> dict:
    """Fetch a URL and return result as dict."""
    fetcher = Fetcher()
    try:
        response = await fetcher.fetch(
            url,
            method=method,
            headers=headers,
            body=data,
            redirect=redirect,
        )
        content = await response.buffer()
    finally:
        await fetcher.close()

    return {
        "url": response.url,
        "status": response.status,
        "status_text": response.status_text,
        "redirected": response.redirected,
        "headers": response.headers.to_dict(),
        "content": content,
    }


@app.command()
def fetch(
    url: str = typer.Argument(..., help="URL to fetch"),
    method: str = typer.Option("GET", "-X", "--method", help="Request method"),
    header: list[str] = typer.Option(None, "-H", "--header", help="Request header 'Name: value' (repeatable)"),
    data: str = typer.Option(None, "-d", "--data", help="Request body"),
    redirect: str = typer.Option("follow", "--redirect", help="Redirect policy: follow, manual, error"),
    include: bool = typer.Option(False, "-i", "--include", help="Print status line and headers"),
    output: str = typer.Option(None, "-o", "--output", help="Write body to file"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show debug logging"),
):
    """Fetch a single URL."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    headers = [parse_header(value) for value in header or []]
    try:
        result = asyncio.run(_fetch(url, method, headers, data, redirect))
    except AnyFetchError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if include:
        typer.echo(f"{result['status']} {result['status_text']}".rstrip())
        for name, value in result["headers"].items():
            typer.echo(f"{name}: {value}")
        typer.echo("")

    if output:
        with open(output, "wb") as f:
            f.write(result["content"])
        typer.echo(f"Saved to {output}")
    else:
        typer.echo(result["content"], nl=False)


@app.command()
def version():
    """Show version."""
    from . import __version__

    typer.echo(f"anyfetch {__version__}")


if __name__ == "__main__":
    app()
