"""CLI entry point for reqmd."""

import logging
from pathlib import Path

import click

from reqmd.app import ReqmdApp
from reqmd.errors import ReqmdError
from reqmd.factory.providers import DEFAULT_PREFIX
from reqmd.http.client import parse_timeout
from reqmd.requests import MdRequestList, Target, dumps_requests, request_line


def _load_requests(app: ReqmdApp, file_path: Path) -> MdRequestList:
    """Parse and build every request in a Markdown file."""
    try:
        return app.parse_file(file_path)
    except ReqmdError as e:
        raise click.ClickException(f"Unable to parse requests from {file_path}: {e}") from e


def _parse_target(ctx, param, value: str) -> Target:
    try:
        return Target.parse(value)
    except ReqmdError as e:
        raise click.BadParameter(str(e)) from e


def _parse_timeout(ctx, param, value: str | None) -> float | None:
    try:
        return parse_timeout(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log parsing and build steps.")
def main(verbose: bool):
    """reqmd: run HTTP requests written in Markdown."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@main.command("list")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--env-prefix", default=DEFAULT_PREFIX, show_default=True, help="Prefix of environment defaults.")
def list_requests(file_path: Path, env_prefix: str):
    """Print a numbered list of the requests in FILE_PATH."""
    requests = _load_requests(ReqmdApp.default(env_prefix), file_path)
    if requests.is_empty():
        return

    padding = len(str(len(requests)))
    for nth, md_request in enumerate(requests, start=1):
        title = md_request.title or request_line(md_request)
        click.echo(f"{nth:>{padding}}. {title}")


@main.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--env-prefix", default=DEFAULT_PREFIX, show_default=True, help="Prefix of environment defaults.")
def dump(file_path: Path, env_prefix: str):
    """Print the requests in FILE_PATH as JSON."""
    requests = _load_requests(ReqmdApp.default(env_prefix), file_path)
    click.echo(dumps_requests(requests))


@main.command()
@click.argument("target", callback=_parse_target)
@click.option("--timeout", callback=_parse_timeout, default=None, help="e.g. 500ms, 10sec, 2min or none.")
@click.option("--env-prefix", default=DEFAULT_PREFIX, show_default=True, help="Prefix of environment defaults.")
def send(target: Target, timeout: float | None, env_prefix: str):
    """Send one request. TARGET is FILE:first, FILE:last, FILE:<n> or FILE:line<n>."""
    if not target.file.is_file():
        raise click.ClickException(f"Unable to read file: {target.file}")

    app = ReqmdApp.default(env_prefix, timeout=timeout)
    requests = _load_requests(app, target.file)

    md_request = target.selection.select(requests)
    if md_request is None:
        raise click.ClickException(f"{target.selection} not found")

    try:
        response = app.send(md_request)
    except ReqmdError as e:
        raise click.ClickException(str(e)) from e

    text = response.body.as_text()
    if text is not None:
        click.echo(text, nl=False)
    elif response.body.kind == "binary":
        click.echo("Binary Response!", err=True)
