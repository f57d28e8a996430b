"""Version commands - resolve, check and clean without releasing."""

from __future__ import annotations

import typer

from nextver.cli.commands._helpers import exit_release_error
from nextver.cli.context import build_context
from nextver.core.errors import ErrorCode
from nextver.core.result import Err

_BY_BRANCH_HELP = "Only consider tags reachable from HEAD (overrides config)"


def next_version(
    by_branch: bool | None = typer.Option(
        None, "--by-branch/--all-tags", help=_BY_BRANCH_HELP, show_default=False
    ),
    regexp: str | None = typer.Option(
        None, "--regexp", help="Tag pattern with one capture group for the version"
    ),
    first_version: str | None = typer.Option(
        None, "--first-version", help="Version to use when no tag has one"
    ),
) -> None:
    """Print the version the next release should use."""
    ctx = build_context(
        first_version=first_version,
        version_by_branch=by_branch,
        version_regexp=regexp,
    )
    result = ctx.provider().provide_version()
    if isinstance(result, Err):
        exit_release_error(result.error, ctx)
    typer.echo(result.value)


def last(
    by_branch: bool | None = typer.Option(
        None, "--by-branch/--all-tags", help=_BY_BRANCH_HELP, show_default=False
    ),
    regexp: str | None = typer.Option(
        None, "--regexp", help="Tag pattern with one capture group for the version"
    ),
) -> None:
    """Print the last released version (nothing if there is none)."""
    ctx = build_context(version_by_branch=by_branch, version_regexp=regexp)
    result = ctx.provider().last_version()
    if isinstance(result, Err):
        exit_release_error(result.error, ctx)
    if result.value is None:
        ctx.console.debug("No version tags found")
        return
    typer.echo(result.value)


def check(
    version: str = typer.Argument(..., help="Version about to be released"),
    regexp: str | None = typer.Option(
        None, "--regexp", help="Tag pattern with one capture group for the version"
    ),
) -> None:
    """Fail if VERSION is already on a tag (any branch)."""
    ctx = build_context(version_regexp=regexp)
    result = ctx.provider().before_release(version)
    if isinstance(result, Err):
        exit_release_error(result.error, ctx)
    ctx.console.success(f"version {version} has not been tagged")


def clean() -> None:
    """Remove the branch-resolution cache file."""
    ctx = build_context()
    cache = ctx.provider().cache
    result = cache.clear()
    if isinstance(result, Err):
        ctx.console.error(result.error.message)
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))
    if result.value:
        ctx.console.success(f"removed {cache.path.name}")
    else:
        ctx.console.debug("no cache file to remove")
