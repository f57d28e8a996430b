from __future__ import annotations

import os
from pathlib import Path

import typer

from nextver import __version__
from nextver.cli.commands.release_cmd import release
from nextver.cli.commands.version_cmds import check, clean, last, next_version
from nextver.cli.context import REPO_ENV_VAR, VERBOSE_ENV_VAR
from nextver.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


app.command("next")(next_version)
app.command()(last)
app.command()(check)
app.command()(clean)
app.command(context_settings={"ignore_unknown_options": True})(release)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    repo: Path | None = typer.Option(
        None,
        "--repo",
        help="Repository to inspect (default: current directory)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if verbose:
        os.environ[VERBOSE_ENV_VAR] = "1"

    if repo is not None:
        try:
            root = repo.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --repo: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not root.is_dir():
            typer.echo(f"error: --repo '{root}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        os.environ[REPO_ENV_VAR] = str(root)


def main() -> None:
    app()
