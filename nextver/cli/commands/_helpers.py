"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from nextver.core.errors import ErrorCode
from nextver.output.console import Style
from nextver.release.errors import ReleaseError, ReleaseErrorKind

if TYPE_CHECKING:
    from nextver.cli.context import CLIContext


_EXIT_CODES: dict[ReleaseErrorKind, ErrorCode] = {
    "invalid_override": ErrorCode.USER_ERROR,
    "invalid_version": ErrorCode.USER_ERROR,
    "already_tagged": ErrorCode.RELEASE_ERROR,
    "git_failed": ErrorCode.ENV_ERROR,
    "release_failed": ErrorCode.RELEASE_ERROR,
}


def exit_code_for(error: ReleaseError) -> ErrorCode:
    return _EXIT_CODES.get(error.kind, ErrorCode.RELEASE_ERROR)


def exit_release_error(error: ReleaseError, ctx: CLIContext) -> NoReturn:
    """Report a release error on the console and exit with its code."""
    ctx.console.error(error.message)
    if error.hint:
        ctx.console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=int(exit_code_for(error)))
