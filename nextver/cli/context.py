from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer

from nextver.core.config import NextVersionConfig, load_config, validate_config
from nextver.core.errors import ErrorCode
from nextver.core.result import Err
from nextver.git.backend import VcsBackend
from nextver.git.repository import Repository
from nextver.output.console import ConsoleProtocol, RichConsole
from nextver.release.provider import NextVersionProvider

REPO_ENV_VAR = "NEXTVER_REPO"
VERBOSE_ENV_VAR = "NEXTVER_VERBOSE"


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    repository: VcsBackend
    config: NextVersionConfig
    console: ConsoleProtocol

    def provider(self) -> NextVersionProvider:
        return NextVersionProvider(
            self.repository,
            root=self.root,
            config=self.config,
            console=self.console,
        )


def exit_with(message: str, *, code: ErrorCode) -> NoReturn:
    typer.echo(f"error: {message}", err=True)
    raise typer.Exit(code=int(code))


def build_context(
    *,
    first_version: str | None = None,
    version_by_branch: bool | None = None,
    version_regexp: str | None = None,
) -> CLIContext:
    console = RichConsole(verbose=os.environ.get(VERBOSE_ENV_VAR) == "1")

    start = Path(os.environ.get(REPO_ENV_VAR) or Path.cwd())
    top = Repository(start).toplevel()
    if isinstance(top, Err):
        exit_with(f"not a git repository: {start} ({top.error.message})", code=ErrorCode.ENV_ERROR)
    root = top.value

    loaded = load_config(root)
    if isinstance(loaded, Err):
        where = f" ({loaded.error.path})" if loaded.error.path else ""
        exit_with(f"{loaded.error.message}{where}", code=ErrorCode.USER_ERROR)

    config = loaded.value.with_overrides(
        first_version=first_version,
        version_by_branch=version_by_branch,
        version_regexp=version_regexp,
    )
    validated = validate_config(config)
    if isinstance(validated, Err):
        exit_with(validated.error.message, code=ErrorCode.USER_ERROR)

    return CLIContext(
        root=root,
        repository=Repository(root),
        config=validated.value,
        console=console,
    )
