"""Release command - run a release command under the version guard."""

from __future__ import annotations

import os
from pathlib import Path

import typer

from nextver.cli.commands._helpers import exit_release_error
from nextver.cli.context import build_context
from nextver.core.result import Err, Ok, Result
from nextver.output.console import ConsoleProtocol, Style
from nextver.platform.process import run_silent
from nextver.release.cycle import CycleState, ReleaseAction, Stage, run_release_cycle
from nextver.release.errors import ReleaseError
from nextver.release.provider import OVERRIDE_ENV_VAR

VERSION_ENV_VAR = "NEXTVER_VERSION"


def command_action(cmd: list[str], *, cwd: Path, console: ConsoleProtocol) -> ReleaseAction:
    """Build a release action that runs ``cmd`` with the version exported."""

    def run(version: str) -> Result[None, ReleaseError]:
        env = {**os.environ, OVERRIDE_ENV_VAR: version, VERSION_ENV_VAR: version}
        console.print(" ".join(cmd), Style.DIM)
        result = run_silent(cmd, cwd=cwd, env=env)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="release_failed",
                    message=f"release command failed: {result.error}",
                )
            )
        return Ok(None)

    return run


def release(
    cmd: list[str] = typer.Argument(..., help="Release command, e.g. -- twine upload dist/*"),
    by_branch: bool | None = typer.Option(
        None,
        "--by-branch/--all-tags",
        help="Only consider tags reachable from HEAD (overrides config)",
        show_default=False,
    ),
) -> None:
    """Resolve the next version, refuse duplicates, then run CMD with it.

    CMD sees the version as $V and $NEXTVER_VERSION. The branch cache is
    removed afterwards whether CMD succeeds or not.
    """
    ctx = build_context(version_by_branch=by_branch)
    provider = ctx.provider()

    def observe(state: CycleState) -> None:
        ctx.console.debug(f"release: {state.stage}")
        if state.stage == Stage.GUARDED:
            ctx.console.header(f"Releasing {state.version}")

    result = run_release_cycle(
        provider,
        command_action(cmd, cwd=ctx.root, console=ctx.console),
        observe=observe,
    )
    if isinstance(result, Err):
        exit_release_error(result.error, ctx)
    ctx.console.success(f"released {result.value}")
