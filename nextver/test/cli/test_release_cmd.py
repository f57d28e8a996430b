from __future__ import annotations

import sys
from pathlib import Path

import pytest
import typer

from nextver.cli.context import CLIContext
from nextver.core.config import NextVersionConfig
from nextver.core.errors import ErrorCode
from nextver.core.result import Err, Ok
from nextver.output.console import MockConsole
from nextver.test.fakes import FakeVcs
from nextver.versioning.cache import CACHE_FILENAME, ResolutionCache


def _ctx(tmp_path: Path, vcs: FakeVcs) -> CLIContext:
    return CLIContext(
        root=tmp_path,
        repository=vcs,
        config=NextVersionConfig(version_by_branch=True),
        console=MockConsole(),
    )


def _patch_context(monkeypatch: pytest.MonkeyPatch, ctx: CLIContext) -> None:
    import nextver.cli.commands.release_cmd as release_cmd

    monkeypatch.setattr(release_cmd, "build_context", lambda **_: ctx)
    monkeypatch.delenv("V", raising=False)


def test_command_action_exports_version(tmp_path: Path) -> None:
    from nextver.cli.commands.release_cmd import command_action

    out = tmp_path / "released.txt"
    script = (
        "import os, pathlib; "
        f"pathlib.Path({str(out)!r}).write_text(os.environ['V'] + ' ' + os.environ['NEXTVER_VERSION'])"
    )
    action = command_action([sys.executable, "-c", script], cwd=tmp_path, console=MockConsole())

    assert action("0.002") == Ok(None)
    assert out.read_text() == "0.002 0.002"


def test_command_action_failure(tmp_path: Path) -> None:
    from nextver.cli.commands.release_cmd import command_action

    action = command_action(
        [sys.executable, "-c", "raise SystemExit(2)"], cwd=tmp_path, console=MockConsole()
    )

    result = action("0.002")

    assert isinstance(result, Err)
    assert result.error.kind == "release_failed"


def test_release_runs_command_and_clears_cache(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    import nextver.cli.commands.release_cmd as release_cmd

    ResolutionCache(tmp_path).put("c0ffee", "0.003")
    ctx = _ctx(tmp_path, FakeVcs(tags=["v0.003"], branch_tags=["v0.003"]))
    _patch_context(monkeypatch, ctx)

    release_cmd.release(cmd=[sys.executable, "-c", "pass"], by_branch=None)

    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("released 0.004")
    assert not (tmp_path / CACHE_FILENAME).exists()


def test_release_refuses_duplicate(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import nextver.cli.commands.release_cmd as release_cmd

    marker = tmp_path / "ran"
    _patch_context(monkeypatch, _ctx(tmp_path, FakeVcs(tags=["v0.005"])))
    monkeypatch.setenv("V", "0.005")

    with pytest.raises(typer.Exit) as exc:
        release_cmd.release(
            cmd=[sys.executable, "-c", f"open({str(marker)!r}, 'w').close()"],
            by_branch=None,
        )

    assert exc.value.exit_code == int(ErrorCode.RELEASE_ERROR)
    assert not marker.exists()


def test_release_padded_override_is_a_user_error(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    import nextver.cli.commands.release_cmd as release_cmd

    marker = tmp_path / "ran"
    ctx = _ctx(tmp_path, FakeVcs(tags=["v0.005"]))
    _patch_context(monkeypatch, ctx)
    monkeypatch.setenv("V", " 1.000")

    with pytest.raises(typer.Exit) as exc:
        release_cmd.release(
            cmd=[sys.executable, "-c", f"open({str(marker)!r}, 'w').close()"],
            by_branch=None,
        )

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert not marker.exists()
    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("is not a valid version")
