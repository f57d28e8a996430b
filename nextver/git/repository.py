"""Git repository access.

``Repository`` is the production ``VcsBackend``: it shells out to git for
the three queries version resolution needs. All queries return Result
types; nothing here raises on git failure.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.list_all_tags():
        case Ok(tags):
            print(f"{len(tags)} tags")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from nextver.core.result import Err, Ok, Result
from nextver.platform.process import ProcessError
from nextver.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0

# A decoration line printed by ``--pretty=%d``: " (HEAD -> main, tag: v1.0)"
_DECORATION_RE = re.compile(r"^\s*\((.+)\)")
_DECORATION_SPLIT_RE = re.compile(r",\s*")

__all__ = [
    "GitError",
    "Repository",
    "parse_decorations",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1

    def __str__(self) -> str:
        return f"git {self.command}: {self.message}"


def parse_decorations(output: str) -> list[str]:
    """Extract ref names from ``git rev-list --pretty=%d`` output.

    Only decoration lines are considered; ``commit <sha>`` header lines and
    undecorated commits are skipped. Several refs on one commit are reported
    separately, in the order git prints them. Modern git prefixes tags with
    ``tag: ``; the prefix is removed so patterns see the bare tag name.
    """
    names: list[str] = []
    for line in output.splitlines():
        m = _DECORATION_RE.match(line)
        if m is None:
            continue
        for ref in _DECORATION_SPLIT_RE.split(m.group(1)):
            ref = ref.strip()
            if ref.startswith("tag: "):
                ref = ref[len("tag: ") :]
            if ref:
                names.append(ref)
    return names


class Repository:
    """Git repository used as a version source.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def toplevel(self) -> Result[Path, GitError]:
        """Resolve the working tree root containing ``path``."""
        result = self._run(["rev-parse", "--show-toplevel"])
        match result:
            case Err(e):
                return Err(self._error("rev-parse --show-toplevel", e))
            case Ok(stdout):
                return Ok(Path(stdout.strip()))

    def list_all_tags(self) -> Result[list[str], GitError]:
        """List every tag in the repository (``git tag -l``)."""
        result = self._run(["tag", "-l"])
        match result:
            case Err(e):
                return Err(self._error("tag -l", e))
            case Ok(stdout):
                return Ok([ln.strip() for ln in stdout.splitlines() if ln.strip()])

    def current_commit_id(self) -> Result[str, GitError]:
        """Full object id of HEAD."""
        result = self._run(["rev-parse", "HEAD"])
        match result:
            case Err(e):
                return Err(self._error("rev-parse HEAD", e))
            case Ok(stdout):
                sha = stdout.strip()
                if not sha:
                    return Err(GitError(command="rev-parse HEAD", message="empty output"))
                return Ok(sha)

    def tags_reachable_from_head(self) -> Result[list[str], GitError]:
        """Refs decorating commits in HEAD's ancestry.

        Walks only decorated commits (``--simplify-by-decoration``), which
        is much slower than ``git tag -l`` on large histories but is the
        only way to scope versions to the current branch. Requires git
        1.6.1 or later; older git reports an error that the caller treats
        as "unsupported".
        """
        args = ["rev-list", "--simplify-by-decoration", "--pretty=%d", "HEAD"]
        result = self._run(args)
        match result:
            case Err(e):
                return Err(self._error(" ".join(args[:3]), e))
            case Ok(stdout):
                return Ok(parse_decorations(stdout))

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            timeout=_GIT_TIMEOUT_SECONDS,
        )

    @staticmethod
    def _error(command: str, e: ProcessError) -> GitError:
        return GitError(
            command=command,
            message=e.stderr.strip() or e.stdout.strip() or f"git {command} failed",
            returncode=e.returncode,
        )
