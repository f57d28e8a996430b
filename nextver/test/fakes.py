"""In-memory VCS backend for tests."""

from __future__ import annotations

from dataclasses import dataclass, field

from nextver.core.result import Err, Ok, Result
from nextver.git.repository import GitError


def _no_tags() -> list[str]:
    return []


@dataclass
class FakeVcs:
    """VcsBackend double recording how often each query ran.

    ``branch_tags=None`` makes the ancestry walk fail like an old git.
    """

    tags: list[str] = field(default_factory=_no_tags)
    branch_tags: list[str] | None = field(default_factory=_no_tags)
    head: str = "c0ffee"
    head_fails: bool = False
    tags_fail: bool = False
    calls: dict[str, int] = field(default_factory=dict[str, int])

    def _count(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1

    def list_all_tags(self) -> Result[list[str], GitError]:
        self._count("list_all_tags")
        if self.tags_fail:
            return Err(GitError(command="tag -l", message="fatal: not a git repository"))
        return Ok(list(self.tags))

    def current_commit_id(self) -> Result[str, GitError]:
        self._count("current_commit_id")
        if self.head_fails:
            return Err(GitError(command="rev-parse HEAD", message="fatal: bad revision"))
        return Ok(self.head)

    def tags_reachable_from_head(self) -> Result[list[str], GitError]:
        self._count("tags_reachable_from_head")
        if self.branch_tags is None:
            return Err(
                GitError(
                    command="rev-list --simplify-by-decoration --pretty=%d",
                    message="unrecognized argument: --simplify-by-decoration",
                    returncode=129,
                )
            )
        return Ok(list(self.branch_tags))
