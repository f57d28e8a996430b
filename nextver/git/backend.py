"""Interface between version resolution and version control."""

from __future__ import annotations

from typing import Protocol

from nextver.core.result import Result
from nextver.git.repository import GitError

__all__ = ["VcsBackend"]


class VcsBackend(Protocol):
    """The three queries version resolution makes against version control.

    ``Repository`` implements this with git; tests use in-memory fakes.
    """

    def list_all_tags(self) -> Result[list[str], GitError]:
        """Every tag in the repository, in any order."""
        ...

    def current_commit_id(self) -> Result[str, GitError]:
        """Opaque id of the commit currently checked out."""
        ...

    def tags_reachable_from_head(self) -> Result[list[str], GitError]:
        """Labels on commits in HEAD's ancestry; may be unsupported."""
        ...
