"""Last-version resolution.

Two strategies:

- whole repository: every tag from ``list_all_tags``; cheap.
- by branch: only tags reachable from HEAD. This needs a history walk, so
  the result is cached per HEAD commit. If the walk fails or finds nothing
  the resolver falls back to the whole-repository scan for this run.

Usage:
    resolver = VersionResolver(
        Repository(root),
        pattern=config.pattern,
        cache=ResolutionCache(root),
        console=console,
        version_by_branch=True,
    )
    match resolver.last_version():
        case Ok(None):
            print("no releases yet")
        case Ok(last):
            print(f"last release: {last}")
        case Err(e):
            print(f"git failed: {e}")
"""

from __future__ import annotations

import re

from nextver.core.result import Err, Ok, Result
from nextver.git.backend import VcsBackend
from nextver.git.repository import GitError
from nextver.output.console import ConsoleProtocol
from nextver.versioning.cache import ResolutionCache
from nextver.versioning.version import Version, max_version, versions_from_tags

__all__ = ["VersionResolver"]


class VersionResolver:
    """Finds the highest released version for a repository or branch."""

    def __init__(
        self,
        backend: VcsBackend,
        *,
        pattern: re.Pattern[str],
        cache: ResolutionCache,
        console: ConsoleProtocol,
        version_by_branch: bool = False,
    ) -> None:
        self._backend = backend
        self._pattern = pattern
        self._cache = cache
        self._console = console
        self._by_branch = version_by_branch
        self._all_versions: list[Version] | None = None

    @property
    def version_by_branch(self) -> bool:
        return self._by_branch

    def all_versions(self) -> Result[list[Version], GitError]:
        """Versions from every tag in the repository, ascending.

        Queried once per resolver; later calls reuse the first result.
        """
        if self._all_versions is not None:
            return Ok(self._all_versions)

        tags = self._backend.list_all_tags()
        if isinstance(tags, Err):
            return tags

        versions = versions_from_tags(tags.value, self._pattern)
        for v in versions:
            self._console.debug(f"Found version {v}")
        self._all_versions = versions
        return Ok(versions)

    def last_version(self) -> Result[str | None, GitError]:
        """The highest released version, or None if nothing is tagged."""
        if self._by_branch:
            on_branch = self._branch_version()
            if on_branch is not None:
                return Ok(on_branch)

        versions = self.all_versions()
        if isinstance(versions, Err):
            return versions

        last = max_version(versions.value)
        if last is None:
            return Ok(None)

        if self._by_branch:
            self._console.warning("Unable to find version on current branch")
        return Ok(str(last))

    def _branch_version(self) -> str | None:
        head: str | None = None

        entry = self._cache.get()
        if entry is not None:
            head = self._head()
            if head is not None and entry.commit_id == head:
                self._console.debug(f"Using cached version {entry.version} for {head}")
                return entry.version
            self._console.debug(f"Ignoring stale cache entry for {entry.commit_id}")

        tags = self._backend.tags_reachable_from_head()
        if isinstance(tags, Err):
            self._console.debug(f"Unable to walk branch history: {tags.error}")
            return None

        versions = versions_from_tags(tags.value, self._pattern)
        for v in versions:
            self._console.debug(f"Found version {v} on branch")

        last = max_version(versions)
        if last is None:
            return None

        if head is None:
            head = self._head()
        if head is not None:
            stored = self._cache.put(head, str(last))
            if isinstance(stored, Err):
                self._console.debug(stored.error.message)
        return str(last)

    def _head(self) -> str | None:
        result = self._backend.current_commit_id()
        if isinstance(result, Err):
            self._console.debug(f"Unable to read HEAD: {result.error}")
            return None
        return result.value
