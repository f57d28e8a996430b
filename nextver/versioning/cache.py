"""Branch-resolution cache.

Walking HEAD's decorated ancestry is slow on large histories, so the last
branch-scoped result is kept in ``.gitnxtver_cache`` at the repository root
as a single line ``<commit-id> <version>``. The cache is keyed by the HEAD
commit but does not check it: the resolver compares ``CacheEntry.commit_id``
against the current HEAD before trusting the version.

Concurrent writers are not locked against each other. The file is replaced
atomically, so a reader sees either the old record or the new one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from nextver.core.result import Err, Ok, Result
from nextver.platform.files import atomic_write_text, remove_file
from nextver.versioning.version import parse_version

__all__ = ["CACHE_FILENAME", "CacheEntry", "CacheError", "ResolutionCache"]

CACHE_FILENAME = ".gitnxtver_cache"

_LINE_RE = re.compile(r"^(\S+) (\S.*)$")


@dataclass(frozen=True, slots=True)
class CacheEntry:
    commit_id: str
    version: str

    def to_line(self) -> str:
        return f"{self.commit_id} {self.version}\n"


@dataclass(frozen=True, slots=True)
class CacheError:
    message: str
    path: Path


class ResolutionCache:
    """Side file remembering the last branch-scoped resolution."""

    def __init__(self, root: Path) -> None:
        self.path = root / CACHE_FILENAME

    def get(self) -> CacheEntry | None:
        """Read the stored entry.

        Anything other than a well-formed line holding a parsable version
        is a miss.
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None

        lines = content.splitlines()
        if not lines:
            return None
        m = _LINE_RE.match(lines[0])
        if m is None:
            return None
        version = m.group(2).rstrip()
        if parse_version(version) is None:
            return None
        return CacheEntry(commit_id=m.group(1), version=version)

    def put(self, commit_id: str, version: str) -> Result[CacheEntry, CacheError]:
        entry = CacheEntry(commit_id=commit_id, version=version)
        try:
            atomic_write_text(self.path, entry.to_line())
        except OSError as e:
            return Err(CacheError(message=f"cannot write cache: {e}", path=self.path))
        return Ok(entry)

    def clear(self) -> Result[bool, CacheError]:
        """Remove the cache file.

        Returns:
            Ok(True) if a file was removed, Ok(False) if none existed.
        """
        try:
            return Ok(remove_file(self.path))
        except OSError as e:
            return Err(CacheError(message=f"cannot remove cache: {e}", path=self.path))
