"""Tag-derived versions: parsing, selection, bumping, caching and guarding."""

from nextver.versioning.bump import BumpStrategy, next_version
from nextver.versioning.cache import CACHE_FILENAME, CacheEntry, CacheError, ResolutionCache
from nextver.versioning.guard import DuplicateVersion, assert_not_released
from nextver.versioning.resolver import VersionResolver
from nextver.versioning.version import (
    Version,
    max_version,
    parse_version,
    version_from_tag,
    versions_from_tags,
)

__all__ = [
    # bump
    "BumpStrategy",
    "next_version",
    # cache
    "CACHE_FILENAME",
    "CacheEntry",
    "CacheError",
    "ResolutionCache",
    # guard
    "DuplicateVersion",
    "assert_not_released",
    # resolver
    "VersionResolver",
    # version
    "Version",
    "max_version",
    "parse_version",
    "version_from_tag",
    "versions_from_tags",
]
