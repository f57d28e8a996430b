"""Release-lifecycle hooks.

``NextVersionProvider`` is what a release pipeline talks to:

- ``provide_version`` decides the version to build and release,
- ``before_release`` refuses a version that is already tagged,
- ``after_release`` drops the branch cache so it can't go stale,
- ``prune_files`` keeps the cache file out of packaged output.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from pathlib import Path, PurePosixPath

from nextver.core.config import NextVersionConfig
from nextver.core.result import Err, Ok, Result
from nextver.git.backend import VcsBackend
from nextver.output.console import ConsoleProtocol
from nextver.release.errors import ReleaseError
from nextver.versioning.bump import BumpStrategy, next_version
from nextver.versioning.cache import CACHE_FILENAME, ResolutionCache
from nextver.versioning.guard import assert_not_released
from nextver.versioning.resolver import VersionResolver
from nextver.versioning.version import parse_version

__all__ = ["OVERRIDE_ENV_VAR", "NextVersionProvider"]

OVERRIDE_ENV_VAR = "V"


class NextVersionProvider:
    """Provides the next version from git tags and guards the release."""

    def __init__(
        self,
        backend: VcsBackend,
        *,
        root: Path,
        config: NextVersionConfig,
        console: ConsoleProtocol,
        env: Mapping[str, str] | None = None,
        bump: BumpStrategy = next_version,
    ) -> None:
        self._config = config
        self._console = console
        self._env = env if env is not None else os.environ
        self._bump = bump
        self._cache = ResolutionCache(root)
        self._resolver = VersionResolver(
            backend,
            pattern=config.pattern,
            cache=self._cache,
            console=console,
            version_by_branch=config.version_by_branch,
        )

    @property
    def resolver(self) -> VersionResolver:
        return self._resolver

    @property
    def cache(self) -> ResolutionCache:
        return self._cache

    def last_version(self) -> Result[str | None, ReleaseError]:
        return self._resolver.last_version().map_err(_git_failed)

    def provide_version(self) -> Result[str, ReleaseError]:
        """Return the version to release.

        A ``V`` environment variable wins and is returned verbatim, without
        looking at tags. With no version tags at all, ``first_version`` is
        used.
        """
        if OVERRIDE_ENV_VAR in self._env:
            return self._override(self._env[OVERRIDE_ENV_VAR])

        last = self.last_version()
        if isinstance(last, Err):
            return last

        if last.value is None:
            self._console.debug(
                f"No version tags found; using first version {self._config.first_version}"
            )
            return Ok(self._config.first_version)

        try:
            new = self._bump(last.value)
        except ValueError as e:
            return Err(ReleaseError(kind="invalid_version", message=str(e)))

        self._console.info(f"Bumping version from {last.value} to {new}")
        return Ok(new)

    def before_release(self, version: str) -> Result[None, ReleaseError]:
        """Fail if ``version`` equals a version on any tag, on any branch."""
        candidate = parse_version(version)
        if candidate is None:
            return Err(
                ReleaseError(kind="invalid_version", message=f"not a valid version: {version}")
            )

        known = self._resolver.all_versions()
        if isinstance(known, Err):
            return Err(_git_failed(known.error))

        guarded = assert_not_released(candidate, known.value)
        if isinstance(guarded, Err):
            return Err(
                ReleaseError(
                    kind="already_tagged",
                    message=guarded.error.message,
                    hint=f"set {OVERRIDE_ENV_VAR}=<version> to release a different version",
                )
            )
        return Ok(None)

    def after_release(self) -> None:
        cleared = self._cache.clear()
        match cleared:
            case Ok(True):
                self._console.debug(f"Removed {CACHE_FILENAME}")
            case Ok(False):
                pass
            case Err(e):
                self._console.warning(e.message)

    def prune_files(self, files: Iterable[str]) -> list[str]:
        """Drop the cache file from a list of repository-relative paths."""
        cache_name = PurePosixPath(CACHE_FILENAME)
        return [f for f in files if PurePosixPath(f) != cache_name]

    def _override(self, raw: str) -> Result[str, ReleaseError]:
        if not raw.strip():
            return Err(
                ReleaseError(
                    kind="invalid_override",
                    message=f"{OVERRIDE_ENV_VAR} is set but empty",
                    hint=f"unset {OVERRIDE_ENV_VAR} to compute the version from tags",
                )
            )
        if parse_version(raw) is None:
            return Err(
                ReleaseError(
                    kind="invalid_override",
                    message=f"{OVERRIDE_ENV_VAR}={raw!r} is not a valid version",
                    hint="expected e.g. 1.000, 0.002_01 or v1.2.3",
                )
            )
        self._console.debug(f"Using version {raw} from ${OVERRIDE_ENV_VAR}")
        return Ok(raw)


def _git_failed(error: object) -> ReleaseError:
    return ReleaseError(kind="git_failed", message=str(error))
