from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from nextver.core.result import Err, Ok, Result
from nextver.versioning.version import Version

__all__ = ["DuplicateVersion", "assert_not_released"]


@dataclass(frozen=True, slots=True)
class DuplicateVersion:
    """A release candidate equal to a version already on a tag.

    Attributes:
        version: The candidate as given.
        existing: The tagged version it collides with (may be spelled
            differently, e.g. ``1.00`` vs ``1.0``).
    """

    version: str
    existing: str

    @property
    def message(self) -> str:
        if self.existing != self.version:
            return f"version {self.version} has already been tagged (as {self.existing})"
        return f"version {self.version} has already been tagged"


def assert_not_released(
    candidate: Version,
    known: Iterable[Version],
) -> Result[None, DuplicateVersion]:
    """Reject ``candidate`` if it equals any known version.

    ``known`` should be every version from every tag in the repository,
    not just the current branch.
    """
    for v in known:
        if v == candidate:
            return Err(DuplicateVersion(version=str(candidate), existing=str(v)))
    return Ok(None)
