"""Error types for the release lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "invalid_override",
    "invalid_version",
    "already_tagged",
    "git_failed",
    "release_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Release error payload rendered by the CLI.

    ``already_tagged`` and ``invalid_override`` are the conditions that must
    stop a release; everything else degrades before it gets here.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
