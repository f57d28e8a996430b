"""Release lifecycle: version provider hooks and the release cycle."""

from nextver.release.cycle import CycleState, ReleaseAction, Stage, run_release_cycle
from nextver.release.errors import ReleaseError
from nextver.release.provider import OVERRIDE_ENV_VAR, NextVersionProvider

__all__ = [
    "CycleState",
    "NextVersionProvider",
    "OVERRIDE_ENV_VAR",
    "ReleaseAction",
    "ReleaseError",
    "Stage",
    "run_release_cycle",
]
