"""Release cycle state machine.

    IDLE -> RESOLVING -> BUMPED -> GUARDED -> RELEASED -> CACHE_CLEARED

Any failure before RELEASED ends in FAILED. CACHE_CLEARED is entered after
every cycle that started, whether the release succeeded or not.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum

from nextver.core.result import Err, Ok, Result
from nextver.release.errors import ReleaseError
from nextver.release.provider import NextVersionProvider

__all__ = [
    "CycleState",
    "ReleaseAction",
    "Stage",
    "run_release_cycle",
]


class Stage(StrEnum):
    IDLE = "idle"
    RESOLVING = "resolving"
    BUMPED = "bumped"
    GUARDED = "guarded"
    RELEASED = "released"
    CACHE_CLEARED = "cache_cleared"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CycleState:
    stage: Stage
    version: str | None = None


ReleaseAction = Callable[[str], Result[None, ReleaseError]]
StageHandler = Callable[[CycleState], Result[CycleState, ReleaseError]]
Observer = Callable[[CycleState], None]


def _version_of(state: CycleState) -> str:
    if state.version is None:
        raise AssertionError(f"stage {state.stage} reached without a version")
    return state.version


def _handlers(
    provider: NextVersionProvider,
    release: ReleaseAction,
) -> Mapping[Stage, StageHandler]:
    def start(_: CycleState) -> Result[CycleState, ReleaseError]:
        return Ok(CycleState(Stage.RESOLVING))

    def resolve(_: CycleState) -> Result[CycleState, ReleaseError]:
        return provider.provide_version().map(lambda v: CycleState(Stage.BUMPED, v))

    def guard(state: CycleState) -> Result[CycleState, ReleaseError]:
        version = _version_of(state)
        return provider.before_release(version).map(lambda _: CycleState(Stage.GUARDED, version))

    def publish(state: CycleState) -> Result[CycleState, ReleaseError]:
        version = _version_of(state)
        return release(version).map(lambda _: CycleState(Stage.RELEASED, version))

    return {
        Stage.IDLE: start,
        Stage.RESOLVING: resolve,
        Stage.BUMPED: guard,
        Stage.GUARDED: publish,
    }


def run_release_cycle(
    provider: NextVersionProvider,
    release: ReleaseAction,
    *,
    observe: Observer | None = None,
) -> Result[str, ReleaseError]:
    """Resolve, guard and release a version, then clear the branch cache.

    Args:
        provider: Hooks used for resolution, guarding and cleanup.
        release: Performs the actual release of the given version.
        observe: Called with every state entered, including the terminal ones.

    Returns:
        Ok(version) once released, Err(ReleaseError) from the failing step.
    """
    notify: Observer = observe or (lambda _: None)
    handlers = _handlers(provider, release)

    state = CycleState(Stage.IDLE)
    notify(state)
    try:
        while state.stage != Stage.RELEASED:
            outcome = handlers[state.stage](state)
            if isinstance(outcome, Err):
                notify(CycleState(Stage.FAILED, state.version))
                return outcome
            state = outcome.value
            notify(state)
        return Ok(_version_of(state))
    finally:
        provider.after_release()
        notify(CycleState(Stage.CACHE_CLEARED, state.version))
