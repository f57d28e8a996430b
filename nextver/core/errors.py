"""Error codes for CLI exit status.

Every command maps its failure to one of these codes so that CI scripts
wrapping ``nextver`` can tell a bad invocation from a refused release.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: User error (bad arguments, invalid V override, bad config)
    - 2: Environment error (not a git checkout, git missing)
    - 3: Release error (version already tagged, release command failed)
    - 5: I/O error (cache or config file unreadable)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    RELEASE_ERROR = 3
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

