"""Typed configuration loading and access.

Configuration lives either in the ``[tool.nextver]`` table of the
repository's ``pyproject.toml`` or in a standalone ``nextver.toml`` at the
repository root:

    [tool.nextver]
    first_version = "0.001"       # used when no version tag exists yet
    version_by_branch = false     # only consider tags reachable from HEAD
    version_regexp = "^v(.+)$"    # must capture the version in one group
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_table

__all__ = [
    "ConfigError",
    "DEFAULT_FIRST_VERSION",
    "DEFAULT_VERSION_REGEXP",
    "NextVersionConfig",
    "compile_version_regexp",
    "load_config",
    "validate_config",
]

DEFAULT_FIRST_VERSION = "0.001"
DEFAULT_VERSION_REGEXP = r"^v(.+)$"

PYPROJECT_FILENAME = "pyproject.toml"
CONFIG_FILENAME = "nextver.toml"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded, parsed or validated."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class NextVersionConfig:
    """Settings for version resolution.

    Attributes:
        first_version: Version used verbatim when no tag yields a version.
        version_by_branch: Restrict lookup to tags reachable from HEAD.
        version_regexp: Pattern with exactly one capture group for the version.
    """

    first_version: str = DEFAULT_FIRST_VERSION
    version_by_branch: bool = False
    version_regexp: str = DEFAULT_VERSION_REGEXP

    @property
    def pattern(self) -> re.Pattern[str]:
        """Compiled ``version_regexp``.

        Only call this on a validated config (see ``load_config``).
        """
        return re.compile(self.version_regexp)

    def with_overrides(
        self,
        *,
        first_version: str | None = None,
        version_by_branch: bool | None = None,
        version_regexp: str | None = None,
    ) -> NextVersionConfig:
        """Return a copy with the given non-None values replaced."""
        changes: dict[str, object] = {}
        if first_version is not None:
            changes["first_version"] = first_version
        if version_by_branch is not None:
            changes["version_by_branch"] = version_by_branch
        if version_regexp is not None:
            changes["version_regexp"] = version_regexp
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> NextVersionConfig:
        """Create config from a mapping (a parsed TOML table)."""
        by_branch = get_bool(data, "version_by_branch")
        return cls(
            first_version=get_str(data, "first_version") or DEFAULT_FIRST_VERSION,
            version_by_branch=by_branch if by_branch is not None else False,
            version_regexp=get_str(data, "version_regexp") or DEFAULT_VERSION_REGEXP,
        )


def compile_version_regexp(text: str) -> Result[re.Pattern[str], ConfigError]:
    """Compile a version pattern and check it has exactly one capture group."""
    try:
        pattern = re.compile(text)
    except re.error as e:
        return Err(ConfigError(f"Invalid version_regexp {text!r}: {e}"))
    if pattern.groups != 1:
        return Err(
            ConfigError(
                f"version_regexp {text!r} must have exactly one capture group "
                f"(found {pattern.groups})"
            )
        )
    return Ok(pattern)


def validate_config(config: NextVersionConfig) -> Result[NextVersionConfig, ConfigError]:
    """Check cross-field constraints that TOML typing can't express."""
    compiled = compile_version_regexp(config.version_regexp)
    if isinstance(compiled, Err):
        return compiled
    if not config.first_version.strip():
        return Err(ConfigError("first_version must not be empty"))
    return Ok(config)


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def _find_table(root: Path) -> Result[tuple[StrDict, Path] | None, ConfigError]:
    pyproject = root / PYPROJECT_FILENAME
    if pyproject.is_file():
        parsed = _parse_toml(pyproject)
        if isinstance(parsed, Err):
            return parsed
        tool = get_table(parsed.value, "tool") or {}
        table = get_table(tool, "nextver")
        if table is not None:
            return Ok((table, pyproject))

    standalone = root / CONFIG_FILENAME
    if standalone.is_file():
        parsed = _parse_toml(standalone)
        if isinstance(parsed, Err):
            return parsed
        return Ok((parsed.value, standalone))

    return Ok(None)


def load_config(root: Path) -> Result[NextVersionConfig, ConfigError]:
    """Load configuration for the repository at ``root``.

    ``[tool.nextver]`` in ``pyproject.toml`` wins over ``nextver.toml``.
    No config at all yields the defaults.

    Returns:
        Ok(NextVersionConfig) on success, Err(ConfigError) on failure
    """
    found = _find_table(root)
    if isinstance(found, Err):
        return found
    if found.value is None:
        return Ok(NextVersionConfig())

    table, path = found.value
    try:
        config = NextVersionConfig.from_dict(table)
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))

    validated = validate_config(config)
    if isinstance(validated, Err):
        return Err(replace(validated.error, path=path))
    return validated
