from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

__all__ = [
    "Version",
    "max_version",
    "parse_version",
    "version_from_tag",
    "versions_from_tags",
]


# Decimal ("0.001", "1.02_03") and dotted ("v1.2.3", "1.2.3_4") forms.
_TOKEN_RE = re.compile(r"v?\d+(?:\.\d+)*(?:_\d+)?")
_SPLIT_RE = re.compile(r"[._]")


@dataclass(frozen=True, slots=True, order=True)
class Version:
    """A version parsed from a tag.

    Ordering and equality use the numeric components only, with trailing
    zeros dropped, so ``1.10 > 1.9`` and ``1.0 == 1.00 == v1``. ``str()``
    returns the text the version was parsed from.
    """

    key: tuple[int, ...] = field(repr=False)
    text: str = field(compare=False)

    @property
    def is_alpha(self) -> bool:
        return "_" in self.text

    @property
    def is_dotted(self) -> bool:
        return self.text.startswith("v") or self.text.count(".") > 1

    def __str__(self) -> str:
        return self.text


def _key(text: str) -> tuple[int, ...]:
    parts = [int(p) for p in _SPLIT_RE.split(text.removeprefix("v"))]
    while parts and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def parse_version(token: str) -> Version | None:
    if _TOKEN_RE.fullmatch(token) is None:
        return None
    return Version(key=_key(token), text=token)


def version_from_tag(tag: str, pattern: re.Pattern[str]) -> Version | None:
    m = pattern.search(tag)
    if m is None:
        return None
    token = m.group(1)
    if token is None:
        return None
    return parse_version(token)


def versions_from_tags(tags: Iterable[str], pattern: re.Pattern[str]) -> list[Version]:
    """Parse every tag that matches, ascending. Unparsable tags are dropped."""
    out: list[Version] = []
    for tag in tags:
        v = version_from_tag(tag, pattern)
        if v is not None:
            out.append(v)
    return sorted(out)


def max_version(versions: Iterable[Version]) -> Version | None:
    ordered = sorted(versions)
    if not ordered:
        return None
    return ordered[-1]
