"""Next-version computation.

Follows the CPAN ``Version::Next`` convention, which is what release tags
produced by Perl-style tooling expect:

Dotted versions (leading ``v`` or more than one dot) increment the last
component. Components after the first wrap at 1000 and carry left:

    v1.2.3    -> v1.2.4
    1.2.999   -> 1.3.0
    v1.999.999 -> v2.0.0
    v1.2.3_4  -> v1.2.3_5

Decimal versions increment the last digit of the fraction, keeping its
width and carrying into the integer part:

    0.010     -> 0.011
    0.999     -> 1.000
    0.01_99   -> 0.02_00
    7         -> 8
"""

from __future__ import annotations

import re
from collections.abc import Callable

from nextver.versioning.version import parse_version

__all__ = ["BumpStrategy", "next_version"]

type BumpStrategy = Callable[[str], str]

_DOTTED_PART_LIMIT = 999


def next_version(version: str) -> str:
    """Return the version that follows ``version``.

    Raises:
        ValueError: If ``version`` is not a decimal or dotted version string.
    """
    parsed = parse_version(version)
    if parsed is None:
        raise ValueError(f"not a valid version: {version!r}")

    body = version.removeprefix("v")
    if parsed.is_dotted:
        bumped = _next_dotted(body, is_alpha=parsed.is_alpha)
        return f"v{bumped}" if version.startswith("v") else bumped
    return _next_decimal(body, is_alpha=parsed.is_alpha)


def _next_dotted(body: str, *, is_alpha: bool) -> str:
    parts = [int(p) for p in re.split(r"[._]", body)]

    pos = len(parts) - 1
    parts[pos] += 1
    while pos > 0 and parts[pos] > _DOTTED_PART_LIMIT:
        parts[pos] = 0
        pos -= 1
        parts[pos] += 1

    out = ".".join(str(p) for p in parts)
    if is_alpha:
        head, _, tail = out.rpartition(".")
        out = f"{head}_{tail}"
    return out


def _next_decimal(body: str, *, is_alpha: bool) -> str:
    alpha_width = len(body) - body.index("_") - 1 if is_alpha else 0
    plain = body.replace("_", "")
    int_part, dot, frac = plain.partition(".")

    digits = int_part + frac
    bumped = str(int(digits) + 1).zfill(len(digits))

    split = len(bumped) - len(frac)
    new_int = str(int(bumped[:split]))
    out = f"{new_int}.{bumped[split:]}" if dot else new_int

    if alpha_width:
        out = f"{out[:-alpha_width]}_{out[-alpha_width:]}"
    return out
