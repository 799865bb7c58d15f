"""EVR (epoch, version, release) comparison."""

from __future__ import annotations

import re
from typing import Optional, Protocol

_ALPHANUM = re.compile(r"([a-zA-Z]+)|([0-9]+)|(~)")


class Version(Protocol):
    """Anything carrying version information in EVR form."""

    epoch: int
    version: str
    release: str


def compare(a: Optional[Version], b: Optional[Version]) -> int:
    """Compare two versions by epoch, then version, then release.

    Returns 1 if ``a`` is more recent, -1 if it is less recent, 0 if equal.
    ``None`` sorts before any version.
    """
    if a is None and b is None:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1

    if a.epoch != b.epoch:
        return 1 if a.epoch > b.epoch else -1

    rc = compare_versions(a.version, b.version)
    if rc != 0:
        return rc
    return compare_versions(a.release, b.release)


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings using rpm's segment rules.

    Returns 1 if ``a`` is more recent, -1 if it is less recent, 0 if equal.
    """
    if a == b:
        return 0

    segs_a = [m.group(0) for m in _ALPHANUM.finditer(a)]
    segs_b = [m.group(0) for m in _ALPHANUM.finditer(b)]

    for sa, sb in zip(segs_a, segs_b):
        if sa[0] == "~" or sb[0] == "~":
            if sa[0] != "~":
                return 1
            if sb[0] != "~":
                return -1

        if sa[0].isdigit():
            if not sb[0].isdigit():
                return 1
            sa = sa.lstrip("0")
            sb = sb.lstrip("0")
            if len(sa) != len(sb):
                return 1 if len(sa) > len(sb) else -1
        elif sb[0].isdigit():
            return -1

        if sa < sb:
            return -1
        if sa > sb:
            return 1

    if len(segs_a) == len(segs_b):
        return 0

    common = min(len(segs_a), len(segs_b))
    if len(segs_a) > common and segs_a[common] == "~":
        return -1
    if len(segs_b) > common and segs_b[common] == "~":
        return 1

    return 1 if len(segs_a) > len(segs_b) else -1