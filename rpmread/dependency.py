"""Package relationships: requires, provides, conflicts, obsoletes and so on."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class DepFlag(enum.IntFlag):
    """How a dependency's version constraint is to be compared."""

    ANY = 0
    LESSER = 1 << 1
    GREATER = 1 << 2
    EQUAL = 1 << 3
    LESSER_OR_EQUAL = EQUAL | LESSER
    GREATER_OR_EQUAL = EQUAL | GREATER
    PREREQ = 1 << 6
    SCRIPT_PRE = 1 << 9
    SCRIPT_POST = 1 << 10
    SCRIPT_PREUN = 1 << 11
    SCRIPT_POSTUN = 1 << 12
    RPMLIB = 1 << 24


_OPERATORS = (
    (DepFlag.LESSER_OR_EQUAL, "<="),
    (DepFlag.LESSER, "<"),
    (DepFlag.GREATER_OR_EQUAL, ">="),
    (DepFlag.GREATER, ">"),
    (DepFlag.EQUAL, "="),
)


@dataclass(frozen=True)
class Dependency:
    """A relationship with another package and its version constraint.

    Carries ``epoch``, ``version`` and ``release`` so it can be compared
    with :func:`rpmread.version.compare`.
    """

    flags: int
    name: str
    epoch: int = 0
    version: str = ""
    release: str = ""

    def __str__(self) -> str:
        """Render the dependency as ``rpm -qR`` does."""
        s = self.name
        for flag, op in _OPERATORS:
            if self.flags & flag == flag:
                s = f"{s} {op}"
                break
        if self.version:
            s = f"{s} {self.version}"
        if self.release:
            s = f"{s}.{self.release}"
        return s