"""Shared helpers: the package error type, EVR parsing and rpm time formatting."""

from __future__ import annotations

from datetime import datetime, timezone

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


class RPMError(Exception):
    """An error raised while reading or validating an rpm package."""

    def __str__(self) -> str:
        return f"rpm: {super().__str__()}"


def _parse_int(s: str) -> int:
    """Parse a run of ASCII digits, yielding 0 for anything else."""
    if s.isascii() and s.isdigit():
        return int(s)
    return 0


def parse_version(v: str) -> tuple[int, str, str]:
    """Split an ``[epoch:]version[-release]`` string into its three parts."""
    epoch = 0
    head, sep, tail = v.partition(":")
    if sep:
        epoch = _parse_int(head)
        v = tail
    version, _, release = v.partition("-")
    return epoch, version, release


def format_time(t: datetime) -> str:
    """Format a time the way rpm tools do, e.g. ``Sun Nov 20 18:01:16 2016``.

    Aware times are converted to UTC; naive times are taken to be UTC already.
    """
    if t.tzinfo is not None:
        t = t.astimezone(timezone.utc)
    return (
        f"{_WEEKDAYS[t.weekday()]} {_MONTHS[t.month - 1]} {t.day:2d} "
        f"{t:%H:%M:%S} {t.year}"
    )