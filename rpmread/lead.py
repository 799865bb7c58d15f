"""The legacy lead section at the start of every rpm file."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO

from .util import RPMError

LEAD_SIZE = 96
_MAGIC = b"\xed\xab\xee\xdb"


class NotRPMFileError(RPMError):
    """The data is not an rpm package."""

    def __init__(self, message: str = "invalid file descriptor") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class Lead:
    """The deprecated lead section, used by legacy rpm versions for metadata.

    ``name`` has its NUL padding removed.
    """

    version_major: int
    version_minor: int
    name: str
    type: int
    architecture: int
    operating_system: int
    signature_type: int


def read_lead(stream: BinaryIO) -> Lead:
    """Read and validate the lead section of an rpm package."""
    raw = stream.read(LEAD_SIZE)
    if len(raw) < LEAD_SIZE:
        raise RPMError("unexpected end of file")
    if raw[:4] != _MAGIC:
        raise NotRPMFileError()
    major = raw[4]
    if not 3 <= major <= 4:
        raise RPMError(f"unsupported rpm version: {major}")
    package_type, architecture = struct.unpack_from(">HH", raw, 6)
    operating_system, signature_type = struct.unpack_from(">HH", raw, 76)
    return Lead(
        version_major=major,
        version_minor=raw[5],
        name=raw[10:76].rstrip(b"\0").decode("utf-8", "replace"),
        type=package_type,
        architecture=architecture,
        operating_system=operating_system,
        signature_type=signature_type,
    )