"""Descriptions of the files installed by a package."""

from __future__ import annotations

import enum
import stat
from dataclasses import dataclass, field
from datetime import datetime, timezone


class FileFlag(enum.IntFlag):
    """File attributes as given in the spec file's %files section."""

    NONE = 0
    CONFIG = 1 << 0
    DOC = 1 << 1
    ICON = 1 << 2
    MISSING_OK = 1 << 3
    NO_REPLACE = 1 << 4
    GHOST = 1 << 6
    LICENSE = 1 << 7
    README = 1 << 8
    PUBKEY = 1 << 11
    ARTIFACT = 1 << 12


_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass(frozen=True)
class FileInfo:
    """A file in an rpm package.

    ``mode`` holds the Unix mode bits (type, special and permission bits)
    as they are stored in the package header.
    """

    name: str
    size: int = 0
    mode: int = 0
    mod_time: datetime = field(default=_EPOCH)
    flags: int = 0
    owner: str = ""
    group: str = ""
    digest: str = ""
    linkname: str = ""

    def is_dir(self) -> bool:
        """Whether the file is a directory."""
        return stat.S_ISDIR(self.mode)

    def perm(self) -> int:
        """The permission bits of the file."""
        return stat.S_IMODE(self.mode) & 0o777

    def mode_string(self) -> str:
        """The mode in ``ls -l`` notation, such as ``-rw-r--r--``."""
        return stat.filemode(self.mode)

    def __str__(self) -> str:
        return self.name