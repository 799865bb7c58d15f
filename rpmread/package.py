"""Reading rpm package files and querying their metadata."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import BinaryIO, Iterable, MutableSequence

from .dependency import Dependency
from .fileinfo import FileInfo
from .header import Header, read_header
from .lead import LEAD_SIZE, Lead, read_lead
from .signature import GPGSignature
from .util import RPMError, parse_version
from .version import compare

_U64 = 0xFFFFFFFFFFFFFFFF


def _timestamp(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


@dataclass
class Package:
    """An rpm package: its lead, its signature header and its main header.

    ``epoch``, ``version`` and ``release`` make a package usable with
    :func:`rpmread.version.compare`.
    """

    lead: Lead
    signature: Header
    header: Header

    def __str__(self) -> str:
        """The identifier ``name-version-release.architecture``."""
        return f"{self.name}-{self.version}-{self.release}.{self.architecture}"

    def _string(self, tag_id: int) -> str:
        return self.header.get_tag(tag_id).string()

    def _strings(self, tag_id: int) -> list[str]:
        return self.header.get_tag(tag_id).strings()

    def _dependencies(self, flags_tag: int, names_tag: int, versions_tag: int) -> list[Dependency]:
        flags = self.header.get_tag(flags_tag).ints()
        names = self._strings(names_tag)
        versions = self._strings(versions_tag)
        if len(flags) < len(names) or len(versions) < len(names):
            raise RPMError(f"malformed dependency tags: {names_tag}")
        deps = []
        for flag, name, evr in zip(flags, names, versions):
            epoch, version, release = parse_version(evr)
            deps.append(Dependency(flag, name, epoch, version, release))
        return deps

    @property
    def gpg_signature(self) -> GPGSignature:
        """The raw PGP signature from the signature header."""
        return GPGSignature(self.signature.get_tag(1002).bytes())

    @property
    def name(self) -> str:
        return self._string(1000)

    @property
    def version(self) -> str:
        return self._string(1001)

    @property
    def release(self) -> str:
        return self._string(1002)

    @property
    def epoch(self) -> int:
        return self.header.get_tag(1003).int()

    @property
    def header_range(self) -> tuple[int, int]:
        """The byte offsets at which the main header starts and ends."""
        start = LEAD_SIZE + self.signature.size
        return start, start + self.header.size

    @property
    def requires(self) -> list[Dependency]:
        return self._dependencies(1048, 1049, 1050)

    @property
    def provides(self) -> list[Dependency]:
        return self._dependencies(1112, 1047, 1113)

    @property
    def conflicts(self) -> list[Dependency]:
        return self._dependencies(1053, 1054, 1055)

    @property
    def obsoletes(self) -> list[Dependency]:
        return self._dependencies(1114, 1090, 1115)

    @property
    def suggests(self) -> list[Dependency]:
        return self._dependencies(5051, 5049, 5050)

    @property
    def enhances(self) -> list[Dependency]:
        return self._dependencies(5057, 5055, 5056)

    @property
    def recommends(self) -> list[Dependency]:
        return self._dependencies(5048, 5046, 5047)

    @property
    def supplements(self) -> list[Dependency]:
        return self._dependencies(5051, 5052, 5053)

    @property
    def files(self) -> list[FileInfo]:
        """Information on each file the package installs."""
        ints = lambda tag_id: self.header.get_tag(tag_id).ints()  # noqa: E731
        dir_indexes = ints(1116)
        names = self._strings(1117)
        dirs = self._strings(1118)
        modes = ints(1030)
        sizes = ints(1028)
        times = ints(1034)
        flags = ints(1037)
        owners = self._strings(1039)
        groups = self._strings(1040)
        digests = self._strings(1035)
        linknames = self._strings(1036)
        try:
            return [
                FileInfo(
                    name=dirs[dir_indexes[i]] + name,
                    size=sizes[i],
                    mode=modes[i],
                    mod_time=_timestamp(times[i]),
                    flags=flags[i],
                    owner=owners[i],
                    group=groups[i],
                    digest=digests[i],
                    linkname=linknames[i],
                )
                for i, name in enumerate(names)
            ]
        except IndexError:
            raise RPMError("malformed file information tags") from None

    @property
    def summary(self) -> str:
        return "\n".join(self._strings(1004))

    @property
    def description(self) -> str:
        return "\n".join(self._strings(1005))

    @property
    def build_time(self) -> datetime:
        return _timestamp(self.header.get_tag(1006).int())

    @property
    def build_host(self) -> str:
        return self._string(1007)

    @property
    def install_time(self) -> datetime:
        return _timestamp(self.header.get_tag(1008).int())

    @property
    def size(self) -> int:
        """Disk space consumed by installing the package."""
        large = self.header.get_tag(5009).int() & _U64
        if large > 0:
            return large
        return self.header.get_tag(1009).int() & _U64

    @property
    def archive_size(self) -> int:
        """Size in bytes of the archived payload."""
        for header, tag_id in (
            (self.signature, 271),
            (self.signature, 1007),
            (self.header, 271),
        ):
            value = header.get_tag(tag_id).int() & _U64
            if value > 0:
                return value
        return self.header.get_tag(1046).int() & _U64

    @property
    def distribution(self) -> str:
        return self._string(1010)

    @property
    def vendor(self) -> str:
        return self._string(1011)

    @property
    def gif_image(self) -> bytes:
        return self.header.get_tag(1012).bytes()

    @property
    def xpm_image(self) -> bytes:
        return self.header.get_tag(1013).bytes()

    @property
    def license(self) -> str:
        return self._string(1014)

    @property
    def packager(self) -> str:
        return self._string(1015)

    @property
    def groups(self) -> list[str]:
        return self._strings(1016)

    @property
    def change_log(self) -> list[str]:
        return self._strings(1017)

    @property
    def source(self) -> list[str]:
        return self._strings(1018)

    @property
    def patch(self) -> list[str]:
        return self._strings(1019)

    @property
    def url(self) -> str:
        return self._string(1020)

    @property
    def operating_system(self) -> str:
        return self._string(1021)

    @property
    def architecture(self) -> str:
        return self._string(1022)

    @property
    def pre_install_script(self) -> str:
        return self._string(1023)

    @property
    def post_install_script(self) -> str:
        return self._string(1024)

    @property
    def pre_uninstall_script(self) -> str:
        return self._string(1025)

    @property
    def post_uninstall_script(self) -> str:
        return self._string(1026)

    @property
    def old_filenames(self) -> list[str]:
        return self._strings(1027)

    @property
    def icon(self) -> bytes:
        return self.header.get_tag(1043).bytes()

    @property
    def source_rpm(self) -> str:
        return self._string(1044)

    @property
    def rpm_version(self) -> str:
        return self._string(1064)

    @property
    def platform(self) -> str:
        return self._string(1132)

    @property
    def payload_format(self) -> str:
        """Archive format of the payload, typically cpio."""
        return self._string(1124)

    @property
    def payload_compression(self) -> str:
        """Compression of the payload, typically xz."""
        return self._string(1125)


def read(stream: BinaryIO) -> Package:
    """Read an rpm package's headers from a binary stream.

    On return the stream is positioned at the start of the payload.
    """
    lead = read_lead(stream)
    signature = read_header(stream, True)
    header = read_header(stream, False)
    return Package(lead=lead, signature=signature, header=header)


def open_package(name: str) -> Package:
    """Read the headers of an rpm package file and close it."""
    with open(name, "rb") as f:
        return read(f)


def _ordering(a: Package, b: Package) -> int:
    if a.name == b.name:
        return -compare(a, b)
    return -1 if a.name < b.name else 1


def sort_packages(packages: MutableSequence[Package]) -> None:
    """Sort packages in place by name ascending, then by EVR descending."""
    ordered: Iterable[Package] = sorted(packages, key=functools.cmp_to_key(_ordering))
    packages[:] = list(ordered)