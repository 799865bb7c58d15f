"""Dump every header and tag of rpm packages as a YAML document."""

from __future__ import annotations

import sys
from typing import Optional, Sequence, TextIO

from .header import Header
from .package import open_package
from .util import RPMError

_PROG = "rpmdump"


def _dump_strings(values: list[str], out: TextIO) -> None:
    if len(values) == 1 and "\n" not in values[0]:
        out.write(f'        value: ["{values[0]}"]\n')
        return
    out.write("        value:\n")
    for value in values:
        if "\n" not in value:
            out.write(f'          - "{value}"\n')
        else:
            out.write("          - |\n")
            for line in value.split("\n"):
                out.write(f"            {line}\n")


def _hex_line(offset: int, chunk: bytes) -> str:
    parts = [f"          {offset:08x}  "]
    for j, byte in enumerate(chunk):
        parts.append(f"{byte:02x} ")
        if j == 7:
            parts.append(" ")
    parts.append("   " * (16 - len(chunk)))
    if len(chunk) < 8:
        parts.append(" ")
    printable = "".join(
        chr(byte) if 32 <= byte <= 126 else "."
        for byte in chunk.ljust(16, b"\0")
    )
    parts.append(f" |{printable}|")
    return "".join(parts)


def _dump_bytes(data: bytes, out: TextIO) -> None:
    if len(data) <= 16:
        out.write(f"        value: [{' '.join(f'{b:02x}' for b in data)}]\n")
        return
    out.write("        value: |\n")
    for offset in range(0, len(data), 16):
        out.write(_hex_line(offset, data[offset:offset + 16]) + "\n")


def _format_value(value) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(str(item) for item in value) + "]"
    return str(value)


def dump_header(header: Header, out: Optional[TextIO] = None) -> None:
    """Write the version and all tags of a header."""
    out = out if out is not None else sys.stdout
    out.write(f"    version: {header.version}\n")
    out.write("    tags:\n")
    for tag in header.tags.values():
        out.write(f"      - tag: {tag.id}\n")
        out.write(f"        type: {tag.type}\n")
        value = tag.value
        if isinstance(value, (bytes, bytearray)):
            _dump_bytes(bytes(value), out)
        elif (
            isinstance(value, (list, tuple))
            and value
            and all(isinstance(item, str) for item in value)
        ):
            _dump_strings(list(value), out)
        else:
            out.write(f"        value: {_format_value(value)}\n")


def dump_package(name: str, out: Optional[TextIO] = None) -> None:
    """Write the signature and main header of the package file ``name``."""
    out = out if out is not None else sys.stdout
    out.write(f"- path: {name}\n")
    try:
        package = open_package(name)
    except (OSError, RPMError) as exc:
        out.write(f"  error: {exc}\n")
        return
    out.write("  signature:\n")
    dump_header(package.signature, out)
    out.write("\n")
    out.write("  header:\n")
    dump_header(package.header, out)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Dump each package named on the command line; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args or args[0].startswith("-"):
        sys.stderr.write(f"usage: {_PROG} [package ...]\n")
        return 1
    out = sys.stdout
    out.write("---\n")
    for i, name in enumerate(args):
        if i > 0:
            out.write("\n")
        dump_package(name, out)
    return 0


if __name__ == "__main__":
    sys.exit(main())