"""Display package information in the manner of ``rpm --info``."""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from .package import Package, open_package
from .util import RPMError, format_time

_PROG = "rpminfo"


def format_info(package: Package) -> str:
    """Render the information block for one package."""
    return (
        f"Name        : {package.name}\n"
        f"Version     : {package.version}\n"
        f"Release     : {package.release}\n"
        f"Architecture: {package.architecture}\n"
        f"Group       : {', '.join(package.groups)}\n"
        f"Size        : {package.size}\n"
        f"License     : {package.license}\n"
        f"Signature   : {package.gpg_signature}\n"
        f"Source RPM  : {package.source_rpm}\n"
        f"Build Date  : {format_time(package.build_time)}\n"
        f"Build Host  : {package.build_host}\n"
        f"Packager    : {package.packager}\n"
        f"Vendor      : {package.vendor}\n"
        f"URL         : {package.url}\n"
        f"Summary     : {package.summary}\n"
        f"Description :\n"
        f"{package.description}\n"
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print information on each package named on the command line."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args or args[0].startswith("-"):
        sys.stderr.write(f"usage: {_PROG} [path ...]\n")
        return 1
    for i, name in enumerate(args):
        if i > 0:
            sys.stdout.write("\n")
        try:
            package = open_package(name)
        except (OSError, RPMError) as exc:
            sys.stderr.write(f"error reading {name}: {exc}\n")
            continue
        sys.stdout.write(format_info(package))
    return 0


if __name__ == "__main__":
    sys.exit(main())