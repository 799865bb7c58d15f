# rpmread

`rpmread` reads `.rpm` package files in pure Python. It decodes the lead,
the signature header and the main header. From these it gives you package
metadata, the file list and the dependency lists. It also compares versions
by rpm's epoch/version/release rules and checks MD5 digests and OpenPGP
signatures.

## Installation

```
pip install rpmread
```

To run the test suite, install the test extra as well:

```
pip install "rpmread[test]"
```

## Reading a package

```python
from rpmread.package import open_package

pkg = open_package("example-1.0-1.x86_64.rpm")
print("Package:", pkg)              # example-1.0-1.x86_64
print("Summary:", pkg.summary)
print("Built:", pkg.build_time, "on", pkg.build_host)
```

Well-known tags are exposed as properties of `Package`. Among them are
`name`, `version`, `release`, `epoch`, `architecture`, `license`, `vendor`,
`url`, `groups`, `size`, `archive_size`, `source_rpm`, `payload_format` and
`payload_compression`. `header_range` gives the byte offsets at which the
main header starts and ends.

To read any other tag, look it up in a header by its numeric identifier:

```python
tag = pkg.header.get_tag(1000)      # the package name
print(tag.string())
```

A tag that is absent comes back as an empty `NULL` tag. `Tag.strings()`,
`Tag.string()`, `Tag.ints()`, `Tag.int()` and `Tag.bytes()` return the value
as the matching type, or an empty value if the tag holds another type.
`pkg.header.tags` maps every identifier to its `Tag`.

### Reading from a stream

`read(stream)` reads the headers from an open binary stream. It leaves the
stream at the start of the payload:

```python
from rpmread.package import read

with open("example-1.0-1.x86_64.rpm", "rb") as stream:
    pkg = read(stream)
    print(pkg.payload_format, pkg.payload_compression)
    payload = stream.read()
```

## Files and dependencies

```python
for info in pkg.files:
    print(info.mode_string(), info.owner, info.group, info.size, info)

for dep in pkg.requires:
    print(dep)                      # e.g. "glibc >= 2.17"
```

Each `FileInfo` also has `mode`, `mod_time`, `flags` (see `FileFlag`),
`digest`, `linkname`, `is_dir()` and `perm()`.

The other dependency lists are `provides`, `conflicts`, `obsoletes`,
`suggests`, `enhances`, `recommends` and `supplements`. Each `Dependency`
has `flags` (see `DepFlag`), `name`, `epoch`, `version` and `release`.

## Comparing versions

```python
from rpmread.version import compare, compare_versions

compare_versions("1.0~rc1", "1.0")  # -1
compare(pkg_a, pkg_b)               # 1 when pkg_a is newer than pkg_b
```

`compare` orders by epoch, then version, then release. It takes anything
with `epoch`, `version` and `release` attributes, including packages and
dependencies. `rpmread.package.sort_packages(packages)` sorts a list in
place by name ascending, and within a name puts the newest version first.

## Checking integrity

```python
from rpmread.pgp import open_key_ring
from rpmread.signature import GPGCheckFailed, MD5CheckFailed, gpg_check, md5_check

with open("example-1.0-1.x86_64.rpm", "rb") as stream:
    try:
        md5_check(stream)
    except MD5CheckFailed:
        print("checksum mismatch")

keyring = open_key_ring("RPM-GPG-KEY-example")
with open("example-1.0-1.x86_64.rpm", "rb") as stream:
    try:
        signer = gpg_check(stream, keyring)
        print("signed by", signer)
    except GPGCheckFailed:
        print("signature not made by a key in the ring")
```

The OpenPGP reader in `rpmread.pgp` verifies RSA and DSA signatures.
`str(pkg.gpg_signature)` describes a version 3 signature in the form
`RSA/SHA256, Sun Nov 20 18:01:16 2016, Key ID ...`. For any other signature
it gives an empty string.

All errors raised while reading or checking a package derive from
`rpmread.util.RPMError`.

## Command-line tools

`rpminfo` prints a summary of each package:

```
rpminfo example-1.0-1.x86_64.rpm
```

`rpmdump` prints every tag in the signature and main headers of each package
as a YAML document:

```
rpmdump example-1.0-1.x86_64.rpm other-2.0-1.noarch.rpm
```

## What it does not do

`rpmread` reads package metadata only. It does not decompress or unpack the
payload, so it cannot extract the files a package installs. It also does not
install packages, write rpm files or keep a package database.