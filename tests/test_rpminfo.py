import struct

import pytest

from rpmread.header import Header
from rpmread.lead import Lead
from rpmread.package import Package
from rpmread.rpminfo import format_info, main
from rpmread.tag import Tag, TagType
from rpmread.util import format_time

_STRING_TYPES = (TagType.STRING, TagType.STRING_ARRAY, TagType.I18NSTRING)


def _build_header(entries):
    index = b""
    store = b""
    for tag_id, tag_type, value in entries:
        if tag_type in _STRING_TYPES:
            data = b"".join(s.encode() + b"\0" for s in value)
        elif tag_type == TagType.INT32:
            data = struct.pack(f">{len(value)}I", *value)
        else:
            data = bytes(value)
        index += struct.pack(">IIII", tag_id, tag_type, len(store), len(value))
        store += data
    return (
        b"\x8e\xad\xe8\x01" + b"\0" * 4
        + struct.pack(">II", len(entries), len(store)) + index + store
    )


def _build_rpm(name):
    lead = (
        b"\xed\xab\xee\xdb" + bytes([3, 0]) + struct.pack(">HH", 0, 1)
        + name.encode().ljust(66, b"\0") + struct.pack(">HH", 1, 5) + b"\0" * 16
    )
    sig = _build_header([(1000, TagType.INT32, [42])])
    sig += b"\0" * ((8 - len(sig) % 8) % 8)
    hdr = _build_header([
        (1000, TagType.STRING, [name]),
        (1001, TagType.STRING, ["1.0"]),
        (1002, TagType.STRING, ["1"]),
        (1022, TagType.STRING, ["noarch"]),
    ])
    return lead + sig + hdr


def _tags(*entries):
    return {tag_id: Tag(tag_id, tag_type, value) for tag_id, tag_type, value in entries}


@pytest.fixture
def package():
    lead = Lead(
        version_major=3, version_minor=0, name="hello-2.10-3.el7",
        type=0, architecture=1, operating_system=1, signature_type=5,
    )
    header = Header(version=1, tags=_tags(
        (1000, TagType.STRING, ["hello"]),
        (1001, TagType.STRING, ["2.10"]),
        (1002, TagType.STRING, ["3.el7"]),
        (1004, TagType.I18NSTRING, ["A friendly greeting program"]),
        (1005, TagType.I18NSTRING, ["A friendly greeting program.\nSecond line."]),
        (1006, TagType.INT32, [1479212430]),
        (1007, TagType.STRING, ["build.example.com"]),
        (1009, TagType.INT32, [11809071]),
        (1011, TagType.STRING, ["CentOS"]),
        (1014, TagType.STRING, ["BSD and Public Domain"]),
        (1015, TagType.STRING, ["Builder <builder@example.com>"]),
        (1016, TagType.I18NSTRING, ["Unspecified", "Development"]),
        (1020, TagType.STRING, ["https://example.com/"]),
        (1022, TagType.STRING, ["x86_64"]),
        (1044, TagType.STRING, ["hello-2.10-3.el7.src.rpm"]),
    ))
    return Package(lead=lead, signature=Header(version=1), header=header)


def test_format_info_fields(package):
    lines = format_info(package).split("\n")
    assert lines[:5] == [
        "Name        : hello",
        "Version     : 2.10",
        "Release     : 3.el7",
        "Architecture: x86_64",
        "Group       : Unspecified, Development",
    ]
    assert lines[5] == "Size        : 11809071"
    assert lines[6] == "License     : BSD and Public Domain"
    assert lines[7] == "Signature   : "
    assert lines[8] == "Source RPM  : hello-2.10-3.el7.src.rpm"
    assert lines[9] == f"Build Date  : {format_time(package.build_time)}"
    assert lines[10] == "Build Host  : build.example.com"
    assert lines[11] == "Packager    : Builder <builder@example.com>"
    assert lines[12] == "Vendor      : CentOS"
    assert lines[13] == "URL         : https://example.com/"
    assert lines[14] == "Summary     : A friendly greeting program"
    assert lines[15] == "Description :"


def test_format_info_ends_with_description(package):
    text = format_info(package)
    assert text.endswith(
        "Description :\nA friendly greeting program.\nSecond line.\n"
    )


def test_format_info_empty_package():
    lead = Lead(3, 0, "", 0, 0, 0, 5)
    empty = Package(lead=lead, signature=Header(), header=Header())
    lines = format_info(empty).split("\n")
    assert lines[0] == "Name        : "
    assert lines[4] == "Group       : "
    assert lines[5] == "Size        : 0"
    assert len(lines) == 18


@pytest.mark.parametrize("argv", [[], ["--help"]])
def test_main_usage(argv, capsys):
    assert main(argv) == 1
    assert capsys.readouterr().err == "usage: rpminfo [path ...]\n"


def test_main_reads_package(tmp_path, capsys):
    path = tmp_path / "demo.rpm"
    path.write_bytes(_build_rpm("demo"))
    assert main([str(path)]) == 0
    output = capsys.readouterr().out
    assert output.startswith("Name        : demo\nVersion     : 1.0\nRelease     : 1\n")
    assert "Architecture: noarch\n" in output


def test_main_reports_unreadable_package(tmp_path, capsys):
    good = tmp_path / "demo.rpm"
    good.write_bytes(_build_rpm("demo"))
    bad = tmp_path / "junk.rpm"
    bad.write_bytes(b"\0" * 200)
    assert main([str(bad), str(good)]) == 0
    captured = capsys.readouterr()
    assert captured.err == f"error reading {bad}: rpm: invalid file descriptor\n"
    assert captured.out.startswith("\nName        : demo\n")