import io
import struct

import pytest

from rpmread.header import Header
from rpmread.rpmdump import dump_header, dump_package, main
from rpmread.tag import Tag, TagType

_STRING_TYPES = (TagType.STRING, TagType.STRING_ARRAY, TagType.I18NSTRING)


def _build_header(entries):
    index = b""
    store = b""
    for tag_id, tag_type, value in entries:
        if tag_type in _STRING_TYPES:
            data = b"".join(s.encode() + b"\0" for s in value)
            count = len(value)
        elif tag_type == TagType.INT32:
            data = struct.pack(f">{len(value)}I", *value)
            count = len(value)
        else:
            data = bytes(value)
            count = len(value)
        index += struct.pack(">IIII", tag_id, tag_type, len(store), count)
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


@pytest.fixture
def rpm_path(tmp_path):
    path = tmp_path / "demo.rpm"
    path.write_bytes(_build_rpm("demo"))
    return str(path)


def _dump(header):
    out = io.StringIO()
    dump_header(header, out)
    return out.getvalue()


def test_dump_header_ints():
    header = Header(version=1, tags={1000: Tag(1000, TagType.INT32, [13140])})
    assert _dump(header) == (
        "    version: 1\n"
        "    tags:\n"
        "      - tag: 1000\n"
        "        type: INT32\n"
        "        value: [13140]\n"
    )


def test_dump_short_bytes():
    data = bytes.fromhex("74e3cd3288e69c33fbe475badfac0e7c")
    header = Header(version=1, tags={1004: Tag(1004, TagType.BINARY, data)})
    lines = _dump(header).splitlines()
    assert lines[3] == "        type: BIN"
    assert lines[4] == "        value: [74 e3 cd 32 88 e6 9c 33 fb e4 75 ba df ac 0e 7c]"


def test_dump_long_bytes_hex_dump():
    data = (
        bytes.fromhex("89021503050054 89c99c24c6a8a7f4a8".replace(" ", ""))
        + b"\0" * (0x210 - 16)
        + bytes.fromhex("e33fc3976f2137ff")
    )
    header = Header(version=1, tags={1002: Tag(1002, TagType.BINARY, data)})
    lines = _dump(header).splitlines()
    assert lines[4] == "        value: |"
    dump_lines = lines[5:]
    assert dump_lines[0] == (
        "          00000000  89 02 15 03 05 00 54 89  "
        "c9 9c 24 c6 a8 a7 f4 a8  |......T...$.....|"
    )
    assert dump_lines[-1] == (
        "          00000210  e3 3f c3 97 6f 21 37 ff" + " " * 27 + "|.?..o!7.........|"
    )
    assert len({len(line) for line in dump_lines}) == 1


def test_dump_single_string():
    header = Header(version=1, tags={1000: Tag(1000, TagType.STRING, ["hello"])})
    lines = _dump(header).splitlines()
    assert lines[3] == "        type: STRING"
    assert lines[4] == '        value: ["hello"]'


def test_dump_string_array_with_multiline_value():
    header = Header(
        version=1,
        tags={1005: Tag(1005, TagType.STRING_ARRAY, ["one", "a\nb"])},
    )
    lines = _dump(header).splitlines()
    assert lines[4:] == [
        "        value:",
        '          - "one"',
        "          - |",
        "            a",
        "            b",
    ]


def test_dump_null_tag():
    header = Header(version=1, tags={7: Tag(7, TagType.NULL)})
    lines = _dump(header).splitlines()
    assert lines[3] == "        type: UNKNOWN"
    assert lines[4] == "        value: <nil>"


def test_dump_package(rpm_path):
    out = io.StringIO()
    dump_package(rpm_path, out)
    lines = out.getvalue().splitlines()
    assert lines[0] == f"- path: {rpm_path}"
    assert lines[1] == "  signature:"
    assert "  header:" in lines
    assert lines[lines.index("  header:") - 1] == ""
    assert '        value: ["demo"]' in lines


def test_dump_package_missing_file(tmp_path):
    path = str(tmp_path / "missing.rpm")
    out = io.StringIO()
    dump_package(path, out)
    lines = out.getvalue().splitlines()
    assert lines[0] == f"- path: {path}"
    assert lines[1].startswith("  error: ")
    assert len(lines) == 2


def test_dump_package_not_rpm(tmp_path):
    path = tmp_path / "junk.rpm"
    path.write_bytes(b"\0" * 200)
    out = io.StringIO()
    dump_package(str(path), out)
    assert out.getvalue().splitlines()[1] == "  error: rpm: invalid file descriptor"


@pytest.mark.parametrize("argv", [[], ["-h"]])
def test_main_usage(argv, capsys):
    assert main(argv) == 1
    captured = capsys.readouterr()
    assert captured.err == "usage: rpmdump [package ...]\n"
    assert captured.out == ""


def test_main_two_packages(rpm_path, capsys):
    assert main([rpm_path, rpm_path]) == 0
    output = capsys.readouterr().out
    assert output.startswith("---\n- path: ")
    assert output.count(f"- path: {rpm_path}\n") == 2
    assert f"\n\n- path: {rpm_path}\n" in output