import io
import struct

import pytest

from rpmread.lead import Lead, NotRPMFileError, read_lead
from rpmread.util import RPMError


def _lead(major=3, minor=0, name=b"example-1.0-1", sigtype=5, magic=b"\xed\xab\xee\xdb"):
    return (
        magic
        + bytes([major, minor])
        + struct.pack(">HH", 0, 1)
        + name.ljust(66, b"\0")
        + struct.pack(">HH", 1, sigtype)
        + bytes(16)
    )


def test_reads_fields():
    lead = read_lead(io.BytesIO(_lead(major=3, minor=0)))
    assert lead == Lead(
        version_major=3,
        version_minor=0,
        name="example-1.0-1",
        type=0,
        architecture=1,
        operating_system=1,
        signature_type=5,
    )


def test_consumes_exactly_lead():
    stream = io.BytesIO(_lead() + b"rest")
    read_lead(stream)
    assert stream.read() == b"rest"


def test_version_four_accepted():
    assert read_lead(io.BytesIO(_lead(major=4))).version_major == 4


def test_bad_magic():
    with pytest.raises(NotRPMFileError, match="invalid file descriptor"):
        read_lead(io.BytesIO(_lead(magic=b"\0\0\0\0")))


@pytest.mark.parametrize("major", [2, 5])
def test_unsupported_version(major):
    with pytest.raises(RPMError, match=f"unsupported rpm version: {major}"):
        read_lead(io.BytesIO(_lead(major=major)))


def test_short_input():
    with pytest.raises(RPMError):
        read_lead(io.BytesIO(_lead()[:50]))


def test_not_rpm_error_is_rpm_error():
    with pytest.raises(RPMError):
        read_lead(io.BytesIO(b"x" * 96))