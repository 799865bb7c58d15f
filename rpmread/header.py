"""Reading of rpm header structures: the signature header and the main header."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import BinaryIO

from .tag import Tag, TagType
from .util import RPMError

MAX_HEADER_SIZE = 33554432

_INDEX_ENTRY = struct.Struct(">IIII")

_BYTE_KINDS = {
    TagType.BINARY: "binary",
    TagType.CHAR: "uint8",
    TagType.INT8: "int8",
}

_INT_KINDS = {
    TagType.INT16: ("int16", "H", 2),
    TagType.INT32: ("int32", "I", 4),
    TagType.INT64: ("int64", "q", 8),
}

_STRING_KINDS = (TagType.STRING, TagType.STRING_ARRAY, TagType.I18NSTRING)


@dataclass
class Header:
    """Metadata of an rpm package, stored as tags keyed by their identifier."""

    version: int = 0
    tags: dict[int, Tag] = field(default_factory=dict)
    size: int = 0

    def get_tag(self, tag_id: int) -> Tag:
        """Return the tag with the given identifier.

        A missing tag comes back as an empty NULL tag, whose accessors all
        yield empty values.
        """
        tag = self.tags.get(tag_id)
        if tag is None:
            return Tag(tag_id, TagType.NULL)
        return tag


def _read_exact(stream: BinaryIO, n: int) -> bytes:
    data = stream.read(n)
    if len(data) < n:
        raise RPMError("unexpected end of file")
    return data


def _decode_value(store: bytes, raw_type: int, offset: int, count: int, number: int):
    try:
        tag_type = TagType(raw_type)
    except ValueError:
        raise RPMError(f"unknown index data type: {raw_type:X}") from None

    if tag_type in _BYTE_KINDS:
        if offset + count > len(store):
            raise RPMError(
                f"{_BYTE_KINDS[tag_type]} value for index {number} is out of range"
            )
        return store[offset:offset + count]

    if tag_type in _INT_KINDS:
        name, code, width = _INT_KINDS[tag_type]
        if offset + width * count > len(store):
            raise RPMError(f"{name} value for index {number} is out of range")
        return list(struct.unpack_from(f">{count}{code}", store, offset))

    if tag_type in _STRING_KINDS:
        # at least one byte per string
        if offset + count > len(store):
            raise RPMError(f"[]string value for index {number} is out of range")
        values = []
        for _ in range(count):
            end = store.find(b"\0", offset)
            if end < 0:
                raise RPMError(f"string value for index {number} is out of range")
            values.append(store[offset:end].decode("utf-8", "replace"))
            offset = end + 1
        return values

    return None


def read_header(stream: BinaryIO, pad: bool) -> Header:
    """Read one header structure from a binary stream.

    With ``pad`` set, the padding that aligns the next structure to eight
    bytes is consumed as well.
    """
    intro = _read_exact(stream, 16)
    version = intro[3]
    count, size = struct.unpack_from(">II", intro, 8)
    if size > MAX_HEADER_SIZE:
        raise RPMError(
            f"header size exceeds the maximum of {MAX_HEADER_SIZE}: {size}"
        )
    if count * 16 > MAX_HEADER_SIZE:
        raise RPMError(
            f"header index size exceeds the maximum of {MAX_HEADER_SIZE}: {count * 16}"
        )

    index = []
    for i in range(count):
        entry = _INDEX_ENTRY.unpack(_read_exact(stream, 16))
        if entry[2] >= size:
            raise RPMError(f"offset of index {i} is out of range: {entry[2]}")
        index.append(entry)

    store = _read_exact(stream, size)
    tags: dict[int, Tag] = {}
    for i, (tag_id, raw_type, offset, value_count) in enumerate(index):
        if value_count < 1:
            raise RPMError(f"invalid value count for index {i}: {value_count}")
        value = _decode_value(store, raw_type, offset, value_count, i + 1)
        tags[tag_id] = Tag(tag_id, TagType(raw_type), value)

    padding = 0
    if pad:
        padding = (8 - size % 8) % 8
        if padding:
            _read_exact(stream, padding)

    return Header(
        version=version,
        tags=tags,
        size=16 + size + count * 16 + padding,
    )