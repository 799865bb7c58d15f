"""Header tags and their data types."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class TagType(enum.IntEnum):
    """The data type of a tag's value."""

    NULL = 0
    CHAR = 1
    INT8 = 2
    INT16 = 3
    INT32 = 4
    INT64 = 5
    STRING = 6
    BINARY = 7
    STRING_ARRAY = 8
    I18NSTRING = 9

    def __str__(self) -> str:
        if self is TagType.NULL:
            return "UNKNOWN"
        return _TAG_TYPE_NAMES[self]


_TAG_TYPE_NAMES = {
    TagType.CHAR: "CHAR",
    TagType.INT8: "INT8",
    TagType.INT16: "INT16",
    TagType.INT32: "INT32",
    TagType.INT64: "INT64",
    TagType.STRING: "STRING",
    TagType.BINARY: "BIN",
    TagType.STRING_ARRAY: "STRING_ARRAY",
    TagType.I18NSTRING: "I18NSTRING",
}


def _is_sequence_of(value: Any, kind: type) -> bool:
    return isinstance(value, (list, tuple)) and all(
        isinstance(item, kind) for item in value
    )


@dataclass
class Tag:
    """A header entry and its value.

    The accessors return an empty value when the tag holds a different type.
    """

    id: int
    type: TagType
    value: Any = None

    def strings(self) -> list[str]:
        """The value as strings, for STRING, STRING_ARRAY and I18NSTRING tags."""
        if self.value and _is_sequence_of(self.value, str):
            return list(self.value)
        return []

    def string(self) -> str:
        """The first string of the value, or an empty string."""
        values = self.strings()
        return values[0] if values else ""

    def ints(self) -> list[int]:
        """The value as integers, for INT16, INT32 and INT64 tags."""
        if self.value and _is_sequence_of(self.value, int):
            return list(self.value)
        return []

    def int(self) -> int:
        """The first integer of the value, or 0."""
        values = self.ints()
        return values[0] if values else 0

    def bytes(self) -> bytes:
        """The value as bytes, for CHAR, INT8 and BIN tags."""
        if isinstance(self.value, (bytes, bytearray)):
            return bytes(self.value)
        return b""