"""The tag bytes that identify NBT value types."""

from __future__ import annotations

from enum import IntEnum


class Tag(IntEnum):
    """An NBT type tag; the integer value is the byte written on the wire."""

    END = 0
    BYTE = 1
    SHORT = 2
    INT = 3
    LONG = 4
    FLOAT = 5
    DOUBLE = 6
    BYTE_ARRAY = 7
    STRING = 8
    LIST = 9
    COMPOUND = 10
    INT_ARRAY = 11
    LONG_ARRAY = 12

    @property
    def label(self) -> str:
        """Human readable name of the tag."""
        return _LABELS[self]

    def __str__(self) -> str:
        return _LABELS[self]

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


_LABELS = {
    Tag.END: "end",
    Tag.BYTE: "byte",
    Tag.SHORT: "short",
    Tag.INT: "int",
    Tag.LONG: "long",
    Tag.FLOAT: "float",
    Tag.DOUBLE: "double",
    Tag.BYTE_ARRAY: "byte array",
    Tag.STRING: "string",
    Tag.LIST: "list",
    Tag.COMPOUND: "compound",
    Tag.INT_ARRAY: "int array",
    Tag.LONG_ARRAY: "long array",
}