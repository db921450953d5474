"""Decoding of uncompressed binary NBT into compounds."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, BinaryIO

from cubekit.nbt_encode import MAX_DEPTH
from cubekit.nbt_errors import NbtError
from cubekit.nbt_tag import Tag
from cubekit.nbt_value import Compound, NbtList, Value

_U8 = struct.Struct(">B")
_U16 = struct.Struct(">H")
_I32 = struct.Struct(">i")

_SCALAR_CODES = {
    Tag.BYTE: "b",
    Tag.SHORT: "h",
    Tag.INT: "i",
    Tag.LONG: "q",
    Tag.FLOAT: "f",
    Tag.DOUBLE: "d",
}
_SCALARS = {tag: struct.Struct(">" + code) for tag, code in _SCALAR_CODES.items()}
_ARRAYS = {
    Tag.BYTE_ARRAY: ("byte array", "b", 1),
    Tag.INT_ARRAY: ("int array", "i", 4),
    Tag.LONG_ARRAY: ("long array", "q", 8),
}

# Smallest encoded size of one list element of each type.
_MIN_ELEMENT_SIZE = {
    Tag.BYTE: 1,
    Tag.SHORT: 2,
    Tag.INT: 4,
    Tag.LONG: 8,
    Tag.FLOAT: 4,
    Tag.DOUBLE: 8,
    Tag.BYTE_ARRAY: 4,
    Tag.STRING: 2,
    Tag.LIST: 5,
    Tag.COMPOUND: 1,
    Tag.INT_ARRAY: 4,
    Tag.LONG_ARRAY: 4,
}


def decode_cesu8(data: bytes) -> str:
    """Decode Java-style CESU-8 bytes into a string.

    Raises :class:`NbtError` when the bytes are not valid CESU-8, including
    four-byte UTF-8 sequences and unpaired surrogates.
    """
    raw = bytes(data)
    if raw.isascii():
        return raw.decode("ascii")
    try:
        text = raw.replace(b"\xc0\x80", b"\x00").decode("utf-8", "surrogatepass")
        if any(ord(ch) > 0xFFFF for ch in text):
            raise ValueError("four-byte sequence")
        return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le")
    except ValueError as exc:
        raise NbtError("could not convert CESU-8 data to UTF-8") from exc


class _Decoder:
    """Reads NBT structures from a byte buffer, tracking position and depth."""

    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)
        self.pos = 0
        self.depth = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos

    @contextmanager
    def nested(self) -> Iterator[None]:
        if self.depth >= MAX_DEPTH:
            raise NbtError("reached maximum recursion depth")
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    def unpack(self, st: struct.Struct) -> Any:
        if st.size > self.remaining:
            raise NbtError("unexpected end of input")
        (value,) = st.unpack_from(self.data, self.pos)
        self.pos += st.size
        return value

    def unpack_many(self, code: str, count: int) -> list:
        st = struct.Struct(f">{count}{code}")
        if st.size > self.remaining:
            raise NbtError("unexpected end of input")
        values = list(st.unpack_from(self.data, self.pos))
        self.pos += st.size
        return values

    def tag(self) -> Tag:
        byte = self.unpack(_U8)
        try:
            return Tag(byte)
        except ValueError:
            raise NbtError(f"invalid tag byte of {byte:#x}") from None

    def string(self) -> str:
        length = self.unpack(_U16)
        if length > self.remaining:
            raise NbtError(f"string of length {length} exceeds remainder of input")
        text = decode_cesu8(self.data[self.pos : self.pos + length])
        self.pos += length
        return text

    def array(self, tag: Tag) -> list[int]:
        what, code, size = _ARRAYS[tag]
        length = self.unpack(_I32)
        if length < 0:
            raise NbtError(f"negative {what} length of {length}")
        if length * size > self.remaining:
            raise NbtError(f"{what} of length {length} exceeds remainder of input")
        return self.unpack_many(code, length)

    def leaf(self, tag: Tag) -> Any:
        scalar = _SCALARS.get(tag)
        if scalar is not None:
            return self.unpack(scalar)
        if tag is Tag.STRING:
            return self.string()
        return self.array(tag)

    def compound(self) -> Compound:
        result = Compound()
        while (tag := self.tag()) is not Tag.END:
            name = self.string()
            if tag is Tag.COMPOUND:
                with self.nested():
                    payload: Any = self.compound()
            elif tag is Tag.LIST:
                with self.nested():
                    payload = self.any_list()
            else:
                payload = self.leaf(tag)
            result[name] = Value(tag, payload)
        return result

    def list_length(self, element: Tag) -> int:
        length = self.unpack(_I32)
        if length < 0:
            raise NbtError(f"negative {element} list length of {length}")
        if length * _MIN_ELEMENT_SIZE[element] > self.remaining:
            raise NbtError(f"{element} list of length {length} exceeds remainder of input")
        return length

    def any_list(self) -> NbtList:
        element = self.tag()
        if element is Tag.END:
            length = self.unpack(_I32)
            if length != 0:
                raise NbtError(f"TAG_End list with nonzero length of {length}")
            return NbtList(Tag.BYTE, [])

        length = self.list_length(element)
        items: list = []
        if element is Tag.LIST:
            with self.nested():
                for _ in range(length):
                    items.append(self.any_list())
        elif element is Tag.COMPOUND:
            with self.nested():
                for _ in range(length):
                    items.append(self.compound())
        elif element in _SCALAR_CODES:
            items = self.unpack_many(_SCALAR_CODES[element], length)
        else:
            for _ in range(length):
                items.append(self.leaf(element))
        return NbtList(element, items)

    def root(self) -> tuple[Compound, str]:
        tag = self.tag()
        if tag is not Tag.COMPOUND:
            raise NbtError(f"expected root tag for compound (got {tag})")
        name = self.string()
        return self.compound(), name


def _decode(data: bytes) -> tuple[Compound, str, int]:
    decoder = _Decoder(data)
    compound, name = decoder.root()
    return compound, name, decoder.pos


def from_binary(data: bytes) -> tuple[Compound, str]:
    """Decode uncompressed NBT data; return the root compound and its name.

    Bytes after the root compound are ignored.
    """
    compound, name, _ = _decode(data)
    return compound, name


def read_binary(stream: BinaryIO) -> tuple[Compound, str]:
    """Read uncompressed NBT from ``stream``; return the root compound and its name.

    The rest of the stream is read; if it is seekable it is left positioned
    just after the root compound.
    """
    try:
        data = stream.read()
    except OSError as exc:
        raise NbtError(str(exc)) from exc
    compound, name, consumed = _decode(data)
    unread = len(data) - consumed
    if unread and stream.seekable():
        stream.seek(-unread, 1)
    return compound, name