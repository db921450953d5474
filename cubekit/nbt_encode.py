"""Encoding of compounds into uncompressed binary NBT."""

from __future__ import annotations

import struct
from collections.abc import Mapping
from typing import Any, BinaryIO

from cubekit.nbt_errors import NbtError
from cubekit.nbt_tag import Tag
from cubekit.nbt_value import Compound, NbtList

MAX_DEPTH = 512
"""Maximum nesting of lists and compounds accepted by the encoder and decoder."""

_I32_MAX = (1 << 31) - 1
_U16_MAX = 0xFFFF

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
_ARRAY_CODES = {
    Tag.BYTE_ARRAY: "b",
    Tag.INT_ARRAY: "i",
    Tag.LONG_ARRAY: "q",
}


def encode_cesu8(text: str) -> bytes:
    """Encode ``text`` as Java-style CESU-8.

    NUL becomes the two bytes ``C0 80`` and characters outside the Basic
    Multilingual Plane are written as a surrogate pair of three bytes each.
    """
    if text.isascii() and "\0" not in text:
        return text.encode("ascii")
    out = bytearray()
    for ch in text:
        cp = ord(ch)
        if cp == 0:
            out += b"\xc0\x80"
        elif cp >= 0x10000:
            cp -= 0x10000
            out += chr(0xD800 | (cp >> 10)).encode("utf-8", "surrogatepass")
            out += chr(0xDC00 | (cp & 0x3FF)).encode("utf-8", "surrogatepass")
        else:
            out += ch.encode("utf-8", "surrogatepass")
    return bytes(out)


class _Encoder:
    """Accumulates the binary form of a compound tree."""

    def __init__(self) -> None:
        self.out = bytearray()
        self.depth = 0

    def descend(self) -> None:
        if self.depth >= MAX_DEPTH:
            raise NbtError("reached maximum recursion depth")
        self.depth += 1

    def length(self, n: int, what: str) -> None:
        if n > _I32_MAX:
            raise NbtError(f"{what} of length {n} exceeds maximum of {_I32_MAX}")
        self.out += _I32.pack(n)

    def string(self, s: str) -> None:
        data = encode_cesu8(s)
        if len(data) > _U16_MAX:
            raise NbtError(f"string of length {len(data)} exceeds maximum of {_U16_MAX}")
        self.out += _U16.pack(len(data))
        self.out += data

    def leaf(self, tag: Tag, payload: Any) -> None:
        scalar = _SCALARS.get(tag)
        if scalar is not None:
            self.out += scalar.pack(payload)
        elif tag is Tag.STRING:
            self.string(payload)
        else:
            code = _ARRAY_CODES[tag]
            self.length(len(payload), str(tag))
            self.out += struct.pack(f">{len(payload)}{code}", *payload)

    def compound(self, compound: Compound) -> None:
        for key, value in compound.items():
            tag = value.tag
            self.out.append(tag)
            self.string(key)
            if tag is Tag.COMPOUND:
                self.descend()
                try:
                    self.compound(value.payload)
                finally:
                    self.depth -= 1
            elif tag is Tag.LIST:
                self.descend()
                try:
                    self.list(value.payload)
                finally:
                    self.depth -= 1
            else:
                self.leaf(tag, value.payload)
        self.out.append(Tag.END)

    def list(self, nbt_list: NbtList) -> None:
        element = nbt_list.element
        self.out.append(element)
        self.length(len(nbt_list), f"{element} list")
        if element is Tag.COMPOUND:
            self.descend()
            try:
                for item in nbt_list:
                    self.compound(item)
            finally:
                self.depth -= 1
        elif element is Tag.LIST:
            self.descend()
            try:
                for item in nbt_list:
                    self.list(item)
            finally:
                self.depth -= 1
        elif element in _SCALAR_CODES:
            code = _SCALAR_CODES[element]
            self.out += struct.pack(f">{len(nbt_list)}{code}", *nbt_list.items)
        else:
            for item in nbt_list:
                self.leaf(element, item)


def _as_compound(compound: Any) -> Compound:
    if isinstance(compound, Compound):
        return compound
    if isinstance(compound, Mapping):
        return Compound(compound)
    raise TypeError(f"the root value must be a compound, got {type(compound).__name__}")


def to_binary(compound: Mapping[str, Any], root_name: str = "") -> bytes:
    """Encode ``compound`` as uncompressed NBT with the given root name."""
    root = _as_compound(compound)
    encoder = _Encoder()
    encoder.out.append(Tag.COMPOUND)
    encoder.string(root_name)
    encoder.compound(root)
    return bytes(encoder.out)


def write_binary(stream: BinaryIO, compound: Mapping[str, Any], root_name: str = "") -> None:
    """Encode ``compound`` and write it to ``stream``.

    Nothing is written if encoding fails. A failing stream raises
    :class:`NbtError` chained to the original ``OSError``.
    """
    data = to_binary(compound, root_name)
    try:
        stream.write(data)
    except OSError as exc:
        raise NbtError(str(exc)) from exc