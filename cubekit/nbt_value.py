"""NBT values, homogeneous lists and compounds."""

from __future__ import annotations

import struct
from array import array
from collections.abc import Callable, Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any

from cubekit.nbt_tag import Tag

_INT_BITS = {Tag.BYTE: 8, Tag.SHORT: 16, Tag.INT: 32, Tag.LONG: 64}
_ARRAY_ELEMENT = {
    Tag.BYTE_ARRAY: Tag.BYTE,
    Tag.INT_ARRAY: Tag.INT,
    Tag.LONG_ARRAY: Tag.LONG,
}
_I32_MIN = -(1 << 31)
_I32_MAX = (1 << 31) - 1


def _check_int(tag: Tag, x: Any) -> int:
    if not isinstance(x, int):
        raise TypeError(f"{tag} value must be an integer, got {type(x).__name__}")
    half = 1 << (_INT_BITS[tag] - 1)
    if not -half <= x < half:
        raise ValueError(f"{x} is out of range for {tag}")
    return int(x)


def _check_float(tag: Tag, x: Any) -> float:
    if not isinstance(x, (int, float)):
        raise TypeError(f"{tag} value must be a number, got {type(x).__name__}")
    return float(x)


def _to_f32(x: float) -> float:
    try:
        return struct.unpack(">f", struct.pack(">f", x))[0]
    except OverflowError as exc:
        raise ValueError(f"{x} is out of range for float") from exc


def _check_array(tag: Tag, x: Any) -> list[int]:
    if tag is Tag.BYTE_ARRAY and isinstance(x, (bytes, bytearray, memoryview)):
        return list(array("b", bytes(x)))
    if isinstance(x, (str, bytes, bytearray)) or not isinstance(x, Iterable):
        raise TypeError(f"{tag} value must be an iterable of integers")
    element = _ARRAY_ELEMENT[tag]
    return [_check_int(element, v) for v in x]


def _normalize(tag: Tag, x: Any) -> Any:
    """Check that ``x`` fits ``tag`` and return it in canonical form."""
    if tag in _INT_BITS:
        return _check_int(tag, x)
    if tag is Tag.FLOAT:
        return _to_f32(_check_float(tag, x))
    if tag is Tag.DOUBLE:
        return _check_float(tag, x)
    if tag in _ARRAY_ELEMENT:
        return _check_array(tag, x)
    if tag is Tag.STRING:
        if not isinstance(x, str):
            raise TypeError(f"string value must be str, got {type(x).__name__}")
        return x
    if tag is Tag.LIST:
        if not isinstance(x, NbtList):
            raise TypeError(f"list value must be an NbtList, got {type(x).__name__}")
        return x
    if tag is Tag.COMPOUND:
        if isinstance(x, Compound):
            return x
        if isinstance(x, Mapping):
            return Compound(x)
        raise TypeError(f"compound value must be a mapping, got {type(x).__name__}")
    raise ValueError("TAG_End does not carry a value")


@dataclass
class Value:
    """An arbitrary NBT value: a tag and the payload it describes."""

    tag: Tag
    payload: Any

    def __post_init__(self) -> None:
        self.tag = Tag(self.tag)
        self.payload = _normalize(self.tag, self.payload)

    @classmethod
    def byte(cls, value: int) -> Value:
        return cls(Tag.BYTE, value)

    @classmethod
    def short(cls, value: int) -> Value:
        return cls(Tag.SHORT, value)

    @classmethod
    def int(cls, value: int) -> Value:
        return cls(Tag.INT, value)

    @classmethod
    def long(cls, value: int) -> Value:
        return cls(Tag.LONG, value)

    @classmethod
    def float(cls, value: float) -> Value:
        """A 32-bit float; the payload is rounded to single precision."""
        return cls(Tag.FLOAT, value)

    @classmethod
    def double(cls, value: float) -> Value:
        return cls(Tag.DOUBLE, value)

    @classmethod
    def byte_array(cls, values: Iterable[int] | bytes) -> Value:
        """Signed bytes; raw ``bytes`` are reinterpreted as signed."""
        return cls(Tag.BYTE_ARRAY, values)

    @classmethod
    def string(cls, value: str) -> Value:
        return cls(Tag.STRING, value)

    @classmethod
    def list(cls, value: NbtList) -> Value:
        return cls(Tag.LIST, value)

    @classmethod
    def compound(cls, value: Mapping[str, Any]) -> Value:
        return cls(Tag.COMPOUND, value)

    @classmethod
    def int_array(cls, values: Iterable[int]) -> Value:
        return cls(Tag.INT_ARRAY, values)

    @classmethod
    def long_array(cls, values: Iterable[int]) -> Value:
        return cls(Tag.LONG_ARRAY, values)

    @classmethod
    def from_bool(cls, value: bool) -> Value:
        """Booleans are stored as a 0 or 1 byte."""
        return cls(Tag.BYTE, 1 if value else 0)


@dataclass
class NbtList:
    """A homogeneous NBT list whose elements all have type ``element``."""

    element: Tag
    items: list = field(default_factory=list)

    def __post_init__(self) -> None:
        self.element = Tag(self.element)
        if self.element is Tag.END:
            raise ValueError("list elements cannot be TAG_End")
        self.items = [_normalize(self.element, x) for x in self.items]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)


class Compound(MutableMapping):
    """A map from string keys to NBT values, iterated in sorted key order."""

    def __init__(self, items: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None) -> None:
        self._map: dict[str, Value] = {}
        if items is not None:
            self.update(items)

    def __getitem__(self, key: str) -> Value:
        return self._map[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise TypeError(f"compound keys must be str, got {type(key).__name__}")
        self._map[key] = to_value(value)

    def __delitem__(self, key: str) -> None:
        if key not in self._map:
            raise KeyError(key)
        self._map.pop(key)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._map))

    def __len__(self) -> int:
        return len(self._map)

    def __repr__(self) -> str:
        return f"Compound({dict(self.items())!r})"

    def insert(self, key: str, value: Any) -> Value | None:
        """Set ``key`` and return the value it replaced, if any."""
        previous = self._map.get(key)
        self[key] = value
        return previous

    def remove(self, key: str) -> Value | None:
        """Remove ``key`` and return its value, or None if it was absent."""
        return self._map.pop(key, None)

    def append(self, other: MutableMapping[str, Any]) -> None:
        """Move every entry of ``other`` into this compound, leaving it empty."""
        for key in list(other):
            self[key] = other[key]
        other.clear()

    def retain(self, predicate: Callable[[str, Value], bool]) -> None:
        """Keep only the entries for which ``predicate(key, value)`` is true."""
        for key in [k for k, v in self._map.items() if not predicate(k, v)]:
            del self._map[key]


def to_value(obj: Any) -> Value:
    """Convert a plain Python object to a :class:`Value`.

    Integers become ints when they fit 32 bits and longs otherwise, floats
    become doubles, bytes become byte arrays and mappings become compounds.
    """
    if isinstance(obj, Value):
        return obj
    if isinstance(obj, bool):
        return Value.from_bool(obj)
    if isinstance(obj, int):
        if _I32_MIN <= obj <= _I32_MAX:
            return Value.int(obj)
        return Value.long(obj)
    if isinstance(obj, float):
        return Value.double(obj)
    if isinstance(obj, str):
        return Value.string(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return Value.byte_array(obj)
    if isinstance(obj, NbtList):
        return Value.list(obj)
    if isinstance(obj, Mapping):
        return Value.compound(obj)
    raise TypeError(f"cannot convert {type(obj).__name__} to an NBT value")