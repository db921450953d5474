import math

import pytest

from cubekit.nbt_tag import Tag
from cubekit.nbt_value import Compound, NbtList, Value, to_value

I32_MIN = -2147483648
I32_MAX = 2147483647
I64_MAX = 9223372036854775807


def test_integer_constructors_carry_tags():
    assert Value.byte(123).tag is Tag.BYTE
    assert Value.short(-7).tag is Tag.SHORT
    assert Value.int(I32_MIN).payload == I32_MIN
    assert Value.long(I64_MAX).payload == I64_MAX


@pytest.mark.parametrize(
    "make, value",
    [
        (Value.byte, 128),
        (Value.byte, -129),
        (Value.short, 1 << 15),
        (Value.int, I32_MAX + 1),
        (Value.long, I64_MAX + 1),
    ],
)
def test_integer_out_of_range(make, value):
    with pytest.raises(ValueError):
        make(value)


def test_wrong_payload_type():
    with pytest.raises(TypeError):
        Value.int("5")
    with pytest.raises(TypeError):
        Value.string(5)


def test_end_tag_has_no_value():
    with pytest.raises(ValueError):
        Value(Tag.END, 0)


def test_float_is_single_precision():
    assert Value.float(1e10).payload == 1e10
    v = Value.float(3.1415)
    assert Value.float(v.payload) == v
    assert abs(v.payload - 3.1415) < 1e-6
    with pytest.raises(ValueError):
        Value.float(1e39)


def test_double_keeps_infinity():
    assert Value.double(math.inf).payload == math.inf


def test_from_bool():
    assert Value.from_bool(True) == Value.byte(1)
    assert Value.from_bool(False) == Value.byte(0)


def test_byte_array_from_bytes_is_signed():
    assert Value.byte_array(b"\x00\x02\x03") == Value.byte_array([0, 2, 3])
    assert Value.byte_array(b"\xff").payload == [-1]


def test_arrays_check_elements():
    assert Value.int_array([5, -9, I32_MIN, 0, I32_MAX]).payload == [5, -9, I32_MIN, 0, I32_MAX]
    assert Value.long_array([123, 456, 789]).tag is Tag.LONG_ARRAY
    with pytest.raises(ValueError):
        Value.int_array([I32_MAX + 1])
    with pytest.raises(TypeError):
        Value.long_array("123")


def test_list_length_and_iteration():
    lst = NbtList(Tag.INT, [3, -7, 5])
    assert len(lst) == 3
    assert list(lst) == [3, -7, 5]
    assert len(NbtList(Tag.BYTE)) == 0


def test_list_is_homogeneous():
    with pytest.raises(ValueError):
        NbtList(Tag.BYTE, [200])
    with pytest.raises(TypeError):
        NbtList(Tag.STRING, ["foo", 1])
    with pytest.raises(ValueError):
        NbtList(Tag.END)


def test_empty_lists_of_different_types_differ():
    assert NbtList(Tag.BYTE) == NbtList(Tag.BYTE, [])
    assert not NbtList(Tag.BYTE) == NbtList(Tag.INT)


def test_nested_lists_and_compounds():
    inner = NbtList(Tag.BYTE)
    outer = NbtList(Tag.LIST, [inner])
    assert list(outer) == [inner]
    compounds = NbtList(Tag.COMPOUND, [{"foo": 1}])
    assert list(compounds)[0]["foo"] == Value.int(1)


def test_to_value_conversions():
    assert to_value(0xDEAD) == Value.int(0xDEAD)
    assert to_value(I32_MAX + 1).tag is Tag.LONG
    assert to_value(True) == Value.byte(1)
    assert to_value(2.5) == Value.double(2.5)
    assert to_value("aé日") == Value.string("aé日")
    assert to_value(b"\x00\x02") == Value.byte_array([0, 2])
    lst = NbtList(Tag.INT, [1])
    assert to_value(lst) == Value.list(lst)
    assert to_value({"a": 1}).tag is Tag.COMPOUND
    v = Value.short(3)
    assert to_value(v) is v


def test_to_value_rejects_unknown():
    with pytest.raises(TypeError):
        to_value(object())
    with pytest.raises(ValueError):
        to_value(I64_MAX + 1)


def test_compound_converts_values():
    c = Compound({"int": 0xDEAD})
    assert c["int"] == Value.int(0xDEAD)
    assert c == Compound([("int", Value.int(0xDEAD))])


def test_compound_iterates_in_sorted_order():
    letters = ["g", "b", "d", "e", "h", "z", "m", "a", "q"]
    c = Compound()
    for letter in letters:
        c.insert(letter, Value.byte(0))
    assert list(c) == sorted(letters)
    assert len(c) == len(letters)


def test_compound_insert_and_remove():
    c = Compound()
    assert c.insert("foo", 1) is None
    assert c.insert("foo", 2) == Value.int(1)
    assert c.remove("foo") == Value.int(2)
    assert c.remove("foo") is None
    assert len(c) == 0


def test_compound_missing_key():
    c = Compound({"present": 1})
    with pytest.raises(KeyError):
        c["missing"]
    with pytest.raises(KeyError):
        del c["missing"]
    assert list(c) == ["present"]
    assert c["present"] == Value.int(1)


def test_compound_rejects_non_str_keys():
    with pytest.raises(TypeError):
        Compound()[1] = 2


def test_compound_append_moves_entries():
    a = Compound({"foo": 1, "bar": 2})
    b = Compound({"bar": 3, "baz": 4})
    a.append(b)
    assert len(b) == 0
    assert list(a) == ["bar", "baz", "foo"]
    assert a["bar"] == Value.int(3)


def test_compound_retain():
    c = Compound({"foo": 1, "bar": 2, "baz": 3})
    c.retain(lambda key, value: key.startswith("b"))
    assert list(c) == ["bar", "baz"]


def test_compound_clear():
    c = Compound({"foo": 1})
    c.clear()
    assert len(c) == 0
    assert c == Compound()