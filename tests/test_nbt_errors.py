import pytest

from cubekit.nbt_errors import NbtError


def test_message_is_kept():
    err = NbtError("reached maximum recursion depth")
    assert str(err) == "reached maximum recursion depth"
    assert err.message == "reached maximum recursion depth"


def test_caught_as_value_error():
    err = NbtError("could not convert CESU-8 data to UTF-8")
    assert err.message == "could not convert CESU-8 data to UTF-8"
    with pytest.raises(ValueError, match="could not convert CESU-8 data to UTF-8") as info:
        raise err
    assert info.value is err
    assert str(info.value) == "could not convert CESU-8 data to UTF-8"


def test_cause_is_preserved():
    original = OSError("stream closed")
    with pytest.raises(NbtError) as info:
        raise NbtError(str(original)) from original
    assert info.value.__cause__ is original
    assert str(info.value) == "stream closed"