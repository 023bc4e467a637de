import pytest

from chtypes.enums import Enum8, Enum16


@pytest.mark.parametrize("code", [-128, -1, 5, 127])
def test_enum8_round_trip(code):
    assert Enum8.of(code).internal() == code


@pytest.mark.parametrize("code", [-32768, -200, 300, 32767])
def test_enum16_round_trip(code):
    assert Enum16.of(code).internal() == code


def test_enum8_display():
    assert str(Enum8.of(3)) == "Enum8(3)"
    assert repr(Enum8.of(3)) == str(Enum8.of(3))


def test_enum16_display():
    assert str(Enum16.of(7)) == "Enum(7)"
    assert repr(Enum16.of(7)) == str(Enum16.of(7))


def test_default_is_zero():
    assert Enum8().internal() == 0
    assert Enum16().internal() == Enum8().internal()


def test_equality():
    assert Enum8.of(1) == Enum8.of(1)
    assert not Enum8.of(1) == Enum8.of(2)
    assert not Enum8.of(1) == Enum16.of(1)


@pytest.mark.parametrize("code", [128, -129])
def test_enum8_out_of_range(code):
    with pytest.raises(ValueError):
        Enum8.of(code)


@pytest.mark.parametrize("code", [32768, -32769])
def test_enum16_out_of_range(code):
    with pytest.raises(ValueError):
        Enum16.of(code)