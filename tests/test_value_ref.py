import uuid
from datetime import date, datetime, timezone

import pytest

from chtypes.decimal import Decimal
from chtypes.enums import Enum8
from chtypes.sql_type import SqlType, TypeKind
from chtypes.value import Value
from chtypes.value_ref import FromSqlError, ValueRef

K = TypeKind


def _int32_array():
    return ValueRef(
        K.ARRAY,
        (ValueRef(K.INT32, 1), ValueRef(K.INT32, 2), ValueRef(K.INT32, 3)),
        inner_type=SqlType(K.INT32),
    )


def _tuple():
    return ValueRef(
        K.TUPLE, (ValueRef(K.INT32, 1), ValueRef(K.STRING, b"text"), ValueRef(K.FLOAT64, 2.3))
    )


def test_display_strings():
    assert str(ValueRef(K.STRING, bytes([0, 159, 146, 150]))) == "[0, 159, 146, 150]"
    assert str(ValueRef(K.STRING, b"text")) == "text"


@pytest.mark.parametrize(
    "kind", [K.UINT8, K.UINT16, K.UINT32, K.UINT64, K.INT8, K.INT16, K.INT32, K.INT64]
)
def test_display_integers(kind):
    assert str(ValueRef(kind, 42)) == "42"


@pytest.mark.parametrize("kind", [K.FLOAT32, K.FLOAT64])
def test_display_floats(kind):
    assert str(ValueRef(kind, 42.0)) == "42"


def test_display_nullable():
    assert str(ValueRef(K.NULLABLE, None, inner_type=SqlType(K.UINT8))) == "NULL"
    assert str(ValueRef(K.NULLABLE, ValueRef(K.UINT8, 42))) == "42"


def test_display_array_and_tuple():
    assert str(_int32_array()) == "[1, 2, 3]"
    assert str(_tuple()) == "(1, text, 2.3)"


def test_display_dates():
    assert str(ValueRef(K.DATE, 0, "Zulu")) == "1970-01-01"
    assert format(ValueRef(K.DATE, 0, "Zulu"), "#") == "1970-01-01UTC"
    assert ValueRef(K.DATE, 0, "Zulu").format(True) == "1970-01-01UTC"
    assert str(ValueRef(K.DATETIME, 0, "Zulu")) == "1970-01-01 00:00:00"
    assert (
        format(ValueRef(K.DATETIME, 0, "Zulu"), "#")
        == "Thu, 01 Jan 1970 00:00:00 +0000"
    )


def test_display_datetime64():
    v = ValueRef(K.DATETIME, 1_546_300_800_000, "UTC", precision=3)
    assert str(v) == "2019-01-01 00:00:00"


def test_display_decimal_and_enum():
    assert str(ValueRef(K.DECIMAL, Decimal.of(2.0, 2))) == "2.00"
    assert str(ValueRef(K.ENUM8, Enum8(3))) == "Enum8(3)"


def test_uuid():
    raw = uuid.UUID("936da01f-9abd-4d9d-80c7-02af85c822a8").bytes
    buffer = raw[7::-1] + raw[:7:-1]
    assert str(ValueRef(K.UUID, buffer)) == "936da01f-9abd-4d9d-80c7-02af85c822a8"


@pytest.mark.parametrize(
    "kind,data",
    [
        (K.UINT8, 42), (K.UINT16, 42), (K.UINT32, 42), (K.UINT64, 42),
        (K.INT8, 42), (K.INT16, 42), (K.INT32, 42), (K.INT64, 42),
        (K.FLOAT32, 42.0), (K.FLOAT64, 42.0),
    ],
)
def test_value_from_ref_numbers(kind, data):
    assert ValueRef(kind, data).to_value() == Value(kind, data)


def test_value_from_ref_compound():
    assert ValueRef(K.DATE, 42, "Zulu").to_value() == Value(K.DATE, 42, "Zulu")
    assert ValueRef(K.DATETIME, 42, "Zulu").to_value() == Value(K.DATETIME, 42, "Zulu")
    assert ValueRef(K.DECIMAL, Decimal.of(2.0, 4)).to_value() == Value(
        K.DECIMAL, Decimal.of(2.0, 4)
    )
    assert _int32_array().to_value() == Value(
        K.ARRAY,
        (Value(K.INT32, 1), Value(K.INT32, 2), Value(K.INT32, 3)),
        inner_type=SqlType(K.INT32),
    )
    assert _tuple().to_value() == Value(
        K.TUPLE, (Value(K.INT32, 1), Value(K.STRING, b"text"), Value(K.FLOAT64, 2.3))
    )


def test_to_value_returns_plain_values():
    owned = _int32_array().to_value()
    assert list(owned.data) == [Value(K.INT32, 1), Value(K.INT32, 2), Value(K.INT32, 3)]
    assert [str(v) for v in owned.data] == ["1", "2", "3"]
    assert not any(isinstance(v, ValueRef) for v in owned.data)


def test_from_value_round_trip():
    original = Value(K.NULLABLE, Value(K.UINT32, 7))
    ref = ValueRef.from_value(original)
    assert isinstance(ref.data, ValueRef)
    assert ref == ValueRef(K.NULLABLE, ValueRef(K.UINT32, 7))
    assert ref.to_value() == original


def test_get_sql_type():
    assert ValueRef(K.UINT8, 42).sql_type == SqlType(K.UINT8)
    assert ValueRef(K.FLOAT64, 42.0).sql_type == SqlType(K.FLOAT64)
    assert ValueRef(K.STRING, b"").sql_type == SqlType(K.STRING)
    assert ValueRef(K.DATE, 42, "Zulu").sql_type == SqlType(K.DATE)
    assert ValueRef(K.DATETIME, 42, "Zulu").sql_type == SqlType.datetime()
    assert ValueRef(K.DECIMAL, Decimal.of(2.0, 4)).sql_type == SqlType.decimal(18, 4)
    assert _int32_array().sql_type == SqlType.array(SqlType(K.INT32))
    assert ValueRef(
        K.NULLABLE, None, inner_type=SqlType(K.UINT8)
    ).sql_type == SqlType.nullable(SqlType(K.UINT8))
    assert ValueRef(K.NULLABLE, ValueRef(K.INT8, 42)).sql_type == SqlType.nullable(
        SqlType(K.INT8)
    )
    assert _tuple().sql_type == SqlType.tuple_of(
        [SqlType(K.INT32), SqlType(K.STRING), SqlType(K.FLOAT64)]
    )


def test_as_str_and_bytes():
    v = ValueRef(K.STRING, b"hello")
    assert v.as_str() == "hello"
    assert v.as_string() == "hello"
    assert v.as_bytes() == b"hello"


def test_as_str_wrong_type():
    with pytest.raises(FromSqlError) as info:
        ValueRef(K.UINT8, 1).as_str()
    assert str(info.value) == "From SQL error: `SqlType::UInt8 cannot be cast to str.`"
    assert info.value.src == "UInt8"


def test_as_bytes_wrong_type():
    with pytest.raises(FromSqlError):
        ValueRef(K.INT32, 1).as_bytes()


def test_datetime64_equality_across_zones():
    a = ValueRef(K.DATETIME, 1000, "UTC", precision=3)
    b = ValueRef(K.DATETIME, 1, "Europe/Berlin", precision=0)
    assert a == b
    assert a != ValueRef(K.DATETIME, 2, "UTC", precision=0)


def test_enum_equality():
    values = (("a", 1),)
    assert ValueRef(K.ENUM8, Enum8(1), enum_values=values) == ValueRef(
        K.ENUM8, Enum8(1), enum_values=values
    )
    assert ValueRef(K.ENUM8, Enum8(1), enum_values=values) != ValueRef(
        K.ENUM8, Enum8(2), enum_values=values
    )


def test_different_kinds_not_equal():
    assert ValueRef(K.UINT8, 1) != ValueRef(K.UINT16, 1)
    assert ValueRef(K.UINT8, 1) != Value(K.UINT8, 1)


def test_into_number():
    assert ValueRef(K.UINT32, 32).into_number(K.UINT32) == 32
    with pytest.raises(TypeError, match=r"Can't convert ValueRef::UInt16 into UInt32\."):
        ValueRef(K.UINT16, 1).into_number(K.UINT32)


def test_into_date_and_datetime():
    assert ValueRef(K.DATE, 0, "UTC").into_date() == date(1970, 1, 1)
    assert ValueRef(K.DATETIME, 1_546_300_800, "UTC").into_datetime() == datetime(
        2019, 1, 1, tzinfo=timezone.utc
    )
    with pytest.raises(TypeError):
        ValueRef(K.UINT8, 1).into_date()