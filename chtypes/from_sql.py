"""Conversion of column values into plain Python values of a requested type."""

from __future__ import annotations

import ipaddress
import uuid
from datetime import date, datetime
from enum import Enum
from typing import Any

from chtypes.decimal import Decimal
from chtypes.enums import Enum8, Enum16
from chtypes.sql_type import TypeKind
from chtypes.value import Value, decode_ipv4, decode_ipv6, decode_uuid
from chtypes.value_ref import FromSqlError, ValueRef


class Target(Enum):
    """The type a column value is converted into; the value names it in errors."""

    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    F32 = "f32"
    F64 = "f64"
    DECIMAL = "Decimal"
    ENUM8 = "Enum8"
    ENUM16 = "Enum16"
    STR = "&str"
    STRING = "String"
    BYTES = "Vec<u8>"
    IPV4 = "Ipv4"
    IPV6 = "Ipv6"
    UUID = "Uuid"
    DATE = "Date<Tz>"
    DATETIME = "DateTime<Tz>"


_NUMERIC: dict[Target, TypeKind] = {
    Target.U8: TypeKind.UINT8,
    Target.U16: TypeKind.UINT16,
    Target.U32: TypeKind.UINT32,
    Target.U64: TypeKind.UINT64,
    Target.I8: TypeKind.INT8,
    Target.I16: TypeKind.INT16,
    Target.I32: TypeKind.INT32,
    Target.I64: TypeKind.INT64,
    Target.F32: TypeKind.FLOAT32,
    Target.F64: TypeKind.FLOAT64,
}

_WRAPPED: dict[Target, TypeKind] = {
    Target.DECIMAL: TypeKind.DECIMAL,
    Target.ENUM8: TypeKind.ENUM8,
    Target.ENUM16: TypeKind.ENUM16,
}

_TEXT_TARGETS = frozenset({Target.STR, Target.STRING, Target.BYTES})


def _as_ref(value: Value) -> ValueRef:
    if isinstance(value, ValueRef):
        return value
    if isinstance(value, Value):
        return ValueRef.from_value(value)
    raise TypeError(f"expected a column value, got {type(value).__name__}")


def _error(value: ValueRef, dst: str) -> FromSqlError:
    return FromSqlError(str(value.sql_type), dst)


def _is_array_of(value: ValueRef, kind: TypeKind) -> bool:
    return (
        value.kind is TypeKind.ARRAY
        and value.inner_type is not None
        and value.inner_type.kind is kind
    )


def from_sql(
    value: Value, target: Target
) -> int | float | str | bytes | Decimal | Enum8 | Enum16 | ipaddress.IPv4Address | ipaddress.IPv6Address | uuid.UUID | date | datetime:
    """Convert a column value into the Python value ``target`` names."""
    ref = _as_ref(value)
    kind = ref.kind

    if target in _NUMERIC:
        if kind is _NUMERIC[target]:
            return ref.data
        raise _error(ref, target.value)

    if target in (Target.STR, Target.STRING):
        return ref.as_str()

    if target is Target.BYTES:
        if _is_array_of(ref, TypeKind.UINT8):
            return bytes(v.data for v in ref.data)
        return ref.as_bytes()

    if target in _WRAPPED:
        if kind is _WRAPPED[target]:
            return ref.data
        raise _error(ref, target.value)

    if target is Target.IPV4:
        if kind is TypeKind.IPV4:
            return decode_ipv4(ref.data)
        raise _error(ref, target.value)

    if target is Target.IPV6:
        if kind is TypeKind.IPV6:
            return decode_ipv6(ref.data)
        raise _error(ref, target.value)

    if target is Target.UUID:
        if kind is TypeKind.UUID:
            return decode_uuid(ref.data)
        raise _error(ref, target.value)

    if target is Target.DATE:
        if kind is TypeKind.DATE:
            return ref.into_date()
        raise _error(ref, target.value)

    if target is Target.DATETIME:
        if kind is TypeKind.DATETIME:
            return ref.into_datetime()
        raise _error(ref, target.value)

    raise ValueError(f"unknown conversion target {target!r}")


def from_sql_optional(value: Value, target: Target) -> Any:
    """Convert a Nullable value: None for NULL, else the converted inner value."""
    ref = _as_ref(value)
    if ref.kind is not TypeKind.NULLABLE:
        raise _error(ref, f"Option<{target.value}>")
    if ref.data is None:
        return None
    return from_sql(ref.data, target)


def from_sql_vec(value: Value, target: Target) -> list[Any]:
    """Convert an Array value into a list of values of ``target``.

    With ``Target.U8`` a String value is accepted too and yields its bytes.
    """
    ref = _as_ref(value)

    if target is Target.U8:
        if _is_array_of(ref, TypeKind.UINT8):
            return [v.data for v in ref.data]
        return list(ref.as_bytes())

    if target in _NUMERIC:
        if not _is_array_of(ref, _NUMERIC[target]):
            raise _error(ref, target.value)
    elif target in _TEXT_TARGETS:
        if not _is_array_of(ref, TypeKind.STRING):
            raise _error(ref, f"Vec<{target.value}>")
    elif target is Target.DATE:
        if not _is_array_of(ref, TypeKind.DATE):
            raise _error(ref, f"Vec<{target.value}>")
    elif target is Target.DATETIME:
        if not (
            ref.kind is TypeKind.ARRAY
            and ref.inner_type is not None
            and ref.inner_type.is_datetime()
        ):
            raise _error(ref, f"Vec<{target.value}>")
    else:
        raise ValueError(f"no list conversion into {target.value}")

    return [from_sql(v, target) for v in ref.data]