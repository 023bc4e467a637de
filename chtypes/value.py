"""Owned values of ClickHouse columns."""

from __future__ import annotations

import decimal as _stddecimal
import ipaddress
import math
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from email.utils import format_datetime
from functools import lru_cache
from typing import Any
from zoneinfo import ZoneInfo

from chtypes.decimal import Decimal, NoBits
from chtypes.enums import Enum8, Enum16
from chtypes.sql_type import SqlType, TypeKind

UNIX_EPOCH_DAY = 719_163
SECONDS_PER_DAY = 24 * 3600

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_UTC_NAMES = frozenset({"UTC", "Zulu", "Etc/UTC", "UCT", "Etc/Zulu"})

_INT_RANGES: dict[TypeKind, tuple[int, int]] = {
    TypeKind.UINT8: (0, 2**8 - 1),
    TypeKind.UINT16: (0, 2**16 - 1),
    TypeKind.UINT32: (0, 2**32 - 1),
    TypeKind.UINT64: (0, 2**64 - 1),
    TypeKind.INT8: (-(2**7), 2**7 - 1),
    TypeKind.INT16: (-(2**15), 2**15 - 1),
    TypeKind.INT32: (-(2**31), 2**31 - 1),
    TypeKind.INT64: (-(2**63), 2**63 - 1),
}
_FLOAT_KINDS = frozenset({TypeKind.FLOAT32, TypeKind.FLOAT64})
_BYTE_LENGTHS = {TypeKind.IPV4: 4, TypeKind.IPV6: 16, TypeKind.UUID: 16}


@lru_cache(maxsize=None)
def _zone(name: str) -> tzinfo:
    if name in _UTC_NAMES:
        return timezone.utc
    return ZoneInfo(name)


def _tz_name(tz: tzinfo | None) -> str:
    if tz is None:
        raise ValueError("a naive datetime has no time zone")
    if isinstance(tz, ZoneInfo):
        return tz.key
    if tz is timezone.utc:
        return "UTC"
    raise ValueError(f"time zone {tz!r} has no name")


def _at(seconds: int, tz: str) -> datetime:
    return (_EPOCH + timedelta(seconds=seconds)).astimezone(_zone(tz))


def _format_float(x: float) -> str:
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    text = format(_stddecimal.Decimal(repr(x)), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


def _check_int(kind_name: str, data: Any, low: int, high: int) -> None:
    if isinstance(data, bool) or not isinstance(data, int):
        raise TypeError(f"{kind_name} needs an integer, got {type(data).__name__}")
    if not low <= data <= high:
        raise ValueError(f"{data} is out of range for {kind_name}")


def get_days(date_value: date) -> int:
    """Days since 1970-01-01 of ``date_value``, wrapped to 16 bits."""
    return (date_value.toordinal() - UNIX_EPOCH_DAY) & 0xFFFF


def to_datetime(value: int, precision: int, tz: str) -> datetime:
    """Turn a DateTime64 tick count of ``precision`` digits into a datetime."""
    base = 10**precision
    seconds, fraction = divmod(value, base)
    micros = fraction * 1_000_000 // base
    moment = _EPOCH + timedelta(seconds=seconds, microseconds=micros)
    return moment.astimezone(_zone(tz))


def decode_ipv4(octets: bytes) -> ipaddress.IPv4Address:
    """Decode an IPv4 address stored with its octets reversed."""
    return ipaddress.IPv4Address(bytes(reversed(bytes(octets))))


def decode_ipv6(octets: bytes) -> ipaddress.IPv6Address:
    """Decode an IPv6 address stored in network order."""
    return ipaddress.IPv6Address(bytes(octets))


def decode_uuid(octets: bytes) -> uuid.UUID:
    """Decode a UUID stored as two reversed 8-byte halves."""
    raw = bytes(octets)
    if len(raw) != 16:
        raise ValueError(f"a UUID needs 16 bytes, got {len(raw)}")
    return uuid.UUID(bytes=raw[7::-1] + raw[:7:-1])


@dataclass(frozen=True, eq=False)
class Value:
    """A client-side value of a column.

    ``data`` holds the payload: a number, bytes, a day or second count, a
    Decimal, an Enum8/Enum16, a nested Value (Nullable; None means NULL) or a
    tuple of Values (Array, Tuple). ``precision`` marks a DateTime64,
    ``inner_type`` is the element type of an Array or the type of a NULL.
    """

    kind: TypeKind
    data: Any = None
    tz: str = "UTC"
    precision: int | None = None
    inner_type: SqlType | None = None
    enum_values: tuple[tuple[str, int], ...] = ()

    def __post_init__(self) -> None:
        kind, data = self.kind, self.data
        name = kind.value
        if kind in _INT_RANGES:
            _check_int(name, data, *_INT_RANGES[kind])
        elif kind in _FLOAT_KINDS:
            if isinstance(data, bool) or not isinstance(data, (int, float)):
                raise TypeError(f"{name} needs a number, got {type(data).__name__}")
            object.__setattr__(self, "data", float(data))
        elif kind is TypeKind.STRING:
            if data is None:
                data = b""
            if isinstance(data, str):
                data = data.encode("utf-8")
            elif isinstance(data, (bytes, bytearray, memoryview)):
                data = bytes(data)
            else:
                raise TypeError(f"String needs bytes, got {type(data).__name__}")
            object.__setattr__(self, "data", data)
        elif kind is TypeKind.DATE:
            _check_int(name, data, 0, 2**16 - 1)
        elif kind is TypeKind.DATETIME:
            if self.precision is None:
                _check_int(name, data, 0, 2**32 - 1)
            else:
                _check_int("DateTime64", data, -(2**63), 2**63 - 1)
        elif kind in _BYTE_LENGTHS:
            if not isinstance(data, (bytes, bytearray, memoryview)):
                raise TypeError(f"{name} needs bytes, got {type(data).__name__}")
            data = bytes(data)
            if len(data) != _BYTE_LENGTHS[kind]:
                raise ValueError(f"{name} needs {_BYTE_LENGTHS[kind]} bytes")
            object.__setattr__(self, "data", data)
        elif kind is TypeKind.NULLABLE:
            if data is None:
                if self.inner_type is None:
                    raise ValueError("a NULL value needs its inner type")
            elif not isinstance(data, Value):
                raise TypeError("Nullable needs a Value or None")
        elif kind is TypeKind.ARRAY:
            if self.inner_type is None:
                raise ValueError("Array needs an element type")
            self._set_values(data)
        elif kind is TypeKind.TUPLE:
            self._set_values(data)
        elif kind is TypeKind.DECIMAL:
            if not isinstance(data, Decimal):
                raise TypeError("Decimal needs a Decimal")
        elif kind in (TypeKind.ENUM8, TypeKind.ENUM16):
            cls = Enum8 if kind is TypeKind.ENUM8 else Enum16
            if data is None:
                data = cls(0)
                object.__setattr__(self, "data", data)
            if not isinstance(data, cls):
                raise TypeError(f"{name} needs an {cls.__name__}")
            pairs = tuple((str(n), int(v)) for n, v in self.enum_values)
            object.__setattr__(self, "enum_values", pairs)
        else:
            raise ValueError(f"no value has kind {name}")

    def _set_values(self, data: Any) -> None:
        values = tuple(data) if data is not None else ()
        if not all(isinstance(v, Value) for v in values):
            raise TypeError(f"{self.kind.value} needs a sequence of Values")
        object.__setattr__(self, "data", values)

    @classmethod
    def default(cls, sql_type: SqlType) -> Value:
        """The zero value of ``sql_type``."""
        kind = sql_type.kind
        if kind in _INT_RANGES:
            return cls(kind, 0)
        if kind in _FLOAT_KINDS:
            return cls(kind, 0.0)
        if kind is TypeKind.STRING:
            return cls(kind, b"")
        if kind is TypeKind.FIXED_STRING:
            return cls(TypeKind.STRING, bytes(sql_type.length))
        if kind is TypeKind.DATE:
            return cls(kind, 0, "UTC")
        if kind is TypeKind.DATETIME:
            dt = sql_type.datetime_type
            if dt is not None and dt.is_datetime64:
                return cls(kind, 0, "UTC", precision=1)
            return cls(kind, 0, "UTC")
        if kind is TypeKind.NULLABLE:
            return cls(kind, None, inner_type=sql_type.inner)
        if kind is TypeKind.ARRAY:
            return cls(kind, (), inner_type=sql_type.inner)
        if kind is TypeKind.DECIMAL:
            return cls(
                kind, Decimal(0, sql_type.scale, sql_type.precision, NoBits.N64)
            )
        if kind in _BYTE_LENGTHS:
            return cls(kind, bytes(_BYTE_LENGTHS[kind]))
        if kind is TypeKind.ENUM8:
            return cls(kind, Enum8(0), enum_values=sql_type.enum_values)
        if kind is TypeKind.ENUM16:
            return cls(kind, Enum16(0), enum_values=sql_type.enum_values)
        if kind is TypeKind.TUPLE:
            return cls(kind, tuple(cls.default(t) for t in sql_type.types))
        raise ValueError(f"no default value for {sql_type}")

    @classmethod
    def from_date(cls, date_value: date, tz: str = "UTC") -> Value:
        """A Date value for the calendar day ``date_value``."""
        return cls(TypeKind.DATE, get_days(date_value), tz)

    @classmethod
    def from_datetime(cls, dt: datetime) -> Value:
        """A DateTime value for an aware datetime, keeping its zone."""
        tz = _tz_name(dt.tzinfo)
        seconds = math.floor(dt.timestamp()) & 0xFFFFFFFF
        return cls(TypeKind.DATETIME, seconds, tz)

    @classmethod
    def from_optional(cls, value: Any, sql_type: SqlType) -> Value:
        """A Nullable value: NULL of ``sql_type`` for None, else the wrapped value."""
        if value is None:
            return cls(TypeKind.NULLABLE, None, inner_type=sql_type)
        return cls(TypeKind.NULLABLE, cls._coerce(value, sql_type))

    @classmethod
    def _coerce(cls, value: Any, sql_type: SqlType) -> Value:
        if isinstance(value, Value):
            return value
        kind = sql_type.kind
        if kind is TypeKind.DATETIME and isinstance(value, datetime):
            return cls.from_datetime(value)
        if kind is TypeKind.DATE and isinstance(value, date):
            return cls.from_date(value)
        if kind is TypeKind.FIXED_STRING:
            return cls(TypeKind.STRING, value)
        if kind is TypeKind.ARRAY:
            return cls(kind, value, inner_type=sql_type.inner)
        if kind in (TypeKind.ENUM8, TypeKind.ENUM16):
            return cls(kind, value, enum_values=sql_type.enum_values)
        return cls(kind, value)

    @property
    def sql_type(self) -> SqlType:
        """The column type this value belongs to."""
        kind = self.kind
        if kind is TypeKind.DATETIME:
            if self.precision is None:
                return SqlType.datetime()
            return SqlType.datetime64(self.precision, self.tz)
        if kind is TypeKind.NULLABLE:
            if self.data is None:
                assert self.inner_type is not None
                return SqlType.nullable(self.inner_type)
            return SqlType.nullable(self.data.sql_type)
        if kind is TypeKind.ARRAY:
            assert self.inner_type is not None
            return SqlType.array(self.inner_type)
        if kind is TypeKind.DECIMAL:
            return SqlType.decimal(self.data.precision, self.data.scale)
        if kind is TypeKind.ENUM8:
            return SqlType.enum8(self.enum_values)
        if kind is TypeKind.ENUM16:
            return SqlType.enum16(self.enum_values)
        if kind is TypeKind.TUPLE:
            return SqlType.tuple_of(v.sql_type for v in self.data)
        return SqlType(kind)

    def _local_date(self) -> date:
        return _at(self.data * SECONDS_PER_DAY, self.tz).date()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        kind = self.kind
        if kind is not other.kind:
            return False
        if kind in _INT_RANGES or kind in _FLOAT_KINDS or kind is TypeKind.STRING:
            return self.data == other.data
        if kind is TypeKind.DATE:
            return self._local_date() == other._local_date()
        if kind is TypeKind.DATETIME:
            if self.precision is None and other.precision is None:
                return self.data == other.data
            return False
        if kind is TypeKind.NULLABLE:
            if self.data is None and other.data is None:
                return self.inner_type == other.inner_type
            if self.data is not None and other.data is not None:
                return self.data == other.data
            return False
        if kind is TypeKind.ARRAY:
            return self.inner_type == other.inner_type and self.data == other.data
        if kind in (TypeKind.DECIMAL, TypeKind.TUPLE):
            return self.data == other.data
        if kind is TypeKind.ENUM16:
            return self.enum_values == other.enum_values and self.data == other.data
        return False

    __hash__ = None  # type: ignore[assignment]

    def _format(self, alternate: bool) -> str:
        kind, data = self.kind, self.data
        if kind in _INT_RANGES:
            return str(data)
        if kind in _FLOAT_KINDS:
            return _format_float(data)
        if kind is TypeKind.STRING:
            try:
                return data.decode("utf-8")
            except UnicodeDecodeError:
                return "[" + ", ".join(str(b) for b in data) + "]"
        if kind is TypeKind.DATETIME:
            if self.precision is not None:
                return format_datetime(to_datetime(data, self.precision, self.tz))
            moment = _at(data, self.tz)
            if alternate:
                return f"{moment.strftime('%Y-%m-%d %H:%M:%S')} {moment.tzname()}"
            return format_datetime(moment)
        if kind is TypeKind.DATE:
            moment = _at(data * SECONDS_PER_DAY, self.tz)
            if alternate:
                return f"{moment.date().isoformat()}{moment.tzname()}"
            return moment.date().isoformat()
        if kind is TypeKind.NULLABLE:
            return "NULL" if data is None else data._format(alternate)
        if kind is TypeKind.ARRAY:
            return "[" + ", ".join(str(v) for v in data) + "]"
        if kind is TypeKind.TUPLE:
            return "(" + ", ".join(str(v) for v in data) + ")"
        if kind is TypeKind.DECIMAL:
            return str(data)
        if kind is TypeKind.IPV4:
            return str(decode_ipv4(data))
        if kind is TypeKind.IPV6:
            return str(decode_ipv6(data))
        if kind is TypeKind.UUID:
            return str(decode_uuid(data))
        if kind is TypeKind.ENUM8:
            return f"Enum8, {data}"
        return f"Enum16, {data}"

    def __str__(self) -> str:
        return self._format(False)

    def __format__(self, spec: str) -> str:
        if spec == "#":
            return self._format(True)
        return format(self._format(False), spec)

    def _cannot(self, target: str) -> TypeError:
        return TypeError(f"Can't convert Value::{self.sql_type} into {target}.")

    def into_string(self) -> str:
        """The text of a String value."""
        if self.kind is TypeKind.STRING:
            try:
                return self.data.decode("utf-8")
            except UnicodeDecodeError:
                pass
        raise self._cannot("String")

    def into_bytes(self) -> bytes:
        """The bytes of a String value."""
        if self.kind is TypeKind.STRING:
            return self.data
        raise self._cannot("bytes")

    def into_number(self, kind: TypeKind) -> int | float:
        """The number held, which must be of ``kind``."""
        if kind not in _INT_RANGES and kind not in _FLOAT_KINDS:
            raise ValueError(f"{kind.value} is not a numeric type")
        if self.kind is kind:
            return self.data
        raise self._cannot(kind.value)

    def into_date(self) -> date:
        """The calendar day of a Date value in its time zone."""
        if self.kind is TypeKind.DATE:
            return self._local_date()
        raise self._cannot("Date")

    def into_datetime(self) -> datetime:
        """The moment of a DateTime or DateTime64 value in its time zone."""
        if self.kind is TypeKind.DATETIME:
            if self.precision is None:
                return _at(self.data, self.tz)
            return to_datetime(self.data, self.precision, self.tz)
        raise self._cannot("DateTime")