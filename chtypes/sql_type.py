"""ClickHouse column types and a few server-side records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Iterable


class TypeKind(Enum):
    """The family a column type belongs to."""

    UINT8 = "UInt8"
    UINT16 = "UInt16"
    UINT32 = "UInt32"
    UINT64 = "UInt64"
    INT8 = "Int8"
    INT16 = "Int16"
    INT32 = "Int32"
    INT64 = "Int64"
    STRING = "String"
    FIXED_STRING = "FixedString"
    FLOAT32 = "Float32"
    FLOAT64 = "Float64"
    DATE = "Date"
    DATETIME = "DateTime"
    IPV4 = "IPv4"
    IPV6 = "IPv6"
    UUID = "UUID"
    NULLABLE = "Nullable"
    ARRAY = "Array"
    DECIMAL = "Decimal"
    ENUM8 = "Enum8"
    ENUM16 = "Enum16"
    TUPLE = "Tuple"


_BUFFER_SIZES = {
    TypeKind.UINT8: 1,
    TypeKind.INT8: 1,
    TypeKind.UINT16: 2,
    TypeKind.INT16: 2,
    TypeKind.UINT32: 4,
    TypeKind.INT32: 4,
    TypeKind.FLOAT32: 4,
    TypeKind.UINT64: 8,
    TypeKind.INT64: 8,
    TypeKind.FLOAT64: 8,
}


def buffer_size(kind: TypeKind) -> int:
    """Return the byte width of a fixed-size numeric type."""
    try:
        return _BUFFER_SIZES[kind]
    except KeyError:
        raise ValueError(f"{kind.value} has no fixed-size buffer") from None


_DATETIME_VARIANTS = ("DateTime32", "DateTime64", "Chrono")


@dataclass(frozen=True)
class DateTimeType:
    """Flavour of a DateTime column: DateTime32, DateTime64 or Chrono."""

    variant: str = "DateTime32"
    precision: int = 0
    tz: str = "UTC"

    DATETIME32: ClassVar[DateTimeType]
    CHRONO: ClassVar[DateTimeType]

    def __post_init__(self) -> None:
        if self.variant not in _DATETIME_VARIANTS:
            raise ValueError(f"unknown DateTime variant {self.variant!r}")

    @classmethod
    def datetime64(cls, precision: int, tz: str) -> DateTimeType:
        return cls("DateTime64", precision, tz)

    @property
    def is_datetime64(self) -> bool:
        return self.variant == "DateTime64"


DateTimeType.DATETIME32 = DateTimeType("DateTime32")
DateTimeType.CHRONO = DateTimeType("Chrono")


def _check_enum_values(
    values: Iterable[tuple[str, int]], low: int, high: int
) -> tuple[tuple[str, int], ...]:
    pairs = tuple((str(name), int(code)) for name, code in values)
    for name, code in pairs:
        if not low <= code <= high:
            raise ValueError(f"enum value {name!r} = {code} is out of range")
    return pairs


@dataclass(frozen=True)
class SqlType:
    """A ClickHouse column type, possibly nested."""

    kind: TypeKind
    inner: SqlType | None = None
    types: tuple[SqlType, ...] = ()
    length: int = 0
    precision: int = 0
    scale: int = 0
    enum_values: tuple[tuple[str, int], ...] = ()
    datetime_type: DateTimeType | None = None

    def __post_init__(self) -> None:
        if self.kind in (TypeKind.NULLABLE, TypeKind.ARRAY) and self.inner is None:
            raise ValueError(f"{self.kind.value} needs an inner type")
        if self.kind is TypeKind.DATETIME and self.datetime_type is None:
            object.__setattr__(self, "datetime_type", DateTimeType.DATETIME32)
        object.__setattr__(self, "types", tuple(self.types))
        object.__setattr__(
            self, "enum_values", tuple((n, v) for n, v in self.enum_values)
        )

    @classmethod
    def nullable(cls, inner: SqlType) -> SqlType:
        return cls(TypeKind.NULLABLE, inner=inner)

    @classmethod
    def array(cls, inner: SqlType) -> SqlType:
        return cls(TypeKind.ARRAY, inner=inner)

    @classmethod
    def tuple_of(cls, types: Iterable[SqlType]) -> SqlType:
        return cls(TypeKind.TUPLE, types=tuple(types))

    @classmethod
    def decimal(cls, precision: int, scale: int) -> SqlType:
        return cls(TypeKind.DECIMAL, precision=precision, scale=scale)

    @classmethod
    def fixed_string(cls, length: int) -> SqlType:
        if length < 0:
            raise ValueError("FixedString length can't be negative")
        return cls(TypeKind.FIXED_STRING, length=length)

    @classmethod
    def enum8(cls, values: Iterable[tuple[str, int]]) -> SqlType:
        return cls(TypeKind.ENUM8, enum_values=_check_enum_values(values, -128, 127))

    @classmethod
    def enum16(cls, values: Iterable[tuple[str, int]]) -> SqlType:
        return cls(
            TypeKind.ENUM16, enum_values=_check_enum_values(values, -32768, 32767)
        )

    @classmethod
    def datetime(cls) -> SqlType:
        return cls(TypeKind.DATETIME, datetime_type=DateTimeType.DATETIME32)

    @classmethod
    def datetime64(cls, precision: int, tz: str) -> SqlType:
        return cls(
            TypeKind.DATETIME, datetime_type=DateTimeType.datetime64(precision, tz)
        )

    def is_datetime(self) -> bool:
        return self.kind is TypeKind.DATETIME

    def level(self) -> int:
        """Nesting depth: Nullable, Array and Tuple each add one."""
        if self.kind in (TypeKind.NULLABLE, TypeKind.ARRAY):
            assert self.inner is not None
            return 1 + self.inner.level()
        if self.kind is TypeKind.TUPLE:
            return max((t.level() for t in self.types), default=0) + 1
        return 0

    def __str__(self) -> str:
        kind = self.kind
        if kind is TypeKind.FIXED_STRING:
            return f"FixedString({self.length})"
        if kind is TypeKind.DATETIME:
            dt = self.datetime_type
            if dt is not None and dt.is_datetime64:
                return f"DateTime64({dt.precision}, '{dt.tz}')"
            return "DateTime"
        if kind in (TypeKind.NULLABLE, TypeKind.ARRAY):
            return f"{kind.value}({self.inner})"
        if kind is TypeKind.DECIMAL:
            return f"Decimal({self.precision}, {self.scale})"
        if kind in (TypeKind.ENUM8, TypeKind.ENUM16):
            items = ",".join(f"'{name}' = {code}" for name, code in self.enum_values)
            return f"{kind.value}({items})"
        if kind is TypeKind.TUPLE:
            return f"Tuple({','.join(str(t) for t in self.types)})"
        return kind.value


@dataclass(frozen=True)
class Progress:
    """Query progress counters reported by the server."""

    rows: int = 0
    bytes: int = 0
    total_rows: int = 0


@dataclass(repr=False)
class ServerInfo:
    """Name, version and time zone of a server."""

    name: str = ""
    revision: int = 0
    minor_version: int = 0
    major_version: int = 0
    timezone: str = "UTC"

    def __repr__(self) -> str:
        return (
            f"{self.name} {self.major_version}.{self.minor_version}."
            f"{self.revision} ({self.timezone})"
        )