"""Values read from a column, as handed out by column data."""

from __future__ import annotations

from datetime import date, datetime
from email.utils import format_datetime
from typing import Any

from chtypes.sql_type import TypeKind
from chtypes.value import (
    _FLOAT_KINDS,
    _INT_RANGES,
    SECONDS_PER_DAY,
    Value,
    _at,
    to_datetime,
)


class FromSqlError(TypeError):
    """A column value can't be turned into the requested type."""

    def __init__(self, src: str, dst: str) -> None:
        super().__init__(f"From SQL error: `SqlType::{src} cannot be cast to {dst}.`")
        self.src = src
        self.dst = dst


def _convert(value: Value, target: type[Value]) -> Value:
    data: Any = value.data
    if value.kind is TypeKind.NULLABLE and data is not None:
        data = _convert(data, target)
    elif value.kind in (TypeKind.ARRAY, TypeKind.TUPLE):
        data = tuple(_convert(v, target) for v in data)
    return target(
        kind=value.kind,
        data=data,
        tz=value.tz,
        precision=value.precision,
        inner_type=value.inner_type,
        enum_values=value.enum_values,
    )


class ValueRef(Value):
    """A value as seen when reading a column.

    It holds the same payload as :class:`Value` but prints and compares the
    way read values do: DateTime shows as ``%Y-%m-%d %H:%M:%S``, Enum values
    show alone, and DateTime64 and enums take part in equality.
    """

    @classmethod
    def from_value(cls, value: Value) -> ValueRef:
        """A read view of ``value``, nested values included."""
        return _convert(value, cls)  # type: ignore[return-value]

    def to_value(self) -> Value:
        """An owned Value with the same content."""
        return _convert(self, Value)

    def as_str(self) -> str:
        """The text of a String value."""
        if self.kind is TypeKind.STRING:
            return self.data.decode("utf-8")
        raise FromSqlError(str(self.sql_type), "str")

    def as_string(self) -> str:
        """The text of a String value, as a new string."""
        return str(self.as_str())

    def as_bytes(self) -> bytes:
        """The bytes of a String value."""
        if self.kind is TypeKind.STRING:
            return self.data
        raise FromSqlError(str(self.sql_type), "bytes")

    def format(self, alternate: bool = False) -> str:
        """Render the value; ``alternate`` selects the long date forms."""
        return self._format(alternate)

    def _format(self, alternate: bool) -> str:
        kind, data = self.kind, self.data
        if kind is TypeKind.DATETIME:
            if self.precision is not None:
                moment = to_datetime(data, self.precision, self.tz)
                return moment.strftime("%Y-%m-%d %H:%M:%S")
            moment = _at(data, self.tz)
            if alternate:
                return format_datetime(moment)
            return moment.strftime("%Y-%m-%d %H:%M:%S")
        if kind is TypeKind.DATE:
            moment = _at(data * SECONDS_PER_DAY, self.tz)
            if alternate:
                return f"{moment.date().isoformat()}{moment.tzname()}"
            return moment.date().isoformat()
        if kind is TypeKind.NULLABLE:
            return "NULL" if data is None else str(data)
        if kind in (TypeKind.ENUM8, TypeKind.ENUM16):
            return str(data)
        return super()._format(alternate)

    def __str__(self) -> str:
        return self._format(False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        if not isinstance(other, ValueRef):
            return False
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
            if self.precision is not None and other.precision is not None:
                mine = to_datetime(self.data, self.precision, self.tz)
                theirs = to_datetime(other.data, other.precision, other.tz)
                return mine == theirs
            return False
        if kind is TypeKind.NULLABLE:
            if self.data is None and other.data is None:
                return self.inner_type == other.inner_type
            if self.data is not None and other.data is not None:
                return self.data == other.data
            return False
        if kind is TypeKind.ARRAY:
            return self.inner_type == other.inner_type and self.data == other.data
        if kind is TypeKind.DECIMAL:
            return self.data == other.data
        if kind in (TypeKind.ENUM8, TypeKind.ENUM16):
            return self.data == other.data and self.enum_values == other.enum_values
        return False

    __hash__ = None  # type: ignore[assignment]

    def _cannot(self, target: str) -> TypeError:
        return TypeError(f"Can't convert ValueRef::{self.sql_type} into {target}.")

    def into_number(self, kind: TypeKind) -> int | float:
        """The number held, which must be of ``kind``."""
        return super().into_number(kind)

    def into_date(self) -> date:
        """The calendar day of a Date value in its time zone."""
        return super().into_date()

    def into_datetime(self) -> datetime:
        """The moment of a DateTime or DateTime64 value in its time zone."""
        return super().into_datetime()