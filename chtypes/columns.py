"""In-memory column data: numeric, string, nullable and tuple columns."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable

from chtypes.sql_type import SqlType, TypeKind
from chtypes.string_pool import StringPool
from chtypes.value import _FLOAT_KINDS, _INT_RANGES, Value
from chtypes.value_ref import ValueRef


def _require_value(value: Any) -> Value:
    if not isinstance(value, Value):
        raise TypeError(f"expected a Value, got {type(value).__name__}")
    return value


def _require_numeric(kind: TypeKind) -> TypeKind:
    if kind not in _INT_RANGES and kind not in _FLOAT_KINDS:
        raise ValueError(f"{kind.value} is not a numeric type")
    return kind


class ColumnData(ABC):
    """The values of one column, addressed by row index."""

    @abstractmethod
    def sql_type(self) -> SqlType:
        """The type of the values held."""

    @abstractmethod
    def push(self, value: Value) -> None:
        """Append ``value`` as a new row."""

    @abstractmethod
    def at(self, index: int) -> ValueRef:
        """The value at row ``index``."""

    @abstractmethod
    def copy(self) -> ColumnData:
        """An independent copy of this column."""

    @abstractmethod
    def __len__(self) -> int:
        """The number of rows."""

    def cast_to(self, target: SqlType) -> ColumnData | None:
        """A column of type ``target`` with the same rows, or None if impossible."""
        if target == self.sql_type():
            return self
        return None

    def __iter__(self):
        for index in range(len(self)):
            yield self.at(index)


class VectorColumnData(ColumnData):
    """A column of fixed-size numbers of one kind."""

    def __init__(self, kind: TypeKind, data: Iterable[int | float] = ()) -> None:
        self.kind = _require_numeric(kind)
        self.data: list[int | float] = []
        for item in data:
            self.push(Value(kind, item))

    def sql_type(self) -> SqlType:
        return SqlType(self.kind)

    def push(self, value: Value) -> None:
        self.data.append(_require_value(value).into_number(self.kind))

    def at(self, index: int) -> ValueRef:
        return ValueRef(self.kind, self.data[index])

    def copy(self) -> VectorColumnData:
        other = VectorColumnData(self.kind)
        other.data = list(self.data)
        return other

    def __len__(self) -> int:
        return len(self.data)


class StringColumnData(ColumnData):
    """A column of byte strings kept in a string pool."""

    def __init__(self, pool: StringPool | None = None) -> None:
        self.pool = pool if pool is not None else StringPool()

    def sql_type(self) -> SqlType:
        return SqlType(TypeKind.STRING)

    def push(self, value: Value) -> None:
        data = _require_value(value).into_bytes()
        self.pool.allocate(len(data))[:] = data

    def at(self, index: int) -> ValueRef:
        return ValueRef(TypeKind.STRING, self.pool.get(index))

    def copy(self) -> StringColumnData:
        return StringColumnData(self.pool.copy())

    def __len__(self) -> int:
        return len(self.pool)


class NullableColumnData(ColumnData):
    """A column whose rows may be NULL, kept as an inner column and null flags."""

    def __init__(self, inner: ColumnData, nulls: Iterable[int] = ()) -> None:
        self.inner = inner
        self.nulls = bytearray(nulls)

    def sql_type(self) -> SqlType:
        return SqlType.nullable(self.inner.sql_type())

    def push(self, value: Value) -> None:
        value = _require_value(value)
        if value.kind is TypeKind.NULLABLE:
            if value.data is None:
                assert value.inner_type is not None
                self.inner.push(Value.default(value.inner_type))
                self.nulls.append(1)
            else:
                self.inner.push(value.data)
                self.nulls.append(0)
        else:
            self.inner.push(value)
            self.nulls.append(0)

    def at(self, index: int) -> ValueRef:
        if self.nulls[index] == 1:
            return ValueRef(
                TypeKind.NULLABLE, None, inner_type=self.inner.sql_type()
            )
        return ValueRef(TypeKind.NULLABLE, self.inner.at(index))

    def copy(self) -> NullableColumnData:
        return NullableColumnData(self.inner.copy(), self.nulls)

    def __len__(self) -> int:
        if len(self.nulls) != len(self.inner):
            raise RuntimeError("null flags and inner column differ in length")
        return len(self.inner)

    def cast_to(self, target: SqlType) -> ColumnData | None:
        if target.kind is TypeKind.NULLABLE and target.inner is not None:
            inner = self.inner.cast_to(target.inner)
            if inner is not None:
                return NullableColumnData(inner, self.nulls)
        return None


class TupleColumnData(ColumnData):
    """A column of tuples, kept as one column per element."""

    def __init__(self, inner: Iterable[ColumnData]) -> None:
        self.inner: list[ColumnData] = list(inner)

    def sql_type(self) -> SqlType:
        return SqlType.tuple_of(c.sql_type() for c in self.inner)

    def push(self, value: Value) -> None:
        value = _require_value(value)
        if value.kind is not TypeKind.TUPLE:
            raise TypeError("value should be a tuple")
        for item, column in zip(value.data, self.inner):
            column.push(item)

    def at(self, index: int) -> ValueRef:
        return ValueRef(TypeKind.TUPLE, tuple(c.at(index) for c in self.inner))

    def copy(self) -> TupleColumnData:
        return TupleColumnData(c.copy() for c in self.inner)

    def __len__(self) -> int:
        return len(self.inner[0]) if self.inner else 0

    def cast_to(self, target: SqlType) -> ColumnData | None:
        if target.kind is not TypeKind.TUPLE or len(target.types) != len(self.inner):
            return None
        columns = []
        for column, target_type in zip(self.inner, target.types):
            cast = column.cast_to(target_type)
            if cast is None:
                return None
            columns.append(cast)
        return TupleColumnData(columns)


def numeric_column(values: Iterable[int | float], kind: TypeKind) -> VectorColumnData:
    """A numeric column of ``kind`` holding ``values``."""
    return VectorColumnData(kind, values)


def nullable_numeric_column(
    values: Iterable[int | float | None], kind: TypeKind
) -> NullableColumnData:
    """A Nullable numeric column; None entries become NULL."""
    column = NullableColumnData(VectorColumnData(_require_numeric(kind)))
    sql_type = SqlType(kind)
    for item in values:
        column.push(Value.from_optional(item, sql_type))
    return column


def string_column(values: Iterable[str | bytes]) -> StringColumnData:
    """A String column holding ``values``; text is stored as UTF-8."""
    return StringColumnData(StringPool.from_strings(values))


def nullable_string_column(
    values: Iterable[str | bytes | None],
) -> NullableColumnData:
    """A Nullable String column; None entries become NULL."""
    items = list(values)
    column = NullableColumnData(StringColumnData(StringPool(len(items))))
    sql_type = SqlType(TypeKind.STRING)
    for item in items:
        column.push(Value.from_optional(item, sql_type))
    return column


def tuple_column(columns: Iterable[ColumnData]) -> TupleColumnData:
    """A Tuple column made of the given element columns."""
    return TupleColumnData(columns)