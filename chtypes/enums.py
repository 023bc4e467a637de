"""Values of ClickHouse Enum8 and Enum16 columns."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Enum8:
    """An Enum8 value held by its signed 8-bit code."""

    value: int = 0

    def __post_init__(self) -> None:
        if not -128 <= self.value <= 127:
            raise ValueError(f"{self.value} is out of range for Enum8")

    @classmethod
    def of(cls, source: int) -> Enum8:
        return cls(source)

    def internal(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"Enum8({self.value})"

    def __repr__(self) -> str:
        return str(self)


@dataclass(frozen=True)
class Enum16:
    """An Enum16 value held by its signed 16-bit code."""

    value: int = 0

    def __post_init__(self) -> None:
        if not -32768 <= self.value <= 32767:
            raise ValueError(f"{self.value} is out of range for Enum16")

    @classmethod
    def of(cls, source: int) -> Enum16:
        return cls(source)

    def internal(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"Enum({self.value})"

    def __repr__(self) -> str:
        return str(self)