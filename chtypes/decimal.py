"""Fixed-point decimal values as stored in ClickHouse Decimal columns."""

from __future__ import annotations

import math
from enum import Enum

FACTORS10: tuple[int, ...] = tuple(10**n for n in range(19))

MAX_PRECISION = 18


class NoBits(Enum):
    """Width of the underlying integer of a decimal column."""

    N32 = 32
    N64 = 64

    @classmethod
    def from_precision(cls, precision: int) -> NoBits | None:
        """Return the width needed for ``precision`` digits, or None if too wide."""
        if precision <= 9:
            return cls.N32
        if precision <= 18:
            return cls.N64
        return None


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


class Decimal:
    """A decimal number kept as an integer and a count of fraction digits."""

    __slots__ = ("_underlying", "_scale", "_precision", "_nobits")

    def __init__(
        self,
        underlying: int,
        scale: int,
        precision: int = MAX_PRECISION,
        nobits: NoBits = NoBits.N64,
    ) -> None:
        if scale < 0:
            raise ValueError("scale can't be negative")
        if scale > MAX_PRECISION:
            raise ValueError("scale can't be greater than 18")
        self._underlying = int(underlying)
        self._scale = scale
        self._precision = precision
        self._nobits = nobits

    @classmethod
    def of(cls, source: int | float, scale: int) -> Decimal:
        """Build a decimal from a number, keeping ``scale`` fraction digits."""
        if scale < 0:
            raise ValueError("scale can't be negative")
        if scale > MAX_PRECISION:
            raise ValueError("scale can't be greater than 18")
        factor = FACTORS10[scale]
        if isinstance(source, bool) or not isinstance(source, (int, float)):
            raise TypeError(f"can't build a decimal from {type(source).__name__}")
        if isinstance(source, float):
            scaled = source * factor
            if math.isnan(scaled):
                underlying = 0
            elif math.isinf(scaled):
                raise OverflowError(f"{source} can't be represented as a decimal")
            else:
                underlying = int(scaled)
        else:
            underlying = source * factor
        limit = FACTORS10[MAX_PRECISION]
        if underlying > limit:
            raise OverflowError(f"{underlying} > {limit}")
        return cls(underlying, scale)

    @property
    def underlying(self) -> int:
        return self._underlying

    @property
    def scale(self) -> int:
        """How many decimal digits the fraction can have."""
        return self._scale

    @property
    def precision(self) -> int:
        return self._precision

    @property
    def nobits(self) -> NoBits:
        return self._nobits

    def internal(self) -> int:
        """Return the internal integer representation."""
        return self._underlying

    def set_scale(self, scale: int) -> Decimal:
        """Return a copy rescaled to ``scale`` digits, truncating toward zero."""
        if scale < 0:
            raise ValueError("scale can't be negative")
        if scale == self._scale:
            return self
        if scale < self._scale:
            underlying = _trunc_div(self._underlying, FACTORS10[self._scale - scale])
        else:
            underlying = self._underlying * FACTORS10[scale - self._scale]
        return Decimal(underlying, scale, self._precision, self._nobits)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Decimal):
            return NotImplemented
        if self._scale < other._scale:
            delta = other._scale - self._scale
            return other._underlying == self._underlying * FACTORS10[delta]
        if self._scale > other._scale:
            delta = self._scale - other._scale
            return self._underlying == other._underlying * FACTORS10[delta]
        return self._underlying == other._underlying

    def __hash__(self) -> int:
        return hash(self._underlying * 10 ** (MAX_PRECISION - self._scale))

    def __str__(self) -> str:
        return decimal2str(self)

    def __repr__(self) -> str:
        return decimal2str(self)

    def __float__(self) -> float:
        return float(self._underlying) / float(FACTORS10[self._scale])


def decimal2str(decimal: Decimal) -> str:
    """Render a decimal with exactly ``scale`` fraction digits."""
    digits = str(abs(decimal.underlying)).rjust(decimal.scale, "0")
    pos = len(digits) - decimal.scale
    whole = digits[:pos] or "0"
    sign = "-" if decimal.underlying < 0 else ""
    return f"{sign}{whole}.{digits[pos:]}"