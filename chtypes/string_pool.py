"""Compact storage of many byte strings in a few large chunks."""

from __future__ import annotations

from typing import Iterable, Iterator, NamedTuple

AVG_STR_SIZE = 80


class _StringPtr(NamedTuple):
    chunk: int
    shift: int
    length: int


class StringPool:
    """Byte strings packed into shared chunks, addressed by position."""

    def __init__(self, capacity: int = 0) -> None:
        self._chunks: list[bytearray] = []
        self._pointers: list[_StringPtr] = []
        self._position = 0
        self._capacity = capacity

    @classmethod
    def from_strings(cls, items: Iterable[str | bytes]) -> StringPool:
        """Build a pool holding ``items``; text is stored as UTF-8."""
        data = [s.encode("utf-8") if isinstance(s, str) else bytes(s) for s in items]
        pool = cls(len(data))
        for item in data:
            pool.allocate(len(item))[:] = item
        return pool

    def _free_space(self) -> int:
        if not self._chunks:
            return 0
        return len(self._chunks[-1]) - self._position

    def _reserve(self, size: int) -> None:
        self._position = 0
        self._chunks.append(bytearray(max(self._capacity * AVG_STR_SIZE, size)))

    def allocate(self, size: int) -> memoryview:
        """Add a zeroed string of ``size`` bytes and return a writable view of it."""
        if size < 0:
            raise ValueError("size can't be negative")
        if not self._chunks or self._free_space() < size:
            self._reserve(size)
        chunk = len(self._chunks) - 1
        shift = self._position
        self._position += size
        self._pointers.append(_StringPtr(chunk, shift, size))
        return memoryview(self._chunks[chunk])[shift : shift + size]

    def get(self, index: int) -> bytes:
        """Return the string at ``index``."""
        if not 0 <= index < len(self._pointers):
            raise IndexError(f"string index {index} out of range")
        pointer = self._pointers[index]
        chunk = self._chunks[pointer.chunk]
        return bytes(chunk[pointer.shift : pointer.shift + pointer.length])

    def strings(self) -> Iterator[bytes]:
        """Yield every string in order."""
        for index in range(len(self._pointers)):
            yield self.get(index)

    def __len__(self) -> int:
        return len(self._pointers)

    def copy(self) -> StringPool:
        """Return an independent copy of the pool."""
        other = StringPool(self._capacity)
        other._chunks = [bytearray(c) for c in self._chunks]
        other._pointers = list(self._pointers)
        other._position = self._position
        return other