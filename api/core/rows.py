"""
Positional row decoding.

Decoders pull columns one at a time, in the same order as the SELECT list
that produced the row:

    def decode_city(reader: RowReader) -> City:
        return City(id=reader.read(int), name=reader.read(str), ...)
"""

from __future__ import annotations

from typing import Any, Callable, Sequence, TypeVar

T = TypeVar("T")


class RowMappingError(RuntimeError):
    pass


class RowReader:
    def __init__(self, record: Sequence[Any]) -> None:
        self._record = record
        self._pos = 0

    def read(self, kind: type[T]) -> T:
        """
        Return the next column, checked against `kind`.
        """
        if self._pos >= len(self._record):
            raise RowMappingError(
                f"Row has {len(self._record)} columns; tried to read column {self._pos + 1}."
            )
        value = self._record[self._pos]
        # bool is an int subclass; never accept it for an int column.
        if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
            raise RowMappingError(
                f"Column {self._pos + 1}: expected {kind.__name__}, got {type(value).__name__}."
            )
        self._pos += 1
        return value

    def finish(self) -> None:
        if self._pos != len(self._record):
            raise RowMappingError(
                f"Row has {len(self._record)} columns; decoder read {self._pos}."
            )


def decode(record: Sequence[Any], decoder: Callable[[RowReader], T]) -> T:
    reader = RowReader(record)
    value = decoder(reader)
    reader.finish()
    return value
