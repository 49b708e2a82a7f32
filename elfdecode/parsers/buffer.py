"""
Byte Buffer and Field Cursor
=============================

:class:`ByteBuffer` holds the complete contents of one input file; it is
read once and never mutated.  :class:`Cursor` walks it field by field,
handing out raw groups of at most four bytes and raising
:class:`~elfdecode.core.errors.TruncatedInput` instead of ever returning a
short read.
"""

from __future__ import annotations

from pathlib import Path

from elfdecode.core.errors import TruncatedInput

MAX_READ: int = 4


class ByteBuffer:
    """Immutable in-memory copy of an input file.

    Args:
        contents: Raw file bytes.
        source: Label used in logs and reports (usually the file path).
    """

    __slots__ = ("_contents", "_source")

    def __init__(self, contents: bytes, source: str = "<bytes>") -> None:
        self._contents = bytes(contents)
        self._source = source

    @classmethod
    def from_path(cls, path: str | Path) -> ByteBuffer:
        """Load a whole file into memory."""
        file_path = Path(path)
        with open(file_path, "rb") as fh:
            return cls(fh.read(), source=str(file_path))

    @property
    def contents(self) -> bytes:
        return self._contents

    @property
    def source(self) -> str:
        return self._source

    @property
    def length(self) -> int:
        return len(self._contents)

    def __len__(self) -> int:
        return len(self._contents)

    def __repr__(self) -> str:
        return f"<ByteBuffer {self._source!r} ({self.length} bytes)>"


class Cursor:
    """Sequential reader over a :class:`ByteBuffer`.

    Invariant: ``0 <= position <= buffer.length``; a successful
    :meth:`read` advances ``position`` by exactly the number of bytes
    returned.
    """

    __slots__ = ("_buffer", "_position")

    def __init__(self, buffer: ByteBuffer, position: int = 0) -> None:
        self._buffer = buffer
        self._position = 0
        if position:
            self.seek(position)

    @property
    def buffer(self) -> ByteBuffer:
        return self._buffer

    @property
    def position(self) -> int:
        return self._position

    @property
    def remaining(self) -> int:
        return self._buffer.length - self._position

    def read(self, n: int) -> bytes:
        """Return the next *n* raw bytes and advance past them.

        ``n == 0`` is treated as ``n == 1``.

        Raises:
            ValueError: If *n* is negative or larger than four.
            TruncatedInput: If fewer than *n* bytes remain.
        """
        if n == 0:
            n = 1
        if n < 0 or n > MAX_READ:
            raise ValueError(f"a single read covers 1 to {MAX_READ} bytes, not {n}")

        if self.remaining < n:
            raise TruncatedInput(
                expected=n,
                actual=self.remaining,
                offset=self._position,
            )

        start = self._position
        self._position += n
        return self._buffer.contents[start:self._position]

    def skip(self, n: int) -> None:
        """Discard *n* bytes, reading them in groups of at most four."""
        while n > 0:
            step = min(n, MAX_READ)
            self.read(step)
            n -= step

    def seek(self, offset: int) -> None:
        """Move to the absolute *offset*.

        Raises:
            TruncatedInput: If *offset* lies beyond the end of the buffer.
        """
        if offset < 0:
            raise ValueError(f"negative offset {offset}")
        if offset > self._buffer.length:
            raise TruncatedInput(
                expected=offset,
                actual=self._buffer.length,
                offset=offset,
            )
        self._position = offset
