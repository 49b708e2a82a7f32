"""
Decoder Exceptions
===================

Fatal decode conditions.  Each one aborts the decode of the current file;
the engine turns it into a :class:`~elfdecode.core.models.DecodeFailure`.
Mismatch errors carry the expected and the actual value so that failures
can be diagnosed from the message alone.
"""

from __future__ import annotations

from typing import Any, Optional


class ElfDecodeError(Exception):
    """Base class of every exception raised by elfdecode."""


class FatalDecodeError(ElfDecodeError):
    """A condition that makes the rest of the file undecodable.

    Attributes:
        expected: The value the format requires (when there is one).
        actual:   The value found in the file.
        offset:   File offset of the offending field, if known.
    """

    description: str = "fatal decode error"

    def __init__(
        self,
        message: str | None = None,
        *,
        expected: Any = None,
        actual: Any = None,
        offset: Optional[int] = None,
    ) -> None:
        self.expected = expected
        self.actual = actual
        self.offset = offset
        super().__init__(message or self._default_message())

    @property
    def kind(self) -> str:
        """Stable name of the error kind (the class name)."""
        return type(self).__name__

    def _default_message(self) -> str:
        details: list[str] = []
        if self.expected is not None or self.actual is not None:
            details.append(
                f"expected {_fmt(self.expected)}, got {_fmt(self.actual)}"
            )
        if self.offset is not None:
            details.append(f"at offset 0x{self.offset:x}")
        if not details:
            return self.description
        return f"{self.description} ({', '.join(details)})"


def _fmt(value: Any) -> str:
    if isinstance(value, int):
        return f"0x{value:X}"
    if isinstance(value, (tuple, list)):
        return " or ".join(_fmt(v) for v in value)
    return str(value)


class TruncatedInput(FatalDecodeError):
    """Fewer bytes remain in the buffer than a field requires.

    ``expected`` is the number of bytes requested and ``actual`` the number
    still available at ``offset``.
    """

    description = "truncated input"


class InvalidMagic(FatalDecodeError):
    description = "invalid ELF magic number"


class InvalidClass(FatalDecodeError):
    description = "invalid ELF class"


class InvalidEncoding(FatalDecodeError):
    description = "invalid ELF data encoding"


class UnsupportedVersion(FatalDecodeError):
    description = "unsupported ELF identification version"


class VersionMismatch(FatalDecodeError):
    description = "ELF header version does not match"


class InvalidHeaderSize(FatalDecodeError):
    description = "invalid ELF header size"


class InvalidProgramHeaderEntrySize(FatalDecodeError):
    description = "invalid program header entry size"


class InvalidSectionHeaderEntrySize(FatalDecodeError):
    description = "invalid section header entry size"


class InputTooLarge(FatalDecodeError):
    """The input exceeds ``decoder.max_file_size``."""

    description = "input file too large"
