"""
Program Header Table Decoder
=============================

Decodes ``Elf32_Phdr`` entries starting at the header's ``e_phoff``.
Each entry is eight little-endian ``u32`` fields::

    p_type, p_offset, p_vaddr, p_paddr, p_filesz, p_memsz, p_flags, p_align

Two termination modes are supported:

``sentinel`` (default)
    Stop after the first ``PT_NULL`` entry, which is kept in the table.
    The declared ``e_phnum`` does not bound the loop; running off the end
    of the buffer raises :class:`~elfdecode.core.errors.TruncatedInput`.

``count``
    Read exactly ``e_phnum`` entries.  A ``PT_NULL`` entry before the last
    one is reported and decoding carries on.
"""

from __future__ import annotations

from typing import Optional

from shared.logger import ElfLogger

from elfdecode.core.models import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticSeverity,
    ElfHeader,
    ProgramHeaderEntry,
    ProgramHeaderTable,
)
from elfdecode.parsers.buffer import ByteBuffer, Cursor
from elfdecode.parsers.codec import decode_le

SENTINEL: str = "sentinel"
COUNT: str = "count"

_ENTRY_FIELDS: tuple[str, ...] = (
    "segment_type",
    "offset",
    "virtual_address",
    "physical_address",
    "file_size",
    "memory_size",
    "flags",
    "alignment",
)

_default_logger = ElfLogger.quiet("parsers.program_header")


class ProgramHeaderDecoder:
    """Decoder for the program header table described by *header*."""

    def __init__(
        self,
        cursor: Cursor,
        header: ElfHeader,
        *,
        termination: str = SENTINEL,
        logger: ElfLogger | None = None,
    ) -> None:
        if termination not in (SENTINEL, COUNT):
            raise ValueError(f"unknown termination mode {termination!r}")
        self._cursor = cursor
        self._header = header
        self._termination = termination
        self._log = logger or _default_logger
        self.diagnostics: list[Diagnostic] = []

    def decode(self) -> ProgramHeaderTable:
        """Decode the table; an empty table when ``e_phoff`` is zero."""
        table_offset = self._header.program_header_offset
        if table_offset == 0:
            return ProgramHeaderTable()

        with self._log.operation("decode_program_headers"):
            self._cursor.seek(table_offset)
            if self._termination == COUNT:
                entries = self._decode_counted()
            else:
                entries = self._decode_until_sentinel()

            self._log.debug(
                "Decoded %d program header entries at 0x%x",
                len(entries),
                table_offset,
            )
            return ProgramHeaderTable(offset=table_offset, entries=tuple(entries))

    # ------------------------------------------------------------------ #
    #  Termination strategies
    # ------------------------------------------------------------------ #

    def _decode_until_sentinel(self) -> list[ProgramHeaderEntry]:
        entries: list[ProgramHeaderEntry] = []
        while True:
            entry = self._decode_entry()
            entries.append(entry)
            if entry.is_null:
                break

        declared = self._header.program_header_count
        if len(entries) != declared:
            self._report(
                Diagnostic(
                    kind=DiagnosticKind.ENTRY_COUNT_MISMATCH,
                    severity=DiagnosticSeverity.INFO,
                    message=(
                        f"header declares {declared} program header entries, "
                        f"{len(entries)} decoded up to the PT_NULL entry"
                    ),
                    expected=declared,
                    actual=len(entries),
                )
            )
        return entries

    def _decode_counted(self) -> list[ProgramHeaderEntry]:
        declared = self._header.program_header_count
        entries: list[ProgramHeaderEntry] = []
        for index in range(declared):
            entry = self._decode_entry()
            entries.append(entry)
            if entry.is_null and index < declared - 1:
                self._report(
                    Diagnostic(
                        kind=DiagnosticKind.PREMATURE_NULL_ENTRY,
                        severity=DiagnosticSeverity.INFO,
                        message=(
                            f"PT_NULL entry #{index} precedes the last of "
                            f"{declared} declared entries"
                        ),
                        expected=declared - 1,
                        actual=index,
                    )
                )
        return entries

    # ------------------------------------------------------------------ #
    #  Entry
    # ------------------------------------------------------------------ #

    def _decode_entry(self) -> ProgramHeaderEntry:
        values = {
            name: decode_le(self._cursor.read(4), 4) for name in _ENTRY_FIELDS
        }
        return ProgramHeaderEntry(**values)

    def _report(self, diagnostic: Diagnostic) -> None:
        self._log.info(
            "%s: %s", diagnostic.kind.value, diagnostic.message,
            kind=diagnostic.kind.value,
            expected=diagnostic.expected,
            actual=diagnostic.actual,
        )
        self.diagnostics.append(diagnostic)


# ---------------------------------------------------------------------------
# Module-level entry point
# ---------------------------------------------------------------------------

def decode_program_headers(
    data: bytes | ByteBuffer,
    header: ElfHeader,
    *,
    termination: str = SENTINEL,
    diagnostics: Optional[list[Diagnostic]] = None,
    logger: ElfLogger | None = None,
) -> ProgramHeaderTable:
    """Decode the program header table of *data* described by *header*.

    Args:
        data: Raw file bytes or a loaded :class:`ByteBuffer`.
        header: The already decoded ELF header.
        termination: ``"sentinel"`` or ``"count"``.
        diagnostics: If given, reported observations are appended to it.
        logger: Logger for progress and diagnostics.

    Raises:
        TruncatedInput: If the table runs past the end of *data*.
    """
    buffer = data if isinstance(data, ByteBuffer) else ByteBuffer(data)
    decoder = ProgramHeaderDecoder(
        Cursor(buffer), header, termination=termination, logger=logger,
    )
    table = decoder.decode()
    if diagnostics is not None:
        diagnostics.extend(decoder.diagnostics)
    return table
