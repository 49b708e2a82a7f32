"""
ELF Identification and Header Decoder
======================================

Decodes the 52-byte ELF32 header field by field, in declaration order,
through a :class:`~elfdecode.parsers.buffer.Cursor`.  The first failed
check raises the matching :class:`~elfdecode.core.errors.FatalDecodeError`;
the program header offset/entry size cross-check is the one exception and
is only reported as a :class:`~elfdecode.core.models.Diagnostic`.

Layout (offsets in bytes)::

    0x00  e_ident[EI_MAG0..3]   4   big-endian 0x7F454C46
    0x04  e_ident[EI_CLASS]     1
    0x05  e_ident[EI_DATA]      1
    0x06  e_ident[EI_VERSION]   1
    0x07  e_ident padding       9
    0x10  e_type                2
    0x12  e_machine             2
    0x14  e_version             4
    0x18  e_entry               4
    0x1C  e_phoff               4
    0x20  e_shoff               4
    0x24  e_flags               4
    0x28  e_ehsize              2
    0x2A  e_phentsize           2
    0x2C  e_phnum               2
    0x2E  e_shentsize           2
    0x30  e_shnum               2
    0x32  e_shstrndx            2

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2, Figure 1-3.
"""

from __future__ import annotations

from typing import Optional

from shared.logger import ElfLogger

from elfdecode.core.errors import (
    InvalidClass,
    InvalidEncoding,
    InvalidHeaderSize,
    InvalidMagic,
    InvalidProgramHeaderEntrySize,
    InvalidSectionHeaderEntrySize,
    UnsupportedVersion,
    VersionMismatch,
)
from elfdecode.core.models import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticSeverity,
    ElfHeader,
    ElfIdentification,
)
from elfdecode.core.names import (
    ELF_CURRENT_VERSION,
    ELF_HEADER_SIZE,
    ELF_IDENT_PADDING,
    ELF_MAGIC,
    ELF_PROGRAM_HEADER_SIZE,
    ELF_SECTION_HEADER_SIZE,
    DataEncoding,
    ElfClass,
)
from elfdecode.parsers.buffer import ByteBuffer, Cursor
from elfdecode.parsers.codec import decode_le, decode_magic

_default_logger = ElfLogger.quiet("parsers.header")


class HeaderDecoder:
    """Sequential decoder for the ELF identification and file header.

    Usage::

        decoder = HeaderDecoder(Cursor(ByteBuffer(data)))
        header = decoder.decode()
        for diagnostic in decoder.diagnostics:
            ...
    """

    def __init__(self, cursor: Cursor, logger: ElfLogger | None = None) -> None:
        self._cursor = cursor
        self._log = logger or _default_logger
        self.diagnostics: list[Diagnostic] = []

    # ------------------------------------------------------------------ #
    #  Public interface
    # ------------------------------------------------------------------ #

    def decode(self) -> ElfHeader:
        """Decode the header starting at the cursor's current position."""
        with self._log.operation("decode_header"):
            ident = self._decode_identification()

            file_type = self._u16()
            machine_type = self._u16()

            version_offset = self._cursor.position
            version = self._u32()
            if version != ELF_CURRENT_VERSION:
                raise VersionMismatch(
                    expected=ELF_CURRENT_VERSION, actual=version, offset=version_offset,
                )

            entry = self._u32()
            program_header_offset = self._u32()
            section_header_offset = self._u32()
            flags = self._u32()

            header_size = self._checked_u16(InvalidHeaderSize, (ELF_HEADER_SIZE,))
            program_header_entry_size = self._checked_u16(
                InvalidProgramHeaderEntrySize, (ELF_PROGRAM_HEADER_SIZE, 0),
            )
            program_header_count = self._u16()
            section_header_entry_size = self._checked_u16(
                InvalidSectionHeaderEntrySize, (ELF_SECTION_HEADER_SIZE,),
            )
            section_header_count = self._u16()
            section_header_string_index = self._u16()

            header = ElfHeader(
                ident=ident,
                file_type=file_type,
                machine_type=machine_type,
                version=version,
                entry=entry,
                program_header_offset=program_header_offset,
                section_header_offset=section_header_offset,
                flags=flags,
                header_size=header_size,
                program_header_entry_size=program_header_entry_size,
                program_header_count=program_header_count,
                section_header_entry_size=section_header_entry_size,
                section_header_count=section_header_count,
                section_header_string_index=section_header_string_index,
            )

            self._check_program_header_consistency(header)
            self._log.debug(
                "Header decoded: type=0x%x machine=0x%x phoff=0x%x phnum=%d",
                header.file_type,
                header.machine_type,
                header.program_header_offset,
                header.program_header_count,
            )
            return header

    # ------------------------------------------------------------------ #
    #  Identification
    # ------------------------------------------------------------------ #

    def _decode_identification(self) -> ElfIdentification:
        magic_offset = self._cursor.position
        magic = decode_magic(self._cursor.read(4))
        if magic != ELF_MAGIC:
            raise InvalidMagic(expected=ELF_MAGIC, actual=magic, offset=magic_offset)

        elf_class = self._u8()
        if elf_class == ElfClass.INVALID:
            raise InvalidClass(
                expected=(ElfClass.ELF32.value, ElfClass.ELF64.value),
                actual=elf_class,
                offset=self._cursor.position - 1,
            )

        data_encoding = self._u8()
        if data_encoding == DataEncoding.INVALID:
            raise InvalidEncoding(
                expected=(DataEncoding.LITTLE_ENDIAN.value, DataEncoding.BIG_ENDIAN.value),
                actual=data_encoding,
                offset=self._cursor.position - 1,
            )

        version = self._u8()
        if version != ELF_CURRENT_VERSION:
            raise UnsupportedVersion(
                expected=ELF_CURRENT_VERSION,
                actual=version,
                offset=self._cursor.position - 1,
            )

        self._cursor.skip(ELF_IDENT_PADDING)

        if elf_class != ElfClass.ELF32 or data_encoding != DataEncoding.LITTLE_ENDIAN:
            self._report(
                Diagnostic(
                    kind=DiagnosticKind.UNSUPPORTED_LAYOUT,
                    severity=DiagnosticSeverity.INFO,
                    message=(
                        f"class {elf_class} / encoding {data_encoding} decoded "
                        "with the ELF32 little-endian layout"
                    ),
                )
            )

        return ElfIdentification(
            magic=magic,
            elf_class=elf_class,
            data_encoding=data_encoding,
            version=version,
        )

    # ------------------------------------------------------------------ #
    #  Consistency
    # ------------------------------------------------------------------ #

    def _check_program_header_consistency(self, header: ElfHeader) -> None:
        if header.program_header_consistent:
            return
        self._report(
            Diagnostic(
                kind=DiagnosticKind.INCONSISTENT_PROGRAM_HEADER,
                severity=DiagnosticSeverity.WARNING,
                message=(
                    "program header offset and entry size must both be zero "
                    f"or both nonzero (offset 0x{header.program_header_offset:x}, "
                    f"entry size 0x{header.program_header_entry_size:x})"
                ),
                expected=0 if header.program_header_offset == 0 else ELF_PROGRAM_HEADER_SIZE,
                actual=header.program_header_entry_size,
            )
        )

    def _report(self, diagnostic: Diagnostic) -> None:
        log = self._log.warning if diagnostic.severity == DiagnosticSeverity.WARNING else self._log.info
        log(
            "%s: %s", diagnostic.kind.value, diagnostic.message,
            kind=diagnostic.kind.value,
            expected=diagnostic.expected,
            actual=diagnostic.actual,
        )
        self.diagnostics.append(diagnostic)

    # ------------------------------------------------------------------ #
    #  Field readers
    # ------------------------------------------------------------------ #

    def _u8(self) -> int:
        return self._cursor.read(1)[0]

    def _u16(self) -> int:
        return decode_le(self._cursor.read(2), 2)

    def _u32(self) -> int:
        return decode_le(self._cursor.read(4), 4)

    def _checked_u16(self, error: type, allowed: tuple[int, ...]) -> int:
        offset = self._cursor.position
        value = self._u16()
        if value not in allowed:
            raise error(
                expected=allowed[0] if len(allowed) == 1 else allowed,
                actual=value,
                offset=offset,
            )
        return value


# ---------------------------------------------------------------------------
# Module-level entry point
# ---------------------------------------------------------------------------

def decode_header(
    data: bytes | ByteBuffer,
    *,
    diagnostics: Optional[list[Diagnostic]] = None,
    logger: ElfLogger | None = None,
) -> ElfHeader:
    """Decode the ELF header at the start of *data*.

    Args:
        data: Raw file bytes or a loaded :class:`ByteBuffer`.
        diagnostics: If given, reported observations are appended to it.
        logger: Logger for progress and diagnostics.

    Raises:
        FatalDecodeError: On the first failed structural check.
    """
    buffer = data if isinstance(data, ByteBuffer) else ByteBuffer(data)
    decoder = HeaderDecoder(Cursor(buffer), logger=logger)
    header = decoder.decode()
    if diagnostics is not None:
        diagnostics.extend(decoder.diagnostics)
    return header
