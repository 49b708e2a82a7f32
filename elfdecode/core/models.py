"""
elfdecode Data Models
======================

Pydantic-based records produced by the ELF decoder.  Decoded records are
frozen: once the decoder has populated them they are never mutated.

The field layout mirrors the 32-bit ELF structures:

    ElfIdentification   e_ident[0..16)
    ElfHeader           Elf32_Ehdr (embeds ElfIdentification)
    ProgramHeaderEntry  Elf32_Phdr
    ProgramHeaderTable  ordered Elf32_Phdr sequence

References:
    - TIS Committee. (1995). Executable and Linkable Format (ELF) Specification.
    - Pydantic v2 documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from elfdecode.core.errors import FatalDecodeError
from elfdecode.core.names import (
    SegmentType,
    class_name,
    encoding_name,
    file_type_name,
    machine_name,
    segment_flags_str,
    segment_type_name,
)

U8 = Annotated[int, Field(ge=0, le=0xFF)]
U16 = Annotated[int, Field(ge=0, le=0xFFFF)]
U32 = Annotated[int, Field(ge=0, le=0xFFFFFFFF)]


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------

class DiagnosticKind(str, enum.Enum):
    """Kinds of reported (non-fatal) observations."""
    INCONSISTENT_PROGRAM_HEADER = "InconsistentProgramHeader"
    ENTRY_COUNT_MISMATCH = "EntryCountMismatch"
    PREMATURE_NULL_ENTRY = "PrematureNullEntry"
    UNSUPPORTED_LAYOUT = "UnsupportedLayout"


class DiagnosticSeverity(str, enum.Enum):
    WARNING = "warning"
    INFO = "info"


class Diagnostic(BaseModel):
    """A reported observation that does not stop decoding.

    Attributes:
        kind: What was observed.
        severity: ``warning`` for format violations, ``info`` otherwise.
        message: Human-readable description.
        expected: Value the format calls for, when there is one.
        actual: Value found in the file.
    """
    model_config = ConfigDict(frozen=True)

    kind: DiagnosticKind
    severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    message: str = ""
    expected: Optional[int] = None
    actual: Optional[int] = None


# ---------------------------------------------------------------------------
# ELF header
# ---------------------------------------------------------------------------

class ElfIdentification(BaseModel):
    """The leading ``e_ident`` bytes.

    The 9 bytes of padding that follow ``version`` are consumed by the
    decoder but not stored.
    """
    model_config = ConfigDict(frozen=True)

    magic: U32
    elf_class: U8
    data_encoding: U8
    version: U8

    @computed_field  # type: ignore[prop-decorator]
    @property
    def class_name(self) -> str:
        return class_name(self.elf_class)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def encoding_name(self) -> str:
        return encoding_name(self.data_encoding)


class ElfHeader(BaseModel):
    """The 52-byte ELF32 file header.

    Attributes:
        ident: Embedded identification record.
        file_type: ``e_type``.
        machine_type: ``e_machine``.
        version: ``e_version``; always 1 once decoded.
        entry: Virtual address of the entry point.
        program_header_offset: File offset of the program header table.
        section_header_offset: File offset of the section header table.
        flags: Processor-specific flags.
        header_size: Size of this header, ``0x34``.
        program_header_entry_size: ``0x20``, or ``0`` without a table.
        program_header_count: Declared number of program header entries.
        section_header_entry_size: ``0x28``.
        section_header_count: Declared number of section header entries.
        section_header_string_index: Index of the section name string table.
    """
    model_config = ConfigDict(frozen=True)

    ident: ElfIdentification
    file_type: U16
    machine_type: U16
    version: U32
    entry: U32
    program_header_offset: U32
    section_header_offset: U32
    flags: U32
    header_size: U16
    program_header_entry_size: U16
    program_header_count: U16
    section_header_entry_size: U16
    section_header_count: U16
    section_header_string_index: U16

    @computed_field  # type: ignore[prop-decorator]
    @property
    def file_type_name(self) -> str:
        return file_type_name(self.file_type)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def machine_name(self) -> str:
        return machine_name(self.machine_type)

    @property
    def program_header_consistent(self) -> bool:
        """``True`` when offset and entry size are both zero or both nonzero."""
        return (self.program_header_offset == 0) == (self.program_header_entry_size == 0)


# ---------------------------------------------------------------------------
# Program header table
# ---------------------------------------------------------------------------

class ProgramHeaderEntry(BaseModel):
    """One ``Elf32_Phdr`` record, fields in file order."""
    model_config = ConfigDict(frozen=True)

    segment_type: U32
    offset: U32
    virtual_address: U32
    physical_address: U32
    file_size: U32
    memory_size: U32
    flags: U32
    alignment: U32

    @computed_field  # type: ignore[prop-decorator]
    @property
    def type_name(self) -> str:
        return segment_type_name(self.segment_type)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def flags_str(self) -> str:
        return segment_flags_str(self.flags)

    @property
    def is_null(self) -> bool:
        return self.segment_type == SegmentType.NULL


class ProgramHeaderTable(BaseModel):
    """Program header entries in file order."""
    model_config = ConfigDict(frozen=True)

    offset: U32 = 0
    entries: tuple[ProgramHeaderEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> ProgramHeaderEntry:
        return self.entries[index]

    @property
    def segment_types(self) -> list[int]:
        return [entry.segment_type for entry in self.entries]


# ---------------------------------------------------------------------------
# Decode results
# ---------------------------------------------------------------------------

class DecodeFailure(BaseModel):
    """Serialisable form of a :class:`FatalDecodeError`."""
    model_config = ConfigDict(frozen=True)

    kind: str
    message: str
    expected: Any = None
    actual: Any = None
    offset: Optional[int] = None

    @classmethod
    def from_error(cls, exc: FatalDecodeError) -> DecodeFailure:
        return cls(
            kind=exc.kind,
            message=str(exc),
            expected=exc.expected,
            actual=exc.actual,
            offset=exc.offset,
        )


class DecodeResult(BaseModel):
    """Outcome of decoding one input.

    A failed decode carries neither a header nor a program header table:
    partially decoded records are never handed out.

    Attributes:
        path: Source file path (or a label for in-memory input).
        size: Input size in bytes.
        header: Decoded ELF header.
        program_headers: Decoded program header table; ``None`` when the
            file declares no table or table decoding was disabled.
        diagnostics: Reported, non-fatal observations.
        failure: The fatal condition that ended the decode, if any.
        duration_seconds: Wall-clock decode time.
    """
    path: str = ""
    size: int = 0
    header: Optional[ElfHeader] = None
    program_headers: Optional[ProgramHeaderTable] = None
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    failure: Optional[DecodeFailure] = None
    duration_seconds: float = 0.0

    @model_validator(mode="after")
    def _no_partial_records(self) -> DecodeResult:
        if self.failure is not None and (
            self.header is not None or self.program_headers is not None
        ):
            raise ValueError("a failed decode cannot carry decoded records")
        return self

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def warning_count(self) -> int:
        return sum(
            1 for d in self.diagnostics if d.severity == DiagnosticSeverity.WARNING
        )
