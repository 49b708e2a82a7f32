"""
ELF Enumerations and Name Lookups
==================================

Constants for the enumerated fields of the ELF identification, header and
program header records, together with the descriptive strings the
reporters display for them.  Every lookup falls back to an "Unknown ..."
string for values it does not recognise.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - Linux man page: elf(5).
"""

from __future__ import annotations

import enum


# ---------------------------------------------------------------------------
# Identification constants
# ---------------------------------------------------------------------------

ELF_MAGIC: int = 0x7F454C46
ELF_CURRENT_VERSION: int = 0x01

# Structure sizes for the 32-bit layout
ELF_HEADER_SIZE: int = 0x34
ELF_PROGRAM_HEADER_SIZE: int = 0x20
ELF_SECTION_HEADER_SIZE: int = 0x28

ELF_IDENT_PADDING: int = 9


class ElfClass(enum.IntEnum):
    """``EI_CLASS``: address width of the file."""
    INVALID = 0
    ELF32 = 1
    ELF64 = 2


class DataEncoding(enum.IntEnum):
    """``EI_DATA``: byte order of the file."""
    INVALID = 0
    LITTLE_ENDIAN = 1
    BIG_ENDIAN = 2


class FileType(enum.IntEnum):
    """``e_type``: object file type."""
    NONE = 0x0
    RELOCATABLE = 0x1
    EXECUTABLE = 0x2
    SHARED_OBJECT = 0x3
    CORE = 0x4
    LOPROC = 0xFF00
    HIPROC = 0xFFFF


class MachineType(enum.IntEnum):
    """``e_machine``: target architecture."""
    NONE = 0
    ATT_WE_32100 = 1
    SPARC = 2
    INTEL_80386 = 3
    MOTOROLA_68000 = 4
    MOTOROLA_88000 = 5
    INTEL_80860 = 7
    MIPS_RS3000 = 8
    POWERPC = 20
    POWERPC64 = 21
    ARM = 40
    X86_64 = 62
    AARCH64 = 183
    RISCV = 243


class SegmentType(enum.IntEnum):
    """``p_type``: kind of segment a program header describes."""
    NULL = 0
    LOAD = 1
    DYNAMIC = 2
    INTERP = 3
    NOTE = 4
    SHLIB = 5
    PHDR = 6
    TLS = 7
    GNU_EH_FRAME = 0x6474E550
    GNU_STACK = 0x6474E551
    GNU_RELRO = 0x6474E552
    LOOS = 0x60000000
    HIOS = 0x6FFFFFFF
    LOPROC = 0x70000000
    HIPROC = 0x7FFFFFFF


# Program header flags
PF_X: int = 0x1
PF_W: int = 0x2
PF_R: int = 0x4


# ---------------------------------------------------------------------------
# Descriptive names
# ---------------------------------------------------------------------------

_CLASS_NAMES: dict[int, str] = {
    ElfClass.ELF32: "32-bit",
    ElfClass.ELF64: "64-bit",
}

_ENCODING_NAMES: dict[int, str] = {
    DataEncoding.LITTLE_ENDIAN: "Little Endian",
    DataEncoding.BIG_ENDIAN: "Big Endian",
}

_FILE_TYPE_NAMES: dict[int, str] = {
    FileType.NONE: "No File Type",
    FileType.RELOCATABLE: "Relocatable File",
    FileType.EXECUTABLE: "Executable File",
    FileType.SHARED_OBJECT: "Shared Object File",
    FileType.CORE: "Core File",
}

_MACHINE_NAMES: dict[int, str] = {
    MachineType.NONE: "No Machine",
    MachineType.ATT_WE_32100: "AT&T WE 32100",
    MachineType.SPARC: "SPARC",
    MachineType.INTEL_80386: "Intel 80386",
    MachineType.MOTOROLA_68000: "Motorola 68000",
    MachineType.MOTOROLA_88000: "Motorola 88000",
    MachineType.INTEL_80860: "Intel 80860",
    MachineType.MIPS_RS3000: "MIPS RS3000",
    MachineType.POWERPC: "PowerPC",
    MachineType.POWERPC64: "PowerPC64",
    MachineType.ARM: "ARM",
    MachineType.X86_64: "x86_64",
    MachineType.AARCH64: "AArch64",
    MachineType.RISCV: "RISC-V",
}

_SEGMENT_TYPE_NAMES: dict[int, str] = {
    SegmentType.NULL: "NULL (unused entry)",
    SegmentType.LOAD: "LOAD (loadable segment)",
    SegmentType.DYNAMIC: "DYNAMIC (dynamic linking information)",
    SegmentType.INTERP: "INTERP (program interpreter path)",
    SegmentType.NOTE: "NOTE (auxiliary information)",
    SegmentType.SHLIB: "SHLIB (reserved)",
    SegmentType.PHDR: "PHDR (program header table)",
    SegmentType.TLS: "TLS (thread-local storage)",
    SegmentType.GNU_EH_FRAME: "GNU_EH_FRAME",
    SegmentType.GNU_STACK: "GNU_STACK",
    SegmentType.GNU_RELRO: "GNU_RELRO",
}


def class_name(value: int) -> str:
    """Return the descriptive name of an ``EI_CLASS`` value."""
    return _CLASS_NAMES.get(value, "Unknown Class")


def encoding_name(value: int) -> str:
    """Return the descriptive name of an ``EI_DATA`` value."""
    return _ENCODING_NAMES.get(value, "Unknown Encoding")


def file_type_name(value: int) -> str:
    """Return the descriptive name of an ``e_type`` value."""
    if value in _FILE_TYPE_NAMES:
        return _FILE_TYPE_NAMES[value]
    if FileType.LOPROC <= value <= FileType.HIPROC:
        return "Processor-specific File"
    return "Unknown File Type"


def machine_name(value: int) -> str:
    """Return the descriptive name of an ``e_machine`` value."""
    return _MACHINE_NAMES.get(value, "Unknown Machine Type")


def segment_type_name(value: int) -> str:
    """Return the descriptive name of a ``p_type`` value.

    Values without a dedicated name inside the OS-specific
    (``0x60000000``-``0x6FFFFFFF``) or processor-specific
    (``0x70000000``-``0x7FFFFFFF``) ranges are named after their range.
    """
    if value in _SEGMENT_TYPE_NAMES:
        return _SEGMENT_TYPE_NAMES[value]
    if SegmentType.LOPROC <= value <= SegmentType.HIPROC:
        return "Processor-specific"
    if SegmentType.LOOS <= value <= SegmentType.HIOS:
        return "OS-specific"
    return "Unknown Segment Type"


def segment_flags_str(flags: int) -> str:
    """Convert program header flags to a readable string.

    Returns:
        String like ``"RWX"`` for Read+Write+Execute, ``"-"`` for none.
    """
    parts: list[str] = []
    if flags & PF_R:
        parts.append("R")
    if flags & PF_W:
        parts.append("W")
    if flags & PF_X:
        parts.append("X")
    return "".join(parts) if parts else "-"
