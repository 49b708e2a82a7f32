"""
elfdecode -- ELF32 Header and Program Header Decoder
=====================================================

Decodes the identification bytes, the 52-byte file header and the program
header table of 32-bit little-endian ELF object files, validating every
structural field and reporting the first violation with the expected and
actual value.

Capabilities:
    - Field-by-field header decoding with fatal validation errors
    - Program header table decoding (PT_NULL sentinel or declared count)
    - Non-fatal diagnostics for inconsistent or unusual layouts
    - Symbolic names for file types, machines and segment types
    - Rich console rendering and JSON reports
    - Batch decoding from the command line

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
"""

__version__ = "1.0.0"

from elfdecode.core.engine import ElfDecodeEngine
from elfdecode.core.errors import ElfDecodeError, FatalDecodeError
from elfdecode.core.models import (
    DecodeResult,
    Diagnostic,
    ElfHeader,
    ElfIdentification,
    ProgramHeaderEntry,
    ProgramHeaderTable,
)
from elfdecode.parsers import decode_header, decode_program_headers

__all__ = [
    "__version__",
    "ElfDecodeEngine",
    "ElfDecodeError",
    "FatalDecodeError",
    "DecodeResult",
    "Diagnostic",
    "ElfHeader",
    "ElfIdentification",
    "ProgramHeaderEntry",
    "ProgramHeaderTable",
    "decode_header",
    "decode_program_headers",
]
