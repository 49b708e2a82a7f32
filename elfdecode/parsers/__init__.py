"""Byte-level decoding of the ELF32 header and program header table."""

from elfdecode.parsers.buffer import ByteBuffer, Cursor
from elfdecode.parsers.codec import decode_le, decode_magic
from elfdecode.parsers.header import HeaderDecoder, decode_header
from elfdecode.parsers.program_header import ProgramHeaderDecoder, decode_program_headers

__all__ = [
    "ByteBuffer",
    "Cursor",
    "decode_le",
    "decode_magic",
    "HeaderDecoder",
    "decode_header",
    "ProgramHeaderDecoder",
    "decode_program_headers",
]
