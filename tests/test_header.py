import json
import logging

import pytest
from pydantic import ValidationError

from shared.logger import ElfLogger
from elfdecode.core import errors
from elfdecode.core.models import DiagnosticKind, DiagnosticSeverity
from elfdecode.core.names import FileType, MachineType
from elfdecode.parsers.buffer import ByteBuffer, Cursor
from elfdecode.parsers.header import HeaderDecoder, decode_header


def test_canonical_executable_header(header_bytes):
    data = header_bytes()
    assert len(data) == 52

    header = decode_header(data)

    assert header.ident.magic == 0x7F454C46
    assert header.ident.elf_class == 1
    assert header.ident.data_encoding == 1
    assert header.ident.version == 1
    assert header.file_type == FileType.EXECUTABLE
    assert header.machine_type == MachineType.INTEL_80386
    assert header.version == 1
    assert header.entry == 0x08048000
    assert header.header_size == 0x34
    assert header.program_header_entry_size == 0x20
    assert header.section_header_entry_size == 0x28


def test_names_are_resolved(header_bytes):
    header = decode_header(header_bytes(file_type=1, machine_type=40))

    assert header.file_type_name == 'Relocatable File'
    assert header.machine_name == 'ARM'
    assert header.ident.class_name == '32-bit'
    assert header.ident.encoding_name == 'Little Endian'


def test_all_fields_in_order(header_bytes):
    data = header_bytes(
        entry=0x11223344,
        phoff=0x40,
        shoff=0x2000,
        flags=0x5000002,
        phnum=7,
        shnum=30,
        shstrndx=29,
    )

    header = decode_header(data)

    assert header.entry == 0x11223344
    assert header.program_header_offset == 0x40
    assert header.section_header_offset == 0x2000
    assert header.flags == 0x5000002
    assert header.program_header_count == 7
    assert header.section_header_count == 30
    assert header.section_header_string_index == 29


def test_header_is_immutable(header_bytes):
    header = decode_header(header_bytes())

    with pytest.raises(ValidationError):
        header.entry = 0


def test_invalid_header_size(header_bytes):
    with pytest.raises(errors.InvalidHeaderSize) as excinfo:
        decode_header(header_bytes(ehsize=0x30))

    assert excinfo.value.expected == 0x34
    assert excinfo.value.actual == 0x30
    assert excinfo.value.offset == 0x28
    assert 'expected 0x34, got 0x30' in str(excinfo.value)


@pytest.mark.parametrize('fields, error, expected, actual', [
    ({'magic': b'\x7fELG'}, errors.InvalidMagic, 0x7F454C46, 0x7F454C47),
    ({'magic': b'MZ\x90\x00'}, errors.InvalidMagic, 0x7F454C46, 0x4D5A9000),
    ({'elf_class': 0}, errors.InvalidClass, (1, 2), 0),
    ({'data_encoding': 0}, errors.InvalidEncoding, (1, 2), 0),
    ({'ident_version': 2}, errors.UnsupportedVersion, 1, 2),
    ({'ident_version': 0}, errors.UnsupportedVersion, 1, 0),
    ({'version': 0}, errors.VersionMismatch, 1, 0),
    ({'version': 2}, errors.VersionMismatch, 1, 2),
    ({'phentsize': 0x38}, errors.InvalidProgramHeaderEntrySize, (0x20, 0), 0x38),
    ({'shentsize': 0x40}, errors.InvalidSectionHeaderEntrySize, 0x28, 0x40),
    ({'shentsize': 0}, errors.InvalidSectionHeaderEntrySize, 0x28, 0),
])
def test_fatal_checks(header_bytes, fields, error, expected, actual):
    with pytest.raises(error) as excinfo:
        decode_header(header_bytes(**fields))

    assert excinfo.value.expected == expected
    assert excinfo.value.actual == actual
    assert excinfo.value.kind == error.__name__


def test_first_failing_check_wins(header_bytes):
    # both the ident version and the header size are wrong
    with pytest.raises(errors.UnsupportedVersion):
        decode_header(header_bytes(ident_version=3, ehsize=0))


@pytest.mark.parametrize('length', [0, 3, 4, 15, 16, 20, 51])
def test_truncated_header(header_bytes, length):
    with pytest.raises(errors.TruncatedInput):
        decode_header(header_bytes()[:length])


def test_truncated_magic_is_not_invalid_magic():
    with pytest.raises(errors.TruncatedInput):
        decode_header(b'\x7fE')


def test_zero_program_header_entry_size_accepted(header_bytes):
    diagnostics = []
    header = decode_header(header_bytes(phentsize=0, phoff=0), diagnostics=diagnostics)

    assert header.program_header_entry_size == 0
    assert header.program_header_consistent
    assert diagnostics == []


@pytest.mark.parametrize('phoff, phentsize', [
    (0x34, 0),
    (0, 0x20),
])
def test_inconsistent_program_header_is_reported(header_bytes, phoff, phentsize):
    diagnostics = []

    header = decode_header(
        header_bytes(phoff=phoff, phentsize=phentsize),
        diagnostics=diagnostics,
    )

    assert header is not None
    assert not header.program_header_consistent
    assert [d.kind for d in diagnostics] == [DiagnosticKind.INCONSISTENT_PROGRAM_HEADER]
    assert diagnostics[0].severity == DiagnosticSeverity.WARNING
    assert diagnostics[0].actual == phentsize


@pytest.mark.parametrize('fields', [
    {'elf_class': 2},
    {'data_encoding': 2},
])
def test_other_layouts_decoded_with_note(header_bytes, fields):
    diagnostics = []

    header = decode_header(header_bytes(phentsize=0, **fields), diagnostics=diagnostics)

    assert header.file_type == FileType.EXECUTABLE
    assert [d.kind for d in diagnostics] == [DiagnosticKind.UNSUPPORTED_LAYOUT]
    assert diagnostics[0].severity == DiagnosticSeverity.INFO


def test_unknown_enumerations_are_not_fatal(header_bytes):
    header = decode_header(header_bytes(elf_class=9, data_encoding=7, file_type=0x1234, machine_type=0xBEEF))

    assert header.ident.class_name == 'Unknown Class'
    assert header.ident.encoding_name == 'Unknown Encoding'
    assert header.file_type_name == 'Unknown File Type'
    assert header.machine_name == 'Unknown Machine Type'


def test_decoder_leaves_cursor_after_header(header_bytes):
    cursor = Cursor(ByteBuffer(header_bytes(phentsize=0) + b'\xde\xad'))
    decoder = HeaderDecoder(cursor)

    decoder.decode()

    assert cursor.position == 52
    assert decoder.diagnostics == []


def test_invalid_magic_offset_follows_cursor(header_bytes):
    data = b'\x00' * 8 + header_bytes(magic=b'\x7fELX')
    cursor = Cursor(ByteBuffer(data), position=8)

    with pytest.raises(errors.InvalidMagic) as excinfo:
        HeaderDecoder(cursor).decode()

    assert excinfo.value.offset == 8
    assert 'at offset 0x8' in str(excinfo.value)


def test_invalid_magic_at_file_start(header_bytes):
    with pytest.raises(errors.InvalidMagic) as excinfo:
        decode_header(header_bytes(magic=b'\x7fELX'))

    assert excinfo.value.offset == 0


def test_diagnostic_fields_reach_json_log(header_bytes, tmp_path):
    log_file = tmp_path / 'header.log'
    log = ElfLogger('test.header.json', log_file=log_file, json_logs=True, console_output=False)

    decode_header(header_bytes(phoff=0x34, phentsize=0), logger=log)
    for handler in logging.getLogger('elfdecode.test.header.json').handlers:
        handler.flush()

    entry = json.loads(log_file.read_text(encoding='utf-8').splitlines()[-1])
    assert entry['level'] == 'WARNING'
    assert entry['extra'] == {
        'kind': 'InconsistentProgramHeader',
        'expected': 0x20,
        'actual': 0,
    }
