import logging

import pytest

from shared.config import DecoderConfig, ElfDecodeConfig
from shared.logger import ElfLogger
from elfdecode.core.engine import ElfDecodeEngine
from elfdecode.core.models import DecodeResult, DiagnosticKind


@pytest.fixture
def engine():
    return ElfDecodeEngine()


def test_decode_file(engine, executable, write_file):
    path = write_file(executable)

    result = engine.decode_file(path)

    assert result.ok
    assert result.path == str(path)
    assert result.size == len(executable)
    assert result.header.machine_name == 'Intel 80386'
    assert len(result.program_headers) == 5
    assert result.diagnostics == []
    assert result.failure is None
    assert result.duration_seconds >= 0


def test_decode_bytes_labels_source(engine, executable):
    result = engine.decode_bytes(executable, source='firmware.bin')

    assert result.ok
    assert result.path == 'firmware.bin'


def test_fatal_error_becomes_failure(engine, header_bytes):
    result = engine.decode_bytes(header_bytes(ehsize=0x30))

    assert not result.ok
    assert result.header is None
    assert result.program_headers is None
    assert result.failure.kind == 'InvalidHeaderSize'
    assert result.failure.expected == 0x34
    assert result.failure.actual == 0x30
    assert result.failure.offset == 0x28


def test_program_header_failure_drops_header(engine, elf_image):
    # a valid header whose table never reaches PT_NULL
    result = engine.decode_bytes(elf_image(entries=[(1,)]))

    assert result.failure.kind == 'TruncatedInput'
    assert result.header is None
    assert result.program_headers is None


def test_not_an_elf_file(engine):
    result = engine.decode_bytes(b'#!/bin/sh\necho hello\n' * 4)

    assert result.failure.kind == 'InvalidMagic'


def test_diagnostics_are_collected(engine, elf_image):
    result = engine.decode_bytes(elf_image(entries=[(1,), (0,)], phnum=9))

    assert result.ok
    assert [d.kind for d in result.diagnostics] == [DiagnosticKind.ENTRY_COUNT_MISMATCH]
    assert result.warning_count == 0


def test_inconsistent_header_is_a_warning(engine, header_bytes):
    result = engine.decode_bytes(header_bytes())

    assert result.ok
    assert result.program_headers is None
    assert result.warning_count == 1
    assert result.diagnostics[0].kind == DiagnosticKind.INCONSISTENT_PROGRAM_HEADER


def test_no_table_without_offset(engine, header_bytes):
    result = engine.decode_bytes(header_bytes(phentsize=0))

    assert result.ok
    assert result.program_headers is None
    assert result.diagnostics == []


def test_count_termination_from_config(elf_image):
    config = ElfDecodeConfig(decoder=DecoderConfig(termination='count'))
    engine = ElfDecodeEngine(config=config)

    result = engine.decode_bytes(elf_image(entries=[(1,), (0,), (1,)]))

    assert len(result.program_headers) == 3
    assert [d.kind for d in result.diagnostics] == [DiagnosticKind.PREMATURE_NULL_ENTRY]


def test_program_headers_disabled(executable):
    config = ElfDecodeConfig(decoder=DecoderConfig(decode_program_headers=False))
    engine = ElfDecodeEngine(config=config)

    result = engine.decode_bytes(executable)

    assert result.ok
    assert result.header is not None
    assert result.program_headers is None


def test_file_too_large(executable, write_file):
    config = ElfDecodeConfig(decoder=DecoderConfig(max_file_size=64))
    engine = ElfDecodeEngine(config=config)

    result = engine.decode_file(write_file(executable))

    assert result.failure.kind == 'InputTooLarge'
    assert result.failure.expected == 64
    assert result.failure.actual == len(executable)
    assert result.size == len(executable)


def test_unreadable_file(engine, tmp_path):
    result = engine.decode_file(tmp_path / 'missing.o')

    assert not result.ok
    assert result.failure.kind == 'FileNotFoundError'


def test_decode_many_isolates_inputs(engine, executable, write_file):
    good = write_file(executable, 'good.o')
    bad = write_file(b'\x7fELF\x00', 'bad.o')
    other = write_file(executable, 'other.o')

    results = engine.decode_many([good, bad, other])

    assert [r.ok for r in results] == [True, False, True]
    assert results[1].failure.kind == 'InvalidClass'
    assert results[0].header == results[2].header
    assert results[0].program_headers == results[2].program_headers


def test_result_rejects_partial_records(executable, engine):
    decoded = engine.decode_bytes(executable)

    with pytest.raises(ValueError):
        DecodeResult(
            header=decoded.header,
            failure={'kind': 'TruncatedInput', 'message': 'truncated input'},
        )


def test_second_engine_keeps_first_engine_logs(header_bytes, tmp_path):
    log_file = tmp_path / 'first.log'
    first = ElfDecodeEngine(
        logger=ElfLogger('test.engine.first', log_file=log_file, console_output=False),
    )
    ElfDecodeEngine(logger=ElfLogger.quiet('test.engine.second'))

    result = first.decode_bytes(header_bytes(phoff=0x34, phentsize=0))
    for handler in logging.getLogger('elfdecode.test.engine.first').handlers:
        handler.flush()

    assert result.diagnostics[0].kind == DiagnosticKind.INCONSISTENT_PROGRAM_HEADER
    text = log_file.read_text(encoding='utf-8')
    assert 'InconsistentProgramHeader' in text
    assert 'elfdecode.test.engine.first.header' in text
