import json

import pytest
from click.testing import CliRunner

from elfdecode.cli import elfdecode_cli


@pytest.fixture
def runner():
    return CliRunner()


def test_decode_valid_file(runner, executable, write_file):
    path = write_file(executable)

    result = runner.invoke(elfdecode_cli, [str(path)])

    assert result.exit_code == 0
    assert 'Intel 80386' in result.output
    assert 'Executable File' in result.output
    assert 'Program Headers' in result.output


def test_non_elf_exits_one(runner, write_file):
    path = write_file(b'not an elf file at all, just text\n' * 3, 'notes.txt')

    result = runner.invoke(elfdecode_cli, [str(path)])

    assert result.exit_code == 1
    assert 'InvalidMagic' in result.output


def test_json_output(runner, executable, header_bytes, write_file):
    good = write_file(executable, 'good.o')
    bad = write_file(header_bytes(ehsize=0x30), 'bad.o')

    result = runner.invoke(elfdecode_cli, [str(good), str(bad), '--json'])

    assert result.exit_code == 1
    report = json.loads(result.stdout)
    assert report['summary'] == {'total': 2, 'decoded': 1, 'failed': 1, 'warnings': 0}

    first, second = report['results']
    assert first['path'] == str(good)
    assert first['header']['machine_name'] == 'Intel 80386'
    assert len(first['program_headers']['entries']) == 5
    assert second['failure']['kind'] == 'InvalidHeaderSize'
    assert second['header'] is None


def test_report_file(runner, executable, write_file, tmp_path):
    path = write_file(executable)
    report_path = tmp_path / 'reports' / 'out.json'

    result = runner.invoke(elfdecode_cli, [str(path), '--quiet', '-o', str(report_path)])

    assert result.exit_code == 0
    report = json.loads(report_path.read_text(encoding='utf-8'))
    assert report['summary']['decoded'] == 1


def test_termination_override(runner, elf_image, write_file):
    path = write_file(elf_image(entries=[(1,), (0,), (2,)]))

    result = runner.invoke(elfdecode_cli, [str(path), '--json', '--termination', 'count'])

    assert result.exit_code == 0
    entries = json.loads(result.stdout)['results'][0]['program_headers']['entries']
    assert [e['segment_type'] for e in entries] == [1, 0, 2]


def test_no_program_headers(runner, executable, write_file):
    path = write_file(executable)

    result = runner.invoke(elfdecode_cli, [str(path), '--json', '--no-program-headers'])

    assert result.exit_code == 0
    assert json.loads(result.stdout)['results'][0]['program_headers'] is None


def test_config_file(runner, elf_image, write_file, tmp_path):
    config = tmp_path / 'elfdecode.toml'
    config.write_text('[decoder]\ntermination = "count"\n', encoding='utf-8')
    path = write_file(elf_image(entries=[(1,), (0,), (2,)]))

    result = runner.invoke(elfdecode_cli, [str(path), '--json', '-c', str(config)])

    assert result.exit_code == 0
    assert len(json.loads(result.stdout)['results'][0]['program_headers']['entries']) == 3


def test_invalid_config(runner, executable, write_file, tmp_path):
    config = tmp_path / 'bad.toml'
    config.write_text('[decoder]\ntermination = "forever"\n', encoding='utf-8')
    path = write_file(executable)

    result = runner.invoke(elfdecode_cli, [str(path), '-c', str(config)])

    assert result.exit_code == 1
    assert 'Invalid configuration' in result.output


def test_missing_path(runner, tmp_path):
    result = runner.invoke(elfdecode_cli, [str(tmp_path / 'nope.o')])

    assert result.exit_code == 2


def test_version(runner):
    result = runner.invoke(elfdecode_cli, ['--version'])

    assert result.exit_code == 0
    assert 'elfdecode' in result.output


def test_report_path_with_brackets(runner, executable, write_file, tmp_path):
    path = write_file(executable)
    report_path = tmp_path / '[/x]' / 'r.json'

    result = runner.invoke(elfdecode_cli, [str(path), '-o', str(report_path)])

    assert result.exit_code == 0, result.output
    assert report_path.exists()
    assert 'JSON report saved' in result.output


def test_config_error_with_brackets(runner, executable, write_file, tmp_path):
    config = tmp_path / 'bad.toml'
    config.write_text('[decoder]\ntermination = "[/bold]"\n', encoding='utf-8')
    path = write_file(executable)

    result = runner.invoke(elfdecode_cli, [str(path), '-c', str(config)])

    assert result.exit_code == 1
    assert '[/bold]' in result.output
