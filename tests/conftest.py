import struct

import pytest

# e_ident (16 bytes) followed by the little-endian Elf32_Ehdr fields
_EHDR = struct.Struct('<4sBBB9xHHIIIIIHHHHHH')
_PHDR = struct.Struct('<IIIIIIII')

_HEADER_DEFAULTS = {
    'magic': b'\x7fELF',
    'elf_class': 1,
    'data_encoding': 1,
    'ident_version': 1,
    'file_type': 2,
    'machine_type': 3,
    'version': 1,
    'entry': 0x08048000,
    'phoff': 0,
    'shoff': 0,
    'flags': 0,
    'ehsize': 0x34,
    'phentsize': 0x20,
    'phnum': 0,
    'shentsize': 0x28,
    'shnum': 0,
    'shstrndx': 0,
}


def pack_header(**fields):
    values = dict(_HEADER_DEFAULTS, **fields)
    return _EHDR.pack(
        values['magic'],
        values['elf_class'],
        values['data_encoding'],
        values['ident_version'],
        values['file_type'],
        values['machine_type'],
        values['version'],
        values['entry'],
        values['phoff'],
        values['shoff'],
        values['flags'],
        values['ehsize'],
        values['phentsize'],
        values['phnum'],
        values['shentsize'],
        values['shnum'],
        values['shstrndx'],
    )


def pack_phdr(p_type, offset=0, vaddr=0, paddr=0, filesz=0, memsz=0, flags=0, align=0):
    return _PHDR.pack(p_type, offset, vaddr, paddr, filesz, memsz, flags, align)


def build_elf(entries=(), phnum=None, trailing=b'', **header_fields):
    """ELF image with the program header table right after the header."""
    table = b''.join(pack_phdr(*entry) for entry in entries)
    if entries:
        header_fields.setdefault('phoff', _EHDR.size)
    header_fields.setdefault('phnum', len(entries) if phnum is None else phnum)
    return pack_header(**header_fields) + table + trailing


@pytest.fixture
def header_bytes():
    """Factory for a bare 52-byte header with selected fields overridden."""
    return pack_header


@pytest.fixture
def phdr_bytes():
    return pack_phdr


@pytest.fixture
def elf_image():
    """Factory for header plus program header table images."""
    return build_elf


@pytest.fixture
def executable():
    """A small i386 executable: PHDR, INTERP, LOAD, LOAD, NULL."""
    return build_elf(
        entries=[
            (6, 0x34, 0x08048034, 0x08048034, 0xa0, 0xa0, 0x4, 0x4),
            (3, 0xd4, 0x080480d4, 0x080480d4, 0x13, 0x13, 0x4, 0x1),
            (1, 0x0, 0x08048000, 0x08048000, 0x4c0, 0x4c0, 0x5, 0x1000),
            (1, 0x4c0, 0x080494c0, 0x080494c0, 0x100, 0x120, 0x6, 0x1000),
            (0,),
        ],
        entry=0x08048080,
        shoff=0x1000,
        shnum=12,
        shstrndx=11,
    )


@pytest.fixture
def write_file(tmp_path):
    """Write *data* to a file under tmp_path and return its path."""
    def _write(data, name='sample.elf'):
        path = tmp_path / name
        path.write_bytes(data)
        return path
    return _write
