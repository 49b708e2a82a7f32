"""
elfdecode Console Output
=========================

Rich-powered terminal display for decode results: an identification and
header panel, the program header table, reported diagnostics and, for
failed inputs, the fatal condition that stopped decoding.

Uses the :class:`~shared.console.ElfConsole` abstraction for consistent
styling.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Sequence

from rich.markup import escape

from shared.console import ElfConsole

from elfdecode.core.models import (
    DecodeResult,
    Diagnostic,
    DiagnosticSeverity,
    ElfHeader,
    ProgramHeaderTable,
)

_SEVERITY_STYLES: dict[DiagnosticSeverity, str] = {
    DiagnosticSeverity.WARNING: "elf.warning",
    DiagnosticSeverity.INFO: "elf.info",
}


def _hex(value: int | None, width: int = 8) -> str:
    if value is None:
        return "-"
    if width == 0:
        return f"0x{value:x}"
    return f"0x{value:0{width}x}"


def _named(value: int, name: str, width: int = 4) -> str:
    return f"[elf.value]{_hex(value, width)}[/elf.value]  [elf.name]{escape(name)}[/elf.name]"


# ---------------------------------------------------------------------------
# ElfConsoleOutput
# ---------------------------------------------------------------------------

class ElfConsoleOutput:
    """Terminal display for :class:`DecodeResult` objects.

    Usage::

        output = ElfConsoleOutput()
        output.display(result)
    """

    def __init__(self, console: ElfConsole | None = None) -> None:
        self._console: ElfConsole = console or ElfConsole()

    def display(self, result: DecodeResult) -> None:
        """Display one decode result."""
        self._console.section(escape(result.path or "<memory>"))

        if result.failure is not None:
            self.display_failure(result)
        else:
            if result.header is not None:
                self.display_header(result.header, result.size)
            if result.program_headers is not None:
                self.display_program_headers(result.program_headers)

        if result.diagnostics:
            self.display_diagnostics(result.diagnostics)

        self._console.divider()

    def display_many(self, results: Sequence[DecodeResult]) -> None:
        """Display every result followed by a batch summary line."""
        for result in results:
            self.display(result)

        failed = sum(1 for r in results if not r.ok)
        if len(results) > 1:
            self._console.blank()
            self._console.info(
                f"{len(results)} inputs: {len(results) - failed} decoded, {failed} failed"
            )

    # ------------------------------------------------------------------ #
    #  Sections
    # ------------------------------------------------------------------ #

    def display_header(self, header: ElfHeader, size: int = 0) -> None:
        """Display the identification and header fields in a panel."""
        ident = header.ident
        lines: list[str] = [
            f"[bold]Magic:[/bold]                 [elf.value]{_hex(ident.magic)}[/elf.value]",
            f"[bold]Class:[/bold]                 {_named(ident.elf_class, ident.class_name, 2)}",
            f"[bold]Data:[/bold]                  {_named(ident.data_encoding, ident.encoding_name, 2)}",
            f"[bold]Ident version:[/bold]         {ident.version}",
            f"[bold]Type:[/bold]                  {_named(header.file_type, header.file_type_name)}",
            f"[bold]Machine:[/bold]               {_named(header.machine_type, header.machine_name)}",
            f"[bold]Version:[/bold]               {header.version}",
            f"[bold]Entry point:[/bold]           [elf.value]{_hex(header.entry)}[/elf.value]",
            f"[bold]Program headers:[/bold]       offset {_hex(header.program_header_offset)}, "
            f"{header.program_header_count} x {header.program_header_entry_size} bytes",
            f"[bold]Section headers:[/bold]       offset {_hex(header.section_header_offset)}, "
            f"{header.section_header_count} x {header.section_header_entry_size} bytes",
            f"[bold]Flags:[/bold]                 {_hex(header.flags)}",
            f"[bold]Header size:[/bold]           {header.header_size} bytes",
            f"[bold]Section name index:[/bold]    {header.section_header_string_index}",
        ]
        if size:
            lines.insert(0, f"[bold]File size:[/bold]             {size:,} bytes")

        self._console.panel(lines, title="ELF Header")
        self._console.blank()

    def display_program_headers(self, table: ProgramHeaderTable) -> None:
        """Display the program header table."""
        if not table.entries:
            self._console.info("No program headers.")
            return

        rows = [
            (
                index,
                escape(entry.type_name),
                _hex(entry.offset),
                _hex(entry.virtual_address),
                _hex(entry.physical_address),
                _hex(entry.file_size),
                _hex(entry.memory_size),
                entry.flags_str,
                _hex(entry.alignment, 0),
            )
            for index, entry in enumerate(table.entries)
        ]
        self._console.table(
            "Program Headers",
            ("#", "Type", "Offset", "VirtAddr", "PhysAddr", "FileSiz", "MemSiz", "Flg", "Align"),
            rows,
            caption=f"{len(table)} entries at {_hex(table.offset)}",
            styles=("dim", "bold", "", "", "", "", "", "elf.name", ""),
        )
        self._console.blank()

    def display_diagnostics(self, diagnostics: Sequence[Diagnostic]) -> None:
        """Display reported, non-fatal observations."""
        rows = [
            (
                f"[{_SEVERITY_STYLES[d.severity]}]{d.severity.value}[/]",
                d.kind.value,
                escape(d.message),
            )
            for d in diagnostics
        ]
        self._console.table("Diagnostics", ("Severity", "Kind", "Message"), rows)
        self._console.blank()

    def display_failure(self, result: DecodeResult) -> None:
        """Display the fatal condition that ended decoding."""
        failure = result.failure
        if failure is None:
            return
        self._console.error(f"{failure.kind}: {escape(failure.message)}")
        self._console.blank()
