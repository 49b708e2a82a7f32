"""
elfdecode Console Interface
============================

Rich-powered console abstraction used by the elfdecode reporters.

The class wraps :class:`rich.console.Console` and adds convenience methods
for section headers, severity-coloured messages, panels and tables -- all
with one consistent palette.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

_ELF_THEME = Theme(
    {
        "elf.section": "bold bright_magenta",
        "elf.success": "bold green",
        "elf.warning": "bold yellow",
        "elf.error": "bold red",
        "elf.info": "bold bright_blue",
        "elf.dim": "dim white",
        "elf.value": "bright_green",
        "elf.name": "bright_magenta",
    }
)


class ElfConsole:
    """Unified console interface for elfdecode output.

    Usage::

        con = ElfConsole()
        con.section("main.o")
        con.success("Decoded 3 program headers")
    """

    def __init__(
        self,
        *,
        quiet: bool = False,
        record: bool = False,
        width: int | None = None,
    ) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress all output (useful in library / test mode).
            record: Enable Rich recording for text / HTML export.
            width:  Fixed console width; ``None`` autodetects.
        """
        self._console = Console(
            theme=_ELF_THEME,
            quiet=quiet,
            record=record,
            highlight=False,
            width=width,
        )

    @property
    def rich(self) -> Console:
        """Direct access to the underlying Rich Console instance."""
        return self._console

    # ------------------------------------------------------------------ #
    #  Section header
    # ------------------------------------------------------------------ #

    def section(self, title: str) -> None:
        """Print a prominent section header."""
        self._console.rule(
            f"  {title}  ",
            style="elf.section",
            characters="─",
        )
        self._console.print()

    # ------------------------------------------------------------------ #
    #  Message helpers (severity-coloured)
    # ------------------------------------------------------------------ #

    def success(self, message: str) -> None:
        """Print a success message."""
        self._console.print(
            f"[elf.success][✔] SUCCESS:[/elf.success] {message}"
        )

    def warning(self, message: str) -> None:
        """Print a warning message."""
        self._console.print(
            f"[elf.warning][⚠] WARNING:[/elf.warning] {message}"
        )

    def error(self, message: str) -> None:
        """Print an error message."""
        self._console.print(
            f"[elf.error][✘] ERROR:[/elf.error] {message}"
        )

    def info(self, message: str) -> None:
        """Print an informational message."""
        self._console.print(
            f"[elf.info][ℹ] INFO:[/elf.info] {message}"
        )

    # ------------------------------------------------------------------ #
    #  Panels and tables
    # ------------------------------------------------------------------ #

    def panel(self, lines: Sequence[str], title: str) -> None:
        """Render *lines* inside a bordered panel."""
        self._console.print(
            Panel(
                "\n".join(lines),
                title=f"[bold bright_cyan]{title}[/bold bright_cyan]",
                border_style="bright_cyan",
                padding=(1, 2),
            )
        )

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        styles: Sequence[str] | None = None,
    ) -> None:
        """Render a styled Rich table.

        Args:
            title:    Table title.
            columns:  Column header labels.
            rows:     Iterable of row tuples; each element is stringified.
            caption:  Optional footer caption.
            styles:   Optional per-column Rich style strings.
        """
        tbl = Table(
            title=title,
            caption=caption,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=False,
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            style = styles[idx] if styles and idx < len(styles) else ""
            tbl.add_column(col_name, style=style)

        for row in rows:
            tbl.add_row(*(str(cell) for cell in row))

        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Proxy to :meth:`rich.console.Console.print`."""
        self._console.print(*args, **kwargs)

    def blank(self, count: int = 1) -> None:
        """Print *count* blank lines."""
        for _ in range(count):
            self._console.print()

    def divider(self, style: str = "dim") -> None:
        """Print a thin horizontal rule."""
        self._console.rule(style=style)

    def export_text(self) -> str:
        """Export recorded console output as plain text (requires ``record=True``)."""
        return self._console.export_text()
