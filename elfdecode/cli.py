"""
elfdecode CLI -- ELF32 Header Decoder
======================================

Click-based command-line interface.  Decodes one or more files and renders
each result on the terminal, as JSON on stdout, or into a JSON report file.

Usage::

    # Decode one object file
    elfdecode main.o

    # Decode several files, reading exactly e_phnum program headers
    elfdecode a.out libfoo.so --termination count

    # JSON to stdout
    elfdecode main.o --json

    # Write a JSON report
    elfdecode main.o --output report.json
    elfdecode main.o --save            # output/elfdecode_report_<timestamp>.json

Exit status is 0 when every input decoded, 1 when any input failed or the
configuration is invalid, and 130 when interrupted.

References:
    - Click documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import click
from rich.markup import escape

from shared.config import TERMINATION_MODES, ElfDecodeConfig
from shared.console import ElfConsole
from shared.logger import ElfLogger

from elfdecode import __version__
from elfdecode.core.engine import ElfDecodeEngine
from elfdecode.output.console import ElfConsoleOutput
from elfdecode.output.report import ElfReportGenerator


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

@click.command("elfdecode")
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False),
)
@click.option(
    "--config", "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="TOML configuration file.  Default: config.toml in the project root.",
)
@click.option(
    "--termination", "-t",
    type=click.Choice(TERMINATION_MODES, case_sensitive=False),
    default=None,
    help="How the program header scan ends (overrides the configuration).",
)
@click.option(
    "--no-program-headers",
    is_flag=True,
    default=False,
    help="Decode the ELF header only.",
)
@click.option(
    "--json", "json_output",
    is_flag=True,
    default=False,
    help="Print results as JSON to stdout.",
)
@click.option(
    "--output", "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write a JSON report to this path.",
)
@click.option(
    "--save", "-s",
    is_flag=True,
    default=False,
    help="Write a timestamped JSON report into the configured output directory.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Suppress console rendering; only the exit status reports the outcome.",
)
@click.version_option(__version__, prog_name="elfdecode")
def elfdecode_cli(
    paths: tuple[str, ...],
    config_path: str | None,
    termination: str | None,
    no_program_headers: bool,
    json_output: bool,
    output_path: str | None,
    save: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """elfdecode -- ELF32 header and program header decoder.

    Decode the identification bytes, file header and program header table
    of each PATH.

    Examples:

    \b
        elfdecode /usr/lib32/crt1.o
        elfdecode build/*.o --json
        elfdecode firmware.elf --termination count --output report.json
    """
    console = ElfConsole(quiet=quiet or json_output)

    try:
        config = ElfDecodeConfig.load(config_path)
    except (OSError, ValueError) as exc:
        console.error(f"Invalid configuration: {escape(str(exc))}")
        sys.exit(1)

    if termination is not None:
        config.decoder.termination = termination.lower()
    if no_program_headers:
        config.decoder.decode_program_headers = False

    settings = config.global_settings
    if verbose:
        log_level = "DEBUG"
    elif quiet:
        log_level = "ERROR"
    else:
        log_level = settings.log_level
    logger = ElfLogger(
        "engine",
        log_level=log_level,
        log_file=settings.log_file,
        json_logs=settings.log_json,
    )

    engine = ElfDecodeEngine(config=config, logger=logger)

    try:
        results = engine.decode_many(paths)
    except KeyboardInterrupt:
        console.warning("Decoding interrupted by user.")
        sys.exit(130)

    report_gen = ElfReportGenerator()

    if json_output:
        click.echo(report_gen.to_json(results))
    else:
        ElfConsoleOutput(console=console).display_many(results)

    report_path = output_path
    if report_path is None and save:
        report_path = _default_output_path(settings.output_dir)
    if report_path is not None:
        generated = report_gen.generate_json(results, report_path)
        console.success(f"JSON report saved: {escape(generated)}")

    if any(not result.ok for result in results):
        sys.exit(1)


def _default_output_path(output_dir: str) -> str:
    """Timestamped report path inside *output_dir*."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return str(Path(output_dir) / f"elfdecode_report_{timestamp}.json")


# ---------------------------------------------------------------------------
# Module entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Entry point for the ``elfdecode`` script and ``python -m elfdecode``."""
    elfdecode_cli()


if __name__ == "__main__":
    main()
