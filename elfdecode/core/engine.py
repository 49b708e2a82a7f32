"""
elfdecode Decode Engine
========================

Runs one decode session per input: load the file into a
:class:`~elfdecode.parsers.buffer.ByteBuffer`, decode the ELF header, then
(when the header declares one) the program header table, and collect
everything into a :class:`~elfdecode.core.models.DecodeResult`.

Fatal decode conditions never escape the engine: they become the
``failure`` of the result and the session's partial records are dropped.
Each input gets its own buffer, cursor and records, so a batch of files
shares no mutable state.

Pipeline:
    1. Load the file (whole-file buffering, bounded by ``max_file_size``)
    2. Decode identification and header
    3. Decode the program header table (if ``e_phoff`` is nonzero)
    4. Attach diagnostics and timing
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from shared.config import ElfDecodeConfig
from shared.logger import ElfLogger

from elfdecode.core.errors import FatalDecodeError, InputTooLarge
from elfdecode.core.models import (
    DecodeFailure,
    DecodeResult,
    Diagnostic,
    ElfHeader,
    ProgramHeaderTable,
)
from elfdecode.parsers.buffer import ByteBuffer, Cursor
from elfdecode.parsers.header import HeaderDecoder
from elfdecode.parsers.program_header import ProgramHeaderDecoder


class ElfDecodeEngine:
    """Orchestrates header and program header decoding for one or more files.

    Usage::

        engine = ElfDecodeEngine()
        result = engine.decode_file("/path/to/main.o")
        if result.ok:
            print(result.header.machine_name, len(result.program_headers))
    """

    def __init__(
        self,
        config: ElfDecodeConfig | None = None,
        logger: ElfLogger | None = None,
    ) -> None:
        """Initialise the engine.

        Args:
            config: Configuration; defaults are used if not provided.
            logger: Logger instance; a quiet one is created if not provided.
        """
        self._config: ElfDecodeConfig = config or ElfDecodeConfig()
        self._logger: ElfLogger = logger or ElfLogger.quiet("engine")
        self._header_logger = self._logger.child("header")
        self._phdr_logger = self._logger.child("program_header")

    @property
    def config(self) -> ElfDecodeConfig:
        return self._config

    # ------------------------------------------------------------------ #
    #  Entry points
    # ------------------------------------------------------------------ #

    def decode_file(self, file_path: str | Path) -> DecodeResult:
        """Load and decode the file at *file_path*."""
        path = Path(file_path)
        with self._logger.operation("decode_file"):
            try:
                file_size = path.stat().st_size
                max_size = self._config.decoder.max_file_size
                if file_size > max_size:
                    raise InputTooLarge(expected=max_size, actual=file_size)
                buffer = ByteBuffer.from_path(path)
            except InputTooLarge as exc:
                self._logger.error("%s: %s", path, exc)
                return DecodeResult(
                    path=str(path),
                    size=exc.actual,
                    failure=DecodeFailure.from_error(exc),
                )
            except OSError as exc:
                self._logger.error("Cannot read %s: %s", path, exc)
                return DecodeResult(
                    path=str(path),
                    failure=DecodeFailure(
                        kind=type(exc).__name__,
                        message=exc.strerror or str(exc),
                    ),
                )

            return self.decode_buffer(buffer)

    def decode_bytes(self, data: bytes, source: str = "<memory>") -> DecodeResult:
        """Decode in-memory *data*; *source* labels the result."""
        return self.decode_buffer(ByteBuffer(data, source=source))

    def decode_many(self, paths: Iterable[str | Path]) -> list[DecodeResult]:
        """Decode each path independently; one result per path, in order."""
        return [self.decode_file(path) for path in paths]

    # ------------------------------------------------------------------ #
    #  Session
    # ------------------------------------------------------------------ #

    def decode_buffer(self, buffer: ByteBuffer) -> DecodeResult:
        """Run a full decode session over an already loaded buffer."""
        self._logger.info("Decoding %s (%d bytes)", buffer.source, buffer.length)
        diagnostics: list[Diagnostic] = []

        with self._logger.timed(f"decode {buffer.source}") as timer:
            try:
                header, table = self._run_session(buffer, diagnostics)
            except FatalDecodeError as exc:
                self._logger.error(
                    "%s: %s", buffer.source, exc,
                    kind=exc.kind, expected=exc.expected, actual=exc.actual,
                )
                failure = DecodeFailure.from_error(exc)
                header, table = None, None
            else:
                failure = None

        result = DecodeResult(
            path=buffer.source,
            size=buffer.length,
            header=header,
            program_headers=table,
            diagnostics=diagnostics,
            failure=failure,
            duration_seconds=timer.elapsed,
        )
        if result.ok:
            self._logger.info(
                "Decoded %s: %s, %s, %d program header entries, %d diagnostics",
                buffer.source,
                header.file_type_name,
                header.machine_name,
                len(table) if table is not None else 0,
                len(diagnostics),
            )
        return result

    def _run_session(
        self,
        buffer: ByteBuffer,
        diagnostics: list[Diagnostic],
    ) -> tuple[ElfHeader, ProgramHeaderTable | None]:
        cursor = Cursor(buffer)

        header_decoder = HeaderDecoder(cursor, logger=self._header_logger)
        header = header_decoder.decode()
        diagnostics.extend(header_decoder.diagnostics)

        if not self._config.decoder.decode_program_headers:
            return header, None
        if header.program_header_offset == 0:
            return header, None

        phdr_decoder = ProgramHeaderDecoder(
            cursor,
            header,
            termination=self._config.decoder.termination,
            logger=self._phdr_logger,
        )
        table = phdr_decoder.decode()
        diagnostics.extend(phdr_decoder.diagnostics)
        return header, table
