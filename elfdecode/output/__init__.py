"""Console and JSON presentation of decode results."""

from elfdecode.output.console import ElfConsoleOutput
from elfdecode.output.report import ElfReportGenerator

__all__ = ["ElfConsoleOutput", "ElfReportGenerator"]
