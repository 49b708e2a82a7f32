"""
elfdecode Report Generator
===========================

Builds machine-readable JSON reports from decode results.  Each input
contributes one entry: the pydantic dump of its :class:`DecodeResult`
(resolved names included, since they are computed fields), plus a batch
summary with the number of decoded and failed inputs.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from elfdecode import __version__
from elfdecode.core.models import DecodeResult


class ElfReportGenerator:
    """JSON report writer.

    Usage::

        report = ElfReportGenerator()
        data = report.build(results)
        report.generate_json(results, "output/report.json")
    """

    report_type: str = "elfdecode_report"

    def build(self, results: Sequence[DecodeResult]) -> dict[str, Any]:
        """Assemble the report dictionary for *results*."""
        decoded = sum(1 for r in results if r.ok)
        return {
            "report_type": self.report_type,
            "version": __version__,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "summary": {
                "total": len(results),
                "decoded": decoded,
                "failed": len(results) - decoded,
                "warnings": sum(r.warning_count for r in results),
            },
            "results": [self._result_entry(r) for r in results],
        }

    def to_json(self, results: Sequence[DecodeResult]) -> str:
        """Render the report as an indented JSON string."""
        return json.dumps(self.build(results), indent=2, ensure_ascii=False, default=str)

    def generate_json(
        self,
        results: Sequence[DecodeResult],
        output_path: str | Path,
    ) -> str:
        """Write the JSON report to *output_path*.

        Returns:
            The absolute path of the generated report.
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.build(results), f, indent=2, ensure_ascii=False, default=str)

        return str(path.resolve())

    @staticmethod
    def _result_entry(result: DecodeResult) -> dict[str, Any]:
        entry = result.model_dump(mode="json")
        entry["ok"] = result.ok
        return entry
