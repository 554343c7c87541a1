"""JSON export of a resolution report.

The layout follows `ResolutionReport` field order, so the file reads in the
same order as the terminal report: parties first, then keys, destination,
profile and timestamp.
"""

from __future__ import annotations

from pathlib import Path

from core.domain.models import ResolutionReport


def export_report_json(*, report: ResolutionReport, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(report.model_dump_json(indent=2) + "\n", encoding="utf-8")
    return output_path
