"""Export functionality for lookup reports."""

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from peppol_lookup.data.schemas import LookupReport

logger = logging.getLogger(__name__)


class ResultExporter:
    """Exports lookup reports to JSON or CSV."""

    def __init__(self, output_directory: str = "results"):
        """Initialize the exporter.

        Args:
            output_directory: Directory for output files.
        """
        self.output_directory = Path(output_directory)
        self.output_directory.mkdir(parents=True, exist_ok=True)

    def export_report(
        self,
        report: LookupReport,
        format: str = "json",
        filename: Optional[str] = None,
    ) -> str:
        """Export a lookup report to file.

        Args:
            report: The report to export.
            format: Output format ('json' or 'csv').
            filename: Custom filename without extension (auto-generated if not provided).

        Returns:
            Path to the exported file.
        """
        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"peppol_lookup_{timestamp}"

        if format.lower() == "json":
            return self._export_json(report, filename)
        elif format.lower() == "csv":
            return self._export_csv(report, filename)
        else:
            raise ValueError(f"Unsupported format: {format}")

    def _export_json(self, report: LookupReport, filename: str) -> str:
        filepath = self.output_directory / f"{filename}.json"

        data = {
            "total_queries": report.total,
            "summary": {
                "registered": len(report.registered),
                "compliant": len(report.compliant),
                "unregistered": len(report.unregistered),
                "failed": len(report.failed),
            },
            "registered": [entry.model_dump() for entry in report.registered],
            "unregistered": report.unregistered,
            "failed": [failure.model_dump() for failure in report.failed],
            "export_timestamp": datetime.now().isoformat(),
        }

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        logger.info(f"Exported report to: {filepath}")
        return str(filepath)

    def _export_csv(self, report: LookupReport, filename: str) -> str:
        """Write one row per outcome (one per entry for registered outcomes)."""
        filepath = self.output_directory / f"{filename}.csv"

        with open(filepath, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow([
                "Company Number",
                "Status",
                "Compliant",
                "Participant ID",
                "Name",
                "Reason",
            ])
            for outcome in report.outcomes:
                if outcome.entries:
                    for entry in outcome.entries:
                        writer.writerow([
                            outcome.identifier,
                            outcome.status.value,
                            str(entry.compliant),
                            entry.participant_id or "",
                            entry.name or "",
                            "",
                        ])
                else:
                    writer.writerow([
                        outcome.identifier,
                        outcome.status.value,
                        "",
                        "",
                        "",
                        outcome.reason or "",
                    ])

        logger.info(f"Exported {report.total} outcomes to: {filepath}")
        return str(filepath)
