import csv
import logging
from pathlib import Path
from typing import Optional

from .core import RunSummary


class ReportGenerator:
    HEADERS = [
        "Source Path",
        "Kind",
        "Target Path",
        "Action",
        "Notes",
    ]

    def __init__(self, summary: RunSummary, logger: Optional[logging.Logger] = None):
        self.summary = summary
        self.log = logger or logging.getLogger(__name__)

    def write_csv(self, output_csv: Path):
        """
        Writes one row per computed link target, plus one row for every video
        that was not linked (unclassified, or no destination for its kind).
        """
        self.log.info(f"Writing report -> {output_csv}")
        output_csv.parent.mkdir(parents=True, exist_ok=True)

        with open(output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(self.HEADERS)
            for rec in self.summary.records:
                writer.writerow([
                    str(rec.source),
                    rec.kind.value,
                    str(rec.target) if rec.target else "",
                    rec.action,
                    rec.notes,
                ])

        self.log.info(f"Report complete. {len(self.summary.records)} rows.")
