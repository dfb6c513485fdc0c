"""
import_engine.report - Structured result of an import run.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ImportReport:
    total_rows: int = 0
    imported: int = 0          # new part rows
    existing: int = 0          # part id already present, links merged
    skipped: int = 0
    errors: list[dict] = field(default_factory=list)   # [{row, reason}]

    def add_error(self, row: int, reason: str):
        self.errors.append({"row": row, "reason": reason})
        self.skipped += 1

    def merge(self, other: "ImportReport") -> None:
        self.total_rows += other.total_rows
        self.imported += other.imported
        self.existing += other.existing
        self.skipped += other.skipped
        self.errors.extend(other.errors)

    def to_dict(self) -> dict:
        return {
            "total_rows": self.total_rows,
            "imported": self.imported,
            "existing": self.existing,
            "skipped": self.skipped,
            "errors": self.errors,
        }
