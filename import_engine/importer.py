"""
import_engine.importer - Top-level orchestrator.

Coordinates csv_parser → row_processor inside the caller's session and
produces a structured ImportReport.  The caller owns the transaction:
bad rows are reported and skipped, anything unexpected propagates so
the whole import rolls back.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete
from sqlalchemy.orm import Session

from db.models import CarModel, CarPart, CarPartLink
from import_engine.csv_parser import prepare_rows
from import_engine.row_processor import RowProcessor, RowError
from import_engine.report import ImportReport

logger = logging.getLogger(__name__)


def run_import(session: Session, file_content: str | bytes) -> ImportReport:
    """
    Import one CSV blob into the catalog.

    Parameters
    ----------
    session : open session inside a StoreEngine.transaction()
    file_content : raw CSV (bytes or str)

    Returns
    -------
    ImportReport with per-row error details
    """
    report = ImportReport()
    rows = prepare_rows(file_content)
    if rows is None:
        report.add_error(0, "CSV is empty")
        return report

    processor = RowProcessor()
    for row_idx, cells in rows:
        report.total_rows += 1
        try:
            if processor.process(session, cells):
                report.imported += 1
            else:
                report.existing += 1
        except RowError as exc:
            report.add_error(row_idx, str(exc))

    logger.info("Import: %d new, %d existing, %d skipped / %d rows",
                report.imported, report.existing, report.skipped, report.total_rows)
    return report


def clear_catalog(session: Session) -> dict:
    """Delete every link, part and model.  Returns row counts removed."""
    counts = {
        "links": session.execute(delete(CarPartLink)).rowcount,
        "parts": session.execute(delete(CarPart)).rowcount,
        "models": session.execute(delete(CarModel)).rowcount,
    }
    logger.info("Catalog cleared: %s", counts)
    return counts
