"""
import_engine - Spreadsheet (CSV) import pipeline.

Public API:
    run_import(session, file_content) → ImportReport
    clear_catalog(session)            → removed row counts
"""

from import_engine.importer import run_import, clear_catalog     # noqa: F401
from import_engine.report import ImportReport                    # noqa: F401
