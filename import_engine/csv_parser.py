"""
import_engine.csv_parser - Low-level CSV reading and cleaning.

Responsibilities:
  • BOM removal (UTF-8 / UTF-8-SIG)
  • Dropping the header row and fully blank rows
  • Stripping whitespace from every cell
"""

from __future__ import annotations

import csv
import io
from typing import Iterator, Optional

import config


def prepare_rows(
    raw: str | bytes,
    delimiter: str = config.CSV_DELIMITER,
) -> Optional[Iterator[tuple[int, list[str]]]]:
    """
    Accept raw file content (bytes or str), clean it, and return an
    iterator of (sheet row number, cells) for the data rows.
    Returns None if the content is empty.
    """
    text = _decode(raw)
    if not text or not text.strip():
        return None
    return _data_rows(csv.reader(io.StringIO(text), delimiter=delimiter))


def _data_rows(reader) -> Iterator[tuple[int, list[str]]]:
    for row_idx, row in enumerate(reader, start=1):
        if row_idx == 1:               # header
            continue
        cells = [c.strip() for c in row]
        if not any(cells):
            continue
        yield row_idx, cells


def _decode(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        # Strip UTF-8 BOM
        if raw.startswith(b"\xef\xbb\xbf"):
            raw = raw[3:]
        return raw.decode("utf-8", errors="replace")
    if raw.startswith("\ufeff"):
        return raw[1:]
    return raw
