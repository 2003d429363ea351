"""Koinly-style universal CSV output for export rows."""

import csv
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from loguru import logger

from src.ledger.transform import ExportRow

CSV_FIELDS = ["Date", "Amount", "Currency", "Label", "TxHash"]


def write_rows(rows: Iterable[ExportRow], stream: TextIO) -> int:
    """Write header plus one line per row. Returns the number of rows written."""
    writer = csv.DictWriter(stream, fieldnames=CSV_FIELDS)
    writer.writeheader()
    count = 0
    for row in rows:
        writer.writerow(row.to_csv_row())
        count += 1
    return count


def write_rows_to_path(rows: Iterable[ExportRow], path: Path) -> int:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        count = write_rows(rows, f)
    logger.info(f"[EXPORT] Saved {count} rows to {path}")
    return count
