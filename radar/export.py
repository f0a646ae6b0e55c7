"""
CSV export of records.

Semicolon-delimited, UTF-8 with BOM (so spreadsheet apps pick the right
encoding), one fixed header row, every data field double-quoted.
"""

import csv
import io
from collections.abc import Iterable
from datetime import date
from pathlib import Path

from loguru import logger

from radar.models import Record
from radar.utils.text import sanitize_filename

BOM = "\ufeff"
SEPARATOR = ";"
HEADERS = [
    "Date",
    "Catégorie",
    "Criticité",
    "Titre",
    "Impact (So What?)",
    "Action Suggérée",
    "Source",
    "URL",
]


def _row(record: Record) -> list[str]:
    return [
        record.date,
        record.category.value,
        record.criticality.value,
        record.headline,
        record.impact_analysis,
        record.suggested_action,
        record.source,
        record.url,
    ]


def records_to_csv(records: Iterable[Record]) -> str:
    """Render records as the export table (BOM included)."""
    buffer = io.StringIO()
    buffer.write(BOM + SEPARATOR.join(HEADERS) + "\n")

    writer = csv.writer(buffer, delimiter=SEPARATOR, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for record in records:
        writer.writerow(_row(record))

    return buffer.getvalue()


def export_filename(prefix: str = "radar_export", today: date | None = None) -> str:
    """e.g. radar_export_2026-10-18.csv"""
    today = today or date.today()
    return f"{sanitize_filename(prefix)}_{today.isoformat()}.csv"


def write_csv(
    records: Iterable[Record],
    directory: Path,
    prefix: str = "radar_export",
    today: date | None = None,
) -> Path | None:
    """Write the export file; returns None when there is nothing to export."""
    records = list(records)
    if not records:
        logger.info("Nothing to export")
        return None

    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(prefix, today)
    path.write_text(records_to_csv(records), encoding="utf-8", newline="")

    logger.info(f"Exported {len(records)} records to {path}")
    return path
