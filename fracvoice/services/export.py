"""CSV export of the stage table."""

import csv
import re
from datetime import date
from pathlib import Path
from typing import Optional

import structlog

from fracvoice.models import STAGE_COLUMNS, WorkbookSnapshot

logger = structlog.get_logger(__name__)

DEFAULT_EXPORT_NAME = "导出数据"

# Anything but letters, digits, CJK, '-' and '_' is unsafe in a file name
UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9\u4e00-\u9fa5\-_]")


def export_filename(title: str, export_date: date) -> str:
    """Build a sanitized "<title>_<date>.csv" file name."""
    stem = f"{title.strip() or DEFAULT_EXPORT_NAME}_{export_date.isoformat()}"
    stem = UNSAFE_FILENAME_CHARS.sub("-", stem)
    return f"{stem}.csv"


def _clean_cell(text: str) -> str:
    text = re.sub(r"\r\n|\n|\r", " ", text)
    return text.replace(",", " ")


def export_csv(
    snapshot: WorkbookSnapshot,
    directory: str | Path,
    export_date: Optional[date] = None,
) -> Path:
    """Export the header and every stage row as a quoted CSV.

    The file starts with a UTF-8 BOM so spreadsheet tools detect the
    encoding.

    Args:
        snapshot: Workbook snapshot to export.
        directory: Target directory, created if missing.
        export_date: Date used in the file name (defaults to today).

    Returns:
        Path of the written file.
    """
    export_date = export_date or date.today()
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(snapshot.title, export_date)

    with open(path, "w", encoding="utf-8-sig", newline="") as f:
        writer = csv.writer(f, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow([_clean_cell(c) for c in STAGE_COLUMNS])
        for stage in snapshot.stages:
            writer.writerow([_clean_cell(c) for c in stage.display_row()])

    logger.info("csv_exported", path=str(path), rows=len(snapshot.stages))
    return path
