"""Workbook host, persistence and export."""

from .export import export_csv
from .storage import StorageError, delete_snapshot, load_snapshot, save_snapshot
from .workbook import (
    NoSelectionError,
    ReentrantUpdateError,
    StageIndexError,
    StageWorkbook,
    UtteranceOutcome,
    WorkbookError,
)

__all__ = [
    "StageWorkbook",
    "UtteranceOutcome",
    "WorkbookError",
    "NoSelectionError",
    "StageIndexError",
    "ReentrantUpdateError",
    "StorageError",
    "save_snapshot",
    "load_snapshot",
    "delete_snapshot",
    "export_csv",
]
