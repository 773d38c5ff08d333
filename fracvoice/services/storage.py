"""
Storage Service for Workbook Snapshots

Handles file I/O for the persisted workbook state.
Uses a single JSON file on disk - no database required.
"""

import json
from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError

from fracvoice.models import WorkbookSnapshot

logger = structlog.get_logger(__name__)


class StorageError(Exception):
    """Error reading or writing a workbook snapshot."""
    pass


def save_snapshot(snapshot: WorkbookSnapshot, path: str | Path) -> Path:
    """Write a snapshot as UTF-8 JSON and return the path written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(snapshot.model_dump(mode="json"), f, indent=2, ensure_ascii=False)

    logger.debug("snapshot_saved", path=str(path), stages=len(snapshot.stages))
    return path


def load_snapshot(path: str | Path) -> Optional[WorkbookSnapshot]:
    """Load a snapshot, or None when nothing has been saved yet.

    Raises:
        StorageError: If the file exists but cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        snapshot = WorkbookSnapshot.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error("snapshot_load_failed", path=str(path), error=str(e))
        raise StorageError(f"Invalid snapshot file {path}: {e}") from e

    logger.debug("snapshot_loaded", path=str(path), stages=len(snapshot.stages))
    return snapshot


def delete_snapshot(path: str | Path) -> bool:
    """Remove a saved snapshot. Returns True if a file was deleted."""
    path = Path(path)
    if not path.exists():
        return False
    path.unlink()
    logger.info("snapshot_deleted", path=str(path))
    return True
