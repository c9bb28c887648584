"""
JSON file persistence for scrape results

Whole-file saves (never appends) and tolerant loads. Writes are not
coordinated between processes, so only one writer may own a path at a time.
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def ensure_parent_dir(file_path: str | Path) -> Path:
    """Create the parent directory of file_path if missing"""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def save_to_json(data: Any, file_path: str | Path) -> None:
    """
    Serialize data as indented JSON and replace the file at file_path

    The content is written to a temp file in the same directory first and then
    moved over the target, so a crash mid-write leaves the old file intact.
    """
    path = ensure_parent_dir(file_path)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def load_from_json(file_path: str | Path) -> Any | None:
    """
    Load JSON from file_path

    Returns:
        Parsed value, or None if the file is missing, blank, or not valid JSON
    """
    path = Path(file_path)
    if not path.exists():
        return None

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read %s: %s. Returning None.", path, e)
        return None

    if not content.strip():
        return None

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse JSON from %s: %s. Returning None.", path, e)
        return None


def backup_path_for(results_dir: str | Path, now: datetime | None = None) -> Path:
    """
    Build a timestamped backup path under <results_dir>/backup/

    Example: bot/results/backup/jobs-2024-06-01T12-30-05.json

    An existing backup is never reused; a numeric suffix is added instead.
    """
    now = now or datetime.now(timezone.utc)
    timestamp = now.strftime("%Y-%m-%dT%H:%M:%S").replace(":", "-").replace(".", "-")
    backup_dir = Path(results_dir) / "backup"

    candidate = backup_dir / f"jobs-{timestamp}.json"
    counter = 1
    while candidate.exists():
        candidate = backup_dir / f"jobs-{timestamp}-{counter}.json"
        counter += 1
    return candidate
