"""Per-day application log: one JSON list of records per UTC date, with file locking."""
from __future__ import annotations

import fcntl
import json
from datetime import date, datetime
from pathlib import Path

from autoapply.log import LOG_DIR, get_logger
from autoapply.models import ApplicationRecord

log = get_logger(__name__)


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


def day_log_path(day: date, log_dir: Path | None = None) -> Path:
    return (log_dir or LOG_DIR) / f"applications-{day.isoformat()}.json"


def _parse_existing(raw: str, path: Path) -> list[dict]:
    if not raw.strip():
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        log.warning("%s is not valid JSON, starting a fresh list", path.name)
        return []
    return data if isinstance(data, list) else []


def record_application(record: ApplicationRecord, log_dir: Path | None = None) -> Path | None:
    """Append ``record`` to the log file for the day of its timestamp."""
    day = datetime.fromisoformat(record.timestamp).date()
    path = day_log_path(day, log_dir)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a+", encoding="utf-8") as f:
            _lock(f)
            f.seek(0)
            entries = _parse_existing(f.read(), path)
            entries.append(record.to_dict())
            f.seek(0)
            f.truncate()
            json.dump(entries, f, indent=2)
            _unlock(f)
    except OSError as exc:
        log.error("Could not write %s for %s: %s", path.name, record.posting_id, exc)
        return None
    log.debug("Tracked: %s [%s]", record.posting_id, record.outcome)
    return path


def get_records(day: date, log_dir: Path | None = None) -> list[dict]:
    path = day_log_path(day, log_dir)
    if not path.exists():
        return []
    with open(path, "r", encoding="utf-8") as f:
        _lock(f, exclusive=False)
        entries = _parse_existing(f.read(), path)
        _unlock(f)
    return entries
