"""
Module: store.file_locking

Purpose:
    Cross-platform file locking for the JSON result store. Uses
    portalocker for Mac, Windows, and Linux compatibility.

Key Functions:
    - locked_path: Context manager holding a lock on a sidecar .lock file
    - locked_read_json: Read a JSON file under a shared lock
    - locked_update_json: Read-modify-replace a JSON file under one exclusive lock

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - store.json_store: One file per (exam, student) record
"""

from __future__ import annotations

import json
import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Generator, Optional

import portalocker

logger = logging.getLogger(__name__)


def _lock_path(path: Path) -> Path:
    return path.with_name(path.name + ".lock")


@contextmanager
def locked_path(
    path: Path,
    lock_type: int = portalocker.LOCK_EX,
) -> Generator[Path, None, None]:
    """
    Hold a lock for path via a sidecar lock file.

    The data file itself is replaced atomically on write, so the lock
    lives on a separate file that is never replaced.

    Args:
        path: Data file to guard.
        lock_type: LOCK_EX for exclusive, LOCK_SH for shared.

    Yields:
        The guarded path.

    Example:
        >>> with locked_path(record_path) as p:
        ...     p.write_text("{}")
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(_lock_path(path), "a", encoding="utf-8") as lock_file:
        portalocker.lock(lock_file, lock_type)
        try:
            yield path
        finally:
            portalocker.unlock(lock_file)


def _read_json(path: Path) -> Optional[Any]:
    if not path.exists():
        return None
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _replace_json(path: Path, data: Dict[str, Any]) -> None:
    # Readers see either the old record or the new one, never a partial write.
    tmp_path = path.with_name(path.name + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, path)


def locked_read_json(path: Path) -> Optional[Any]:
    """
    Read a JSON file under a shared lock.

    Returns:
        Parsed data (any JSON value), or None if the file does not exist.

    Raises:
        json.JSONDecodeError: If the file is corrupted.
        OSError: If the file cannot be read.
    """
    if not path.exists():
        return None
    with locked_path(path, portalocker.LOCK_SH):
        return _read_json(path)


def locked_update_json(
    path: Path,
    update: Callable[[Optional[Any]], Dict[str, Any]],
) -> Dict[str, Any]:
    """
    Read, transform and atomically replace a JSON file under one exclusive lock.

    update receives the current content, or None when the file is missing
    or cannot be parsed, and returns the data to write. No other writer
    can interleave between the read and the write.

    Returns:
        The data written.

    Raises:
        OSError: If the file cannot be read or written.
    """
    with locked_path(path, portalocker.LOCK_EX):
        try:
            current = _read_json(path)
        except json.JSONDecodeError as e:
            logger.warning(f"Overwriting unparseable file {path}: {e}")
            current = None
        data = update(current)
        _replace_json(path, data)

    logger.debug(f"Wrote record {path.name}")
    return data
