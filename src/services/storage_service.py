"""Low-level JSON file I/O for registration data, with locking."""
import json
import os
import shutil
import sys
import tempfile
import time
from contextlib import contextmanager
from typing import Any

from src.utils.exceptions import FileWriteError

if sys.platform == "win32":
    import msvcrt
else:
    import fcntl

_MISSING = object()


def load_json(file_path: str, default: Any = _MISSING) -> Any:
    """
    Load and parse a JSON file with UTF-8 encoding.

    Args:
        file_path: Path to JSON file
        default: Returned when the file doesn't exist (raises if omitted)

    Returns:
        Parsed JSON content (list or dict)

    Raises:
        FileNotFoundError: If file doesn't exist and no default given
        json.JSONDecodeError: If JSON is malformed
    """
    if not os.path.exists(file_path):
        if default is not _MISSING:
            return default
        raise FileNotFoundError(f"File not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        content = f.read()

    if not content.strip():
        if default is not _MISSING:
            return default
        raise json.JSONDecodeError(f"Empty JSON file {file_path}", content, 0)

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise json.JSONDecodeError(f"Malformed JSON in {file_path}: {e.msg}", e.doc, e.pos)


def save_json(file_path: str, data: Any, backup: bool = True) -> None:
    """
    Write data to a JSON file atomically.

    Args:
        file_path: Destination path (parent directories are created)
        data: JSON-serializable value
        backup: Copy the previous file to ``<file_path>.backup`` first

    Raises:
        FileWriteError: If the backup or the write fails
    """
    dir_path = os.path.dirname(file_path) or "."
    os.makedirs(dir_path, exist_ok=True)

    if backup and os.path.exists(file_path):
        try:
            shutil.copy2(file_path, f"{file_path}.backup")
        except OSError as e:
            raise FileWriteError(f"Failed to create backup of {file_path}: {e}") from e

    temp_fd, temp_path = tempfile.mkstemp(dir=dir_path, prefix=".tmp_", suffix=".json")
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, file_path)
    except (OSError, TypeError, ValueError) as e:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise FileWriteError(f"Failed to write file {file_path}: {e}") from e


@contextmanager
def lock_file(file_path: str, timeout: float = 5.0):
    """
    Hold an exclusive lock for ``file_path`` while the block runs.

    The lock lives on a ``<file_path>.lock`` sidecar so the data file itself
    may not exist yet and can be replaced atomically while locked.

    Usage:
        with lock_file('data/registrations.json'):
            records = load_json('data/registrations.json', default=[])
            records.insert(0, new_record)
            save_json('data/registrations.json', records)

    Raises:
        TimeoutError: If the lock isn't acquired within ``timeout`` seconds
    """
    lock_path = f"{file_path}.lock"
    os.makedirs(os.path.dirname(lock_path) or ".", exist_ok=True)

    lock_fd = open(lock_path, "a+")
    start_time = time.time()
    try:
        while True:
            try:
                _acquire(lock_fd)
                break
            except OSError:
                if time.time() - start_time > timeout:
                    raise TimeoutError(f"Could not acquire lock on {file_path} within {timeout}s")
                time.sleep(0.05)

        try:
            yield
        finally:
            _release(lock_fd)
    finally:
        lock_fd.close()


def _acquire(lock_fd) -> None:
    if sys.platform == "win32":
        lock_fd.seek(0)
        msvcrt.locking(lock_fd.fileno(), msvcrt.LK_NBLCK, 1)
    else:
        fcntl.flock(lock_fd.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)


def _release(lock_fd) -> None:
    if sys.platform == "win32":
        lock_fd.seek(0)
        msvcrt.locking(lock_fd.fileno(), msvcrt.LK_UNLCK, 1)
    else:
        fcntl.flock(lock_fd.fileno(), fcntl.LOCK_UN)
