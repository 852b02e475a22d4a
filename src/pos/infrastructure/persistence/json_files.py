"""Small helpers shared by the JSON-file-backed stores.

I/O and decoding failures surface as StoreUnavailableError so callers
only ever deal with the store-boundary exception hierarchy.
"""

from __future__ import annotations

import fcntl
import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from pos.domain.exceptions import StoreUnavailableError


def load_json(path: Path, default: Any) -> Any:
    """Return the decoded content of *path*, or *default* if it does not exist."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return default
    except OSError as exc:
        raise StoreUnavailableError(f"Cannot read {path.name}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise StoreUnavailableError(f"Corrupt document {path.name}: {exc}") from exc


def write_json(path: Path, data: Any) -> None:
    """Write *data* to *path* atomically (write-to-temp-then-rename)."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.stem}_", suffix=".tmp"
        )
    except OSError as exc:
        raise StoreUnavailableError(f"Cannot write {path.name}: {exc}") from exc
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(temp_path, path)
    except OSError as exc:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise StoreUnavailableError(f"Cannot write {path.name}: {exc}") from exc


@contextmanager
def file_lock(path: Path) -> Iterator[None]:
    """Hold an exclusive lock on *path* for a read-modify-write.

    ``flock`` locks belong to the open file, so they also exclude other
    processes working on the same data directory.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        lock_file = open(path, "w")
    except OSError as exc:
        raise StoreUnavailableError(f"Cannot lock {path.name}: {exc}") from exc
    with lock_file:
        fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
