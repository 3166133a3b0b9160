# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Key/value storage medium (stand-in for browser local storage).

Values are plain strings. There is no expiry and no transaction support: the
last writer wins.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)

CURRENT_USER_KEY = "currentUser"
USERS_DATA_KEY = "usersData"

DEFAULT_ORIGIN = "default"

# One lock per storage file, shared by every FileStorage pointing at it.
_LOCKS: Dict[Path, threading.Lock] = {}
_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _LOCKS_GUARD:
        lock = _LOCKS.get(path)
        if lock is None:
            lock = _LOCKS[path] = threading.Lock()
        return lock


class StorageMedium(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryStorage:
    """Dict-backed storage, scoped to the lifetime of the object."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self):
        return list(self._items.keys())


class FileStorage:
    """One JSON object per origin, kept under ``data_dir``.

    The file is reread on every access so edits made by another process are
    visible immediately. Writers in this process are serialised per file and
    go through a unique temporary file and ``os.replace``.
    """

    def __init__(self, data_dir: Path, origin: str = DEFAULT_ORIGIN) -> None:
        origin = str(origin or "").strip()
        if not origin or any(c in origin for c in "/\\") or origin.startswith("."):
            raise ValueError(f"Invalid storage origin: {origin!r}")
        self.data_dir = Path(data_dir)
        self.origin = origin
        self.path = self.data_dir / f"{origin}.storage.json"
        self._lock = _lock_for(self.path.resolve())

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning("Storage file %s is not valid JSON, treating it as empty", self.path)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Storage file %s does not hold an object, treating it as empty", self.path)
            return {}
        return {str(k): str(v) for k, v in raw.items() if v is not None}

    def _write(self, items: Dict[str, str]) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(self.data_dir), prefix=f".{self.origin}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            items = self._read()
            items[key] = str(value)
            self._write(items)

    def remove(self, key: str) -> None:
        with self._lock:
            items = self._read()
            if key in items:
                del items[key]
                self._write(items)

    def keys(self):
        return list(self._read().keys())


def default_storage() -> FileStorage:
    """Storage configured from AUTHDEMO_DATA_DIR / AUTHDEMO_ORIGIN."""
    data_dir = Path(os.getenv("AUTHDEMO_DATA_DIR", "data")).resolve()
    origin = os.getenv("AUTHDEMO_ORIGIN", DEFAULT_ORIGIN)
    return FileStorage(data_dir, origin=origin)
