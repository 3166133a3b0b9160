# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml

from authdemo.core.models import User, UsersData
from authdemo.infra.storage import USERS_DATA_KEY, StorageMedium

logger = logging.getLogger(__name__)

# Anchor the default users.yml path to the project root, not the cwd.
BASE_DIR = Path(__file__).resolve().parents[3]
DEFAULT_USERS_PATH = Path(
    os.getenv("AUTHDEMO_USERS_PATH", str(BASE_DIR / "data" / "users.yml"))
).resolve()

# Used when no users.yml is available.
BUILTIN_SEED = UsersData(
    users=(
        User(id=1, username="admin", password="Admin@123"),
        User(id=2, username="user", password="User@1234"),
    )
)

_CACHE: Dict[Path, Tuple[float, UsersData]] = {}


def _load_users_file(path: Path) -> UsersData:
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a mapping at top level")
    records = raw.get("users") or []
    if not isinstance(records, list):
        raise ValueError(f"{path}: 'users' must be a list")
    try:
        return UsersData.from_records(records)
    except ValueError as exc:
        raise ValueError(f"{path}: {exc}") from exc


def load_seed(*, path: Path = DEFAULT_USERS_PATH) -> UsersData:
    """Seed directory from ``path``; the built-in seed if the file is missing."""
    if not path.exists():
        return BUILTIN_SEED

    mtime = path.stat().st_mtime
    cached = _CACHE.get(path)
    if cached and cached[0] == mtime:
        return cached[1]

    users = _load_users_file(path)
    _CACHE[path] = (mtime, users)
    logger.debug("Loaded %d seed users from %s", len(users), path)
    return users


def load_directory(storage: StorageMedium, seed: UsersData) -> UsersData:
    """Latest stored snapshot if there is one, otherwise ``seed``.

    The snapshot replaces the seed wholesale; records are not merged.
    """
    raw = storage.get(USERS_DATA_KEY)
    if not raw:
        return seed
    try:
        return UsersData.from_json(raw)
    except ValueError:
        logger.warning("Stored users snapshot is unreadable, falling back to seed data")
        return seed


def save_directory(storage: StorageMedium, directory: UsersData) -> None:
    storage.set(USERS_DATA_KEY, directory.to_json())


def update_user_password(directory: UsersData, user_id: int, new_password: str) -> UsersData:
    """Return a copy of ``directory`` with the password of ``user_id`` replaced.

    An id with no matching record leaves the directory unchanged.
    """
    return UsersData(
        users=tuple(
            replace(u, password=new_password) if u.id == user_id else u
            for u in directory.users
        )
    )


def get_user(directory: UsersData, username: str) -> Optional[User]:
    u = (username or "").strip()
    if not u:
        return None
    return directory.by_username(u)


def authenticate(directory: UsersData, username: str, password: str) -> Optional[User]:
    u = get_user(directory, username)
    if not u or password is None:
        return None
    if u.password != password:
        return None
    return u
