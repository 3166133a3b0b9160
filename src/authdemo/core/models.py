# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Records exchanged between the UI shell, the auth core and the storage medium.

Snapshots are stored as UTF-8 JSON text:

- a user: ``{"id": 1, "username": "admin", "password": "..."}``
- a directory: ``{"users": [<user>, ...]}``
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple


def _dumps(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False)


def _parse_id(value: Any) -> int:
    """Integers or integral strings only; floats and bools are rejected."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and re.fullmatch(r"[+-]?\d+", value.strip()):
        return int(value.strip())
    raise ValueError(f"Invalid user id: {value!r}")


@dataclass(frozen=True)
class User:
    id: int
    username: str
    password: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "username": self.username, "password": self.password}

    def to_json(self) -> str:
        return _dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Any) -> "User":
        if not isinstance(data, dict):
            raise ValueError("User record must be a mapping")
        uid = _parse_id(data.get("id"))
        username = str(data.get("username") or "").strip()
        if not username:
            raise ValueError(f"User {uid} has an empty username")
        password = data.get("password")
        return cls(id=uid, username=username, password="" if password is None else str(password))

    @classmethod
    def from_json(cls, raw: str) -> "User":
        return cls.from_dict(json.loads(raw))


@dataclass(frozen=True)
class UsersData:
    """Ordered user collection. Ids and usernames are unique."""

    users: Tuple[User, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        users = tuple(self.users)
        object.__setattr__(self, "users", users)
        seen_ids = set()
        seen_names = set()
        for u in users:
            if u.id in seen_ids:
                raise ValueError(f"Duplicate user id: {u.id}")
            if u.username in seen_names:
                raise ValueError(f"Duplicate username: {u.username}")
            seen_ids.add(u.id)
            seen_names.add(u.username)

    def __iter__(self):
        return iter(self.users)

    def __len__(self) -> int:
        return len(self.users)

    def get(self, user_id: int) -> Optional[User]:
        for u in self.users:
            if u.id == user_id:
                return u
        return None

    def by_username(self, username: str) -> Optional[User]:
        for u in self.users:
            if u.username == username:
                return u
        return None

    def next_id(self) -> int:
        return max((u.id for u in self.users), default=0) + 1

    def to_dict(self) -> Dict[str, Any]:
        return {"users": [u.to_dict() for u in self.users]}

    def to_json(self) -> str:
        return _dumps(self.to_dict())

    @classmethod
    def from_records(cls, records: Iterable[Any]) -> "UsersData":
        return cls(users=tuple(User.from_dict(r) for r in records))

    @classmethod
    def from_dict(cls, data: Any) -> "UsersData":
        if not isinstance(data, dict) or not isinstance(data.get("users"), list):
            raise ValueError("Users data must be a mapping with a 'users' list")
        return cls.from_records(data["users"])

    @classmethod
    def from_json(cls, raw: str) -> "UsersData":
        return cls.from_dict(json.loads(raw))


@dataclass(frozen=True)
class LoginForm:
    username: str = ""
    password: str = ""


@dataclass(frozen=True)
class ResetPasswordForm:
    new_password: str = ""
    confirm_password: str = ""
