# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from fastapi import Depends, HTTPException, Request

from authdemo.auth.session import SessionContext
from authdemo.auth.users import DEFAULT_USERS_PATH, load_directory, load_seed
from authdemo.core.models import User, UsersData
from authdemo.infra.storage import default_storage


def _users_path() -> Path:
    return Path(os.getenv("AUTHDEMO_USERS_PATH", str(DEFAULT_USERS_PATH))).resolve()


def get_session() -> SessionContext:
    return SessionContext(default_storage())


def get_directory(session: SessionContext = Depends(get_session)) -> UsersData:
    return load_directory(session.storage, load_seed(path=_users_path()))


def current_user_optional(session: SessionContext = Depends(get_session)) -> Optional[User]:
    if not session.is_authenticated():
        return None
    return session.current_user()


def require_user(request: Request, session: SessionContext = Depends(get_session)) -> User:
    if session.is_authenticated():
        u = session.current_user()
        if u:
            return u
        # Record present but unreadable: drop it so the login page is reachable.
        session.logout()
    next_url = str(request.url.path)
    if request.url.query:
        next_url += "?" + request.url.query
    raise HTTPException(status_code=303, headers={"Location": f"/login?next={next_url}"})
