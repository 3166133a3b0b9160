# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Optional

from authdemo.core.models import User
from authdemo.infra.storage import CURRENT_USER_KEY, StorageMedium

logger = logging.getLogger(__name__)


class SessionContext:
    """Session gate bound to one storage medium.

    Nothing is cached: every call reads the ``currentUser`` key again.
    """

    def __init__(self, storage: StorageMedium) -> None:
        self.storage = storage

    def is_authenticated(self) -> bool:
        return bool(self.storage.get(CURRENT_USER_KEY))

    def current_user(self) -> Optional[User]:
        raw = self.storage.get(CURRENT_USER_KEY)
        if not raw:
            return None
        try:
            return User.from_json(raw)
        except ValueError:
            logger.warning("Ignoring unreadable session record")
            return None

    def save(self, user: User) -> None:
        self.storage.set(CURRENT_USER_KEY, user.to_json())

    def login(self, user: User) -> None:
        self.save(user)
        logger.info("User %s logged in", user.username)

    def logout(self) -> None:
        self.storage.remove(CURRENT_USER_KEY)
        logger.info("Session cleared")
