# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from authdemo.auth.passwords import validate_reset_form
from authdemo.auth.session import SessionContext
from authdemo.auth.users import save_directory, update_user_password
from authdemo.core.models import ResetPasswordForm, User, UsersData

logger = logging.getLogger(__name__)

MSG_NOT_AUTHENTICATED = "Not authenticated"
MSG_UPDATED = "Password updated successfully!"


@dataclass(frozen=True)
class ResetOutcome:
    ok: bool
    message: str
    user: Optional[User]
    directory: UsersData

    @property
    def kind(self) -> str:
        return "success" if self.ok else "error"


def reset_password(session: SessionContext, directory: UsersData, form: ResetPasswordForm) -> ResetOutcome:
    """Change the password of the signed-in user.

    On success both the session record and the directory snapshot are written
    to the session's storage. Failures write nothing.
    """
    current = session.current_user()
    if current is None:
        return ResetOutcome(False, MSG_NOT_AUTHENTICATED, None, directory)

    check = validate_reset_form(form)
    if not check.is_valid:
        return ResetOutcome(False, check.message, current, directory)

    updated_dir = update_user_password(directory, current.id, form.new_password)
    updated_user = updated_dir.get(current.id)
    if updated_user is None:
        logger.warning("User id %s is not in the directory; only the session record is updated", current.id)
        updated_user = replace(current, password=form.new_password)

    session.save(updated_user)
    save_directory(session.storage, updated_dir)
    logger.info("Password updated for %s", updated_user.username)
    return ResetOutcome(True, MSG_UPDATED, updated_user, updated_dir)
