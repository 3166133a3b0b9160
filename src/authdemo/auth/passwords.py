# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Union

from authdemo.core.models import ResetPasswordForm

MIN_LENGTH = 8

MSG_TOO_SHORT = f"Password must be at least {MIN_LENGTH} characters long"
MSG_NO_LOWERCASE = "Password must contain at least one lowercase letter"
MSG_NO_UPPERCASE = "Password must contain at least one uppercase letter"
MSG_NO_DIGIT = "Password must contain at least one number"
MSG_NO_SPECIAL = "Password must contain at least one special character"
MSG_HAS_SPACES = "Password cannot contain spaces"
MSG_MISMATCH = "Passwords do not match"
MSG_VALID = "Password is valid"

# (pattern, must be present, message) - evaluated in order after the length check
_RULES = (
    (re.compile(r"[a-z]"), True, MSG_NO_LOWERCASE),
    (re.compile(r"[A-Z]"), True, MSG_NO_UPPERCASE),
    (re.compile(r"[0-9]"), True, MSG_NO_DIGIT),
    (re.compile(r"[^A-Za-z0-9\s]"), True, MSG_NO_SPECIAL),
    (re.compile(r"\s"), False, MSG_HAS_SPACES),
)


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    message: str

    def to_dict(self) -> Dict[str, Union[bool, str]]:
        return {"isValid": self.is_valid, "message": self.message}


def validate_password(password: str) -> ValidationResult:
    """Check ``password`` against the policy and report the first violated rule."""
    pw = password or ""
    if len(pw) < MIN_LENGTH:
        return ValidationResult(False, MSG_TOO_SHORT)
    for pattern, required, message in _RULES:
        if bool(pattern.search(pw)) != required:
            return ValidationResult(False, message)
    return ValidationResult(True, MSG_VALID)


def validate_reset_form(form: ResetPasswordForm) -> ValidationResult:
    # Confirmation mismatch short-circuits the policy checks.
    if form.new_password != form.confirm_password:
        return ValidationResult(False, MSG_MISMATCH)
    return validate_password(form.new_password)
