#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

import yaml

from authdemo.auth.passwords import validate_reset_form
from authdemo.auth.users import DEFAULT_USERS_PATH, load_seed
from authdemo.core.models import ResetPasswordForm, User, UsersData

USERS_PATH = DEFAULT_USERS_PATH


def main() -> None:
    USERS_PATH.parent.mkdir(parents=True, exist_ok=True)
    directory = load_seed(path=USERS_PATH) if USERS_PATH.exists() else UsersData()

    username = input("Username: ").strip()
    if not username:
        raise SystemExit("Username cannot be empty")
    if directory.by_username(username):
        raise SystemExit(f"User '{username}' already exists")

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    check = validate_reset_form(ResetPasswordForm(new_password=pw1, confirm_password=pw2))
    if not check.is_valid:
        raise SystemExit(check.message)

    user = User(id=directory.next_id(), username=username, password=pw1)
    updated = UsersData(users=directory.users + (user,))

    raw = {"version": 1, **updated.to_dict()}
    USERS_PATH.write_text(yaml.safe_dump(raw, sort_keys=False, allow_unicode=True), encoding="utf-8")
    print(f"OK -> {USERS_PATH} (id {user.id})")


if __name__ == "__main__":
    main()
