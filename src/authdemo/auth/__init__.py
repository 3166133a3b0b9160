# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication helpers.

This package provides:
- Password policy validation (ordered, first failure wins)
- User directory loading from data/users.yml, overridden by the stored snapshot
- Session gate over the storage medium (currentUser key)
"""
