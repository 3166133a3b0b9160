import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest
import yaml

from authdemo.auth.session import SessionContext
from authdemo.core.models import User, UsersData
from authdemo.infra.storage import MemoryStorage


SEED_RECORDS = [
    {"id": 1, "username": "admin", "password": "Admin@123"},
    {"id": 2, "username": "user", "password": "User@1234"},
    {"id": 3, "username": "guest", "password": "Guest#2024"},
]


@pytest.fixture()
def seed() -> UsersData:
    return UsersData.from_records(SEED_RECORDS)


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def session(storage) -> SessionContext:
    return SessionContext(storage)


@pytest.fixture()
def logged_in(session, seed) -> User:
    """Session with the 'user' account signed in."""
    u = seed.by_username("user")
    session.login(u)
    return u


@pytest.fixture()
def users_yml(tmp_path: Path) -> Path:
    """
    Write a users.yml seed file with the same records as the `seed` fixture.
    """
    p = tmp_path / "users.yml"
    p.write_text(yaml.safe_dump({"version": 1, "users": SEED_RECORDS}, sort_keys=False), encoding="utf-8")
    return p


@pytest.fixture()
def data_env(tmp_path: Path, users_yml: Path, monkeypatch) -> Path:
    # Point the web app at a throwaway data dir and seed file
    data_dir = tmp_path / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("AUTHDEMO_DATA_DIR", str(data_dir))
    monkeypatch.setenv("AUTHDEMO_USERS_PATH", str(users_yml))
    monkeypatch.setenv("AUTHDEMO_ORIGIN", "test")
    return data_dir
