from fastapi.testclient import TestClient
import pytest

from authdemo.core.models import UsersData
from authdemo.infra.storage import USERS_DATA_KEY, default_storage


@pytest.fixture()
def client(data_env):
    import authdemo.app as app_module

    return TestClient(app_module.app)


def _login(client, username="admin", password="Admin@123"):
    return client.post(
        "/login",
        data={"username": username, "password": password, "next": "/dashboard"},
        follow_redirects=False,
    )


def test_dashboard_requires_session(client):
    r = client.get("/dashboard", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"].startswith("/login")


def test_root_redirects_by_session(client):
    r = client.get("/", follow_redirects=False)
    assert r.headers["location"] == "/login"
    _login(client)
    r = client.get("/", follow_redirects=False)
    assert r.headers["location"] == "/dashboard"


def test_bad_login_renders_error(client):
    r = _login(client, password="wrong")
    assert r.status_code == 200
    assert "Invalid username or password" in r.text


def test_login_and_dashboard(client):
    r = _login(client)
    assert r.status_code == 303
    assert r.headers["location"] == "/dashboard"

    r = client.get("/dashboard")
    assert r.status_code == 200
    assert "Welcome, admin!" in r.text


@pytest.mark.parametrize(
    "target",
    ["//evil.example", "/\\evil.example", "\\\\evil.example", "/\t/evil.example", "https://evil.example", "evil.example"],
)
def test_login_rejects_offsite_next(client, target):
    r = client.post(
        "/login",
        data={"username": "admin", "password": "Admin@123", "next": target},
        follow_redirects=False,
    )
    assert r.headers["location"] == "/dashboard"


def test_login_keeps_local_next(client):
    r = client.post(
        "/login",
        data={"username": "admin", "password": "Admin@123", "next": "/dashboard?tab=reset"},
        follow_redirects=False,
    )
    assert r.headers["location"] == "/dashboard?tab=reset"


def test_logout_clears_session(client):
    _login(client)
    r = client.post("/logout", follow_redirects=False)
    assert r.headers["location"] == "/login"
    assert client.get("/dashboard", follow_redirects=False).status_code == 303


def test_reset_mismatch(client):
    _login(client)
    r = client.post(
        "/dashboard/reset-password",
        data={"newPassword": "A1b2c3$x", "confirmPassword": "A1b2c3$y"},
    )
    assert r.status_code == 200
    assert "Passwords do not match" in r.text


def test_reset_then_login_with_new_password(client):
    _login(client)
    r = client.post(
        "/dashboard/reset-password",
        data={"newPassword": "Brand#New1", "confirmPassword": "Brand#New1"},
    )
    assert r.status_code == 200
    assert "Password updated successfully!" in r.text

    snapshot = UsersData.from_json(default_storage().get(USERS_DATA_KEY))
    assert snapshot.by_username("admin").password == "Brand#New1"

    client.post("/logout")
    assert "Invalid username or password" in _login(client, password="Admin@123").text
    assert _login(client, password="Brand#New1").status_code == 303


def test_reset_requires_session(client):
    r = client.post(
        "/dashboard/reset-password",
        data={"newPassword": "Brand#New1", "confirmPassword": "Brand#New1"},
        follow_redirects=False,
    )
    assert r.status_code == 303


def test_validate_api(client):
    r = client.get("/api/password/validate", params={"password": "Abc 123$"})
    assert r.status_code == 200
    assert r.json() == {"isValid": False, "message": "Password cannot contain spaces"}
