# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from authdemo.auth.passwords import validate_password
from authdemo.auth.session import SessionContext
from authdemo.auth.users import authenticate
from authdemo.core.models import LoginForm, ResetPasswordForm, User, UsersData
from authdemo.permissions import current_user_optional, get_directory, get_session, require_user
from authdemo.services.password_service import reset_password

logger = logging.getLogger(__name__)

app = FastAPI()

BASE_DIR = Path(__file__).resolve().parent

app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

MSG_BAD_CREDENTIALS = "Invalid username or password"


def _safe_next(next_url: str) -> str:
    """Only same-site absolute paths are accepted as redirect targets."""
    n = str(next_url or "").strip()
    # Browsers drop tabs/newlines and read a backslash as a slash ("/\host" is "//host").
    norm = "".join(c for c in n if c not in "\t\r\n").replace("\\", "/")
    parts = urlsplit(norm)
    if not norm.startswith("/") or norm.startswith("//") or parts.scheme or parts.netloc:
        return "/dashboard"
    return norm


def _render(request: Request, template_name: str, ctx: dict, *, current_user: Optional[User] = None):
    """TemplateResponse wrapper injecting the signed-in user."""
    base_ctx = {"current_user": current_user}
    merged = {**base_ctx, **(ctx or {})}
    return templates.TemplateResponse(request, template_name, merged)


# ------------------ Routes ------------------


@app.get("/login", response_class=HTMLResponse)
def login_get(request: Request, next: str = "/dashboard", user=Depends(current_user_optional)):
    if user:
        return RedirectResponse(url=_safe_next(next), status_code=303)
    return _render(request, "login.html", {"next": next, "error": "", "username": ""})


@app.post("/login")
def login_post(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    next: str = Form("/dashboard"),
    session: SessionContext = Depends(get_session),
    directory: UsersData = Depends(get_directory),
):
    form = LoginForm(username=username, password=password)
    u = authenticate(directory, username=form.username, password=form.password)
    if not u:
        logger.info("Rejected login for %r", form.username.strip())
        return _render(request, "login.html", {"next": next, "error": MSG_BAD_CREDENTIALS, "username": username})
    session.login(u)
    return RedirectResponse(url=_safe_next(next), status_code=303)


@app.post("/logout")
def logout_post(session: SessionContext = Depends(get_session)):
    session.logout()
    return RedirectResponse(url="/login", status_code=303)


@app.get("/")
def home(user=Depends(current_user_optional)):
    return RedirectResponse(url="/dashboard" if user else "/login", status_code=303)


@app.get("/dashboard", response_class=HTMLResponse)
def dashboard(request: Request, user: User = Depends(require_user)):
    return _render(request, "dashboard.html", {"message": None, "show_reset": False}, current_user=user)


@app.post("/dashboard/reset-password", response_class=HTMLResponse)
def dashboard_reset_password(
    request: Request,
    newPassword: str = Form(""),
    confirmPassword: str = Form(""),
    user: User = Depends(require_user),
    session: SessionContext = Depends(get_session),
    directory: UsersData = Depends(get_directory),
):
    form = ResetPasswordForm(new_password=newPassword, confirm_password=confirmPassword)
    outcome = reset_password(session, directory, form)
    return _render(
        request,
        "dashboard.html",
        {
            "message": {"text": outcome.message, "type": outcome.kind},
            "show_reset": not outcome.ok,
        },
        current_user=outcome.user or user,
    )


@app.get("/api/password/validate")
def api_validate_password(password: str = ""):
    return JSONResponse(validate_password(password).to_dict())
