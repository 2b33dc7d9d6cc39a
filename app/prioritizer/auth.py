from __future__ import annotations

import uuid
from collections import defaultdict
from collections.abc import Callable
from datetime import datetime, timedelta
from functools import wraps
from typing import Any

from flask import Blueprint, current_app, g, jsonify, request, session
from werkzeug.security import check_password_hash, generate_password_hash

from app.prioritizer.entities import DEFAULT_ROLE, User, UserInput
from app.prioritizer.utils import utcnow
from app.prioritizer.validation import check_text, clean_text
from app.prioritizer.web import current_store, json_error, read_json_object

bp = Blueprint("auth", __name__)
_login_attempts: dict[str, list[datetime]] = defaultdict(list)
_LOGIN_RATE_LIMIT = 5
_LOGIN_RATE_WINDOW = 300  # seconds

_SESSION_KEY = "user_id"


def _check_rate_limit(ip: str) -> bool:
    now = utcnow()
    cutoff = now - timedelta(seconds=_LOGIN_RATE_WINDOW)
    recent = [t for t in _login_attempts.get(ip, []) if t > cutoff]
    if not recent:
        _login_attempts.pop(ip, None)
        return False
    _login_attempts[ip] = recent
    return len(recent) >= _LOGIN_RATE_LIMIT


def _record_attempt(ip: str) -> None:
    _login_attempts[ip].append(utcnow())


def reset_login_attempts() -> None:
    _login_attempts.clear()


# The only session operations used: read, write and drop the user id.
def _session_user_id() -> int | None:
    raw = session.get(_SESSION_KEY)
    return raw if isinstance(raw, int) else None


def _start_session(user: User) -> None:
    session.clear()
    session[_SESSION_KEY] = user.id
    session.permanent = True


def _end_session() -> None:
    session.pop(_SESSION_KEY, None)


def load_current_user() -> None:
    """
    Loads g.current_user from the signed session cookie.
    Also assigns a simple per-request request_id (for log correlation).
    """
    if not getattr(g, "request_id", None):
        g.request_id = uuid.uuid4().hex
    if request.path.startswith(("/health", "/healthz")):
        g.current_user = None
        return

    user_id = _session_user_id()
    if user_id is None:
        g.current_user = None
        return

    user = current_store().get_user(user_id)
    if not user:
        _end_session()
        g.current_user = None
        return
    g.current_user = user


def login_required(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Unauthenticated callers get a bare 401, checked before anything else."""

    @wraps(fn)
    def wrapped(*args: Any, **kwargs: Any):
        if not getattr(g, "current_user", None):
            return "", 401
        return fn(*args, **kwargs)

    return wrapped


def validate_registration_payload(payload: dict) -> list[str]:
    errors: list[str] = []
    check_text(payload, "username", errors, required=True, min_length=3)
    check_text(payload, "password", errors, required=True, min_length=6)
    check_text(payload, "name", errors, required=True)
    check_text(payload, "role", errors)
    return errors


@bp.post("/register")
def register():
    payload, err = read_json_object()
    if err:
        return json_error(err, 400)
    errors = validate_registration_payload(payload)
    if errors:
        return json_error(errors[0], 400)

    store = current_store()
    username = clean_text(payload["username"])
    # The store does not enforce uniqueness; this check is the only guard.
    if store.get_user_by_username(username):
        return json_error("Username already exists", 400)

    user = store.create_user(
        UserInput(
            username=username,
            password=generate_password_hash(payload["password"]),
            name=clean_text(payload["name"]),
            role=clean_text(payload.get("role") or DEFAULT_ROLE),
        )
    )
    _start_session(user)
    current_app.logger.info("Registered user id=%s username=%s", user.id, user.username)
    return jsonify(user.to_dict()), 201


@bp.post("/login")
def login():
    payload, err = read_json_object()
    if err:
        return json_error(err, 400)
    username = payload.get("username")
    password = payload.get("password")
    if not isinstance(username, str) or not isinstance(password, str) or not username.strip() or not password:
        return json_error("Username and password are required.", 400)
    username = username.strip()
    ip = request.remote_addr or "unknown"

    if _check_rate_limit(ip):
        current_app.logger.warning("Login rate limit hit (ip=%s)", ip)
        return json_error("Too many login attempts. Please wait 5 minutes.", 429)

    _record_attempt(ip)

    user = current_store().get_user_by_username(username)
    if not user or not check_password_hash(user.password, password):
        current_app.logger.info("Login failed (username=%s request_id=%s)", username, getattr(g, "request_id", None))
        return json_error("Invalid username or password", 401)

    _start_session(user)
    _login_attempts.pop(ip, None)
    current_app.logger.info("Login ok (user_id=%s)", user.id)
    return jsonify(user.to_dict()), 200


@bp.post("/logout")
def logout():
    user = getattr(g, "current_user", None)
    if user:
        current_app.logger.info("Logout (user_id=%s)", user.id)
    _end_session()
    return "", 200


@bp.get("/user")
@login_required
def me():
    return jsonify(g.current_user.to_dict())


@bp.get("/users")
@login_required
def users_list():
    return jsonify([u.to_dict() for u in current_store().list_users()])
