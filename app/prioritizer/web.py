from __future__ import annotations

from typing import Any

from flask import current_app, g, jsonify, request

from app.prioritizer.entities import User
from app.prioritizer.store import FeatureStore


def current_store() -> FeatureStore:
    return current_app.extensions["feature_store"]


def current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


def json_error(message: str, status: int):
    return jsonify({"message": message}), status


def read_json_object() -> tuple[dict[str, Any] | None, str | None]:
    """Parse the request body as a JSON object. Returns (payload, error)."""
    data = request.get_json(silent=True)
    if data is None:
        return None, "Request body must be JSON."
    if not isinstance(data, dict):
        return None, "Request body must be a JSON object."
    return data, None
