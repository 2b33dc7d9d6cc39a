from __future__ import annotations

from flask import Blueprint, jsonify, request

from app.prioritizer.auth import login_required
from app.prioritizer.modules.features.service import (
    create_feature,
    query_features,
    update_feature,
    validate_feature_payload,
    validate_list_args,
)
from app.prioritizer.web import current_store, current_user, json_error, read_json_object

bp = Blueprint("features", __name__)


# ---------- List ----------
@bp.get("/features")
@login_required
def features_list():
    args = {k: (request.args.get(k) or "").strip() for k in ("q", "filter", "sort", "order")}
    errors = validate_list_args(args)
    if errors:
        return json_error(errors[0], 400)

    features = query_features(
        current_store().list_features(),
        search=args["q"] or None,
        filter_key=args["filter"] or None,
        sort_key=args["sort"] or None,
        order=args["order"] or None,
    )
    return jsonify([f.to_dict() for f in features])


# ---------- Detail ----------
@bp.get("/features/<int:feature_id>")
@login_required
def feature_detail(feature_id: int):
    feature = current_store().get_feature(feature_id)
    if not feature:
        return json_error("Feature not found", 404)
    return jsonify(feature.to_dict())


# ---------- Create ----------
@bp.post("/features")
@login_required
def feature_create():
    payload, err = read_json_object()
    if err:
        return json_error(err, 400)
    errors = validate_feature_payload(payload)
    if errors:
        return json_error(errors[0], 400)

    feature = create_feature(current_store(), payload, current_user())
    return jsonify(feature.to_dict()), 201


# ---------- Edit ----------
@bp.patch("/features/<int:feature_id>")
@login_required
def feature_update(feature_id: int):
    store = current_store()
    if not store.get_feature(feature_id):
        return json_error("Feature not found", 404)

    payload, err = read_json_object()
    if err:
        return json_error(err, 400)
    errors = validate_feature_payload(payload, partial=True)
    if errors:
        return json_error(errors[0], 400)

    feature = update_feature(store, feature_id, payload)
    if not feature:
        return json_error("Feature not found", 404)
    return jsonify(feature.to_dict())


# ---------- Delete ----------
@bp.delete("/features/<int:feature_id>")
@login_required
def feature_delete(feature_id: int):
    if not current_store().delete_feature(feature_id):
        return json_error("Feature not found", 404)
    return "", 204
