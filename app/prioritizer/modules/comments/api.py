from __future__ import annotations

from flask import Blueprint, jsonify

from app.prioritizer.auth import login_required
from app.prioritizer.modules.comments.service import create_comment, validate_comment_payload
from app.prioritizer.web import current_store, current_user, json_error, read_json_object

bp = Blueprint("comments", __name__)


@bp.get("/features/<int:feature_id>/comments")
@login_required
def comments_list(feature_id: int):
    store = current_store()
    # Comments left behind by a deleted feature are not listed.
    if not store.get_feature(feature_id):
        return jsonify([])
    comments = store.list_comments_by_feature(feature_id)
    return jsonify([c.to_dict() for c in comments])


@bp.post("/features/<int:feature_id>/comments")
@login_required
def comment_create(feature_id: int):
    store = current_store()
    payload, err = read_json_object()
    if err:
        return json_error(err, 400)
    errors = validate_comment_payload(payload)
    if errors:
        return json_error(errors[0], 400)
    if not store.get_feature(feature_id):
        return json_error("Feature not found", 404)

    comment = create_comment(store, feature_id, payload, current_user())
    return jsonify(comment.to_dict()), 201
