from __future__ import annotations

from flask import Blueprint, jsonify

from app.prioritizer.auth import login_required
from app.prioritizer.modules.scoring_criteria.service import (
    create_criteria,
    update_criteria,
    validate_criteria_payload,
)
from app.prioritizer.web import current_store, json_error, read_json_object

bp = Blueprint("scoring_criteria", __name__)


@bp.get("/scoring-criteria")
@login_required
def criteria_list():
    return jsonify([c.to_dict() for c in current_store().list_scoring_criteria()])


@bp.post("/scoring-criteria")
@login_required
def criteria_create():
    payload, err = read_json_object()
    if err:
        return json_error(err, 400)
    errors = validate_criteria_payload(payload)
    if errors:
        return json_error(errors[0], 400)
    criteria = create_criteria(current_store(), payload)
    return jsonify(criteria.to_dict()), 201


@bp.patch("/scoring-criteria/<int:criteria_id>")
@login_required
def criteria_update(criteria_id: int):
    payload, err = read_json_object()
    if err:
        return json_error(err, 400)
    errors = validate_criteria_payload(payload, partial=True)
    if errors:
        return json_error(errors[0], 400)

    criteria = update_criteria(current_store(), criteria_id, payload)
    if not criteria:
        return json_error("Scoring criteria not found", 404)
    return jsonify(criteria.to_dict())
