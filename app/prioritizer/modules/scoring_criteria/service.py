from __future__ import annotations

from typing import TYPE_CHECKING

from app.prioritizer.entities import DEFAULT_CRITERIA_WEIGHT, ScoringCriteria, ScoringCriteriaInput, ScoringCriteriaPatch
from app.prioritizer.validation import INT_COLUMN_MAX, INT_COLUMN_MIN, check_int, check_text, clean_text

if TYPE_CHECKING:
    from app.prioritizer.store import FeatureStore


def validate_criteria_payload(payload: dict, *, partial: bool = False) -> list[str]:
    """Validate scoring criteria creation/update payload. Returns list of errors."""
    errors: list[str] = []
    check_text(payload, "name", errors, required=not partial)
    check_text(payload, "description", errors, required=not partial)
    # Weights are independent; nothing makes them sum to 100.
    check_int(payload, "weight", errors, minimum=0, maximum=100)
    check_int(payload, "order", errors, required=not partial, minimum=INT_COLUMN_MIN, maximum=INT_COLUMN_MAX)
    return errors


def create_criteria(store: "FeatureStore", payload: dict) -> ScoringCriteria:
    return store.create_scoring_criteria(
        ScoringCriteriaInput(
            name=clean_text(payload["name"]),
            description=clean_text(payload["description"]),
            weight=payload.get("weight", DEFAULT_CRITERIA_WEIGHT),
            order=payload["order"],
        )
    )


def update_criteria(store: "FeatureStore", criteria_id: int, payload: dict) -> ScoringCriteria | None:
    patch = ScoringCriteriaPatch()
    for key in ("name", "description"):
        if key in payload:
            setattr(patch, key, clean_text(payload[key]))
    for key in ("weight", "order"):
        if key in payload:
            setattr(patch, key, payload[key])
    return store.update_scoring_criteria(criteria_id, patch)
