from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from app.prioritizer.entities import (
    CUSTOMER_TYPES,
    DEFAULT_CATEGORY,
    DEFAULT_CUSTOMER_TYPE,
    DEFAULT_EFFORT_SCORE,
    DEFAULT_IMPACT_SCORE,
    DEFAULT_STATUS,
    FEATURE_STATUSES,
    Feature,
    FeatureInput,
    FeaturePatch,
)
from app.prioritizer.validation import (
    INT_COLUMN_MAX,
    check_int,
    check_string_list,
    check_text,
    clean_string_list,
    clean_text,
)

if TYPE_CHECKING:
    from app.prioritizer.entities import User
    from app.prioritizer.store import FeatureStore


HIGH_IMPACT_THRESHOLD = 75
LOW_EFFORT_THRESHOLD = 50

LIST_FILTERS = ("all", "high-impact", "quick-wins", "strategic", "customer")
SORT_KEYS = ("totalScore", "impactScore", "effortScore", "createdAt", "updatedAt")
SORT_ORDERS = ("asc", "desc")

_SORT_ATTRS = {
    "totalScore": "total_score",
    "impactScore": "impact_score",
    "effortScore": "effort_score",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

# JSON key -> FeaturePatch / FeatureInput attribute. id, timestamps,
# totalScore and createdById are read-only and never taken from a body.
_WRITABLE_FIELDS = {
    "title": "title",
    "description": "description",
    "impactScore": "impact_score",
    "effortScore": "effort_score",
    "status": "status",
    "customerType": "customer_type",
    "customerCount": "customer_count",
    "category": "category",
    "tags": "tags",
}


def validate_feature_payload(payload: dict, *, partial: bool = False) -> list[str]:
    """Validate feature creation/update payload. Returns list of errors."""
    errors: list[str] = []
    check_text(payload, "title", errors, required=not partial)
    check_text(payload, "description", errors, required=not partial)
    check_int(payload, "impactScore", errors, minimum=0, maximum=100)
    check_int(payload, "effortScore", errors, minimum=0, maximum=100)
    check_text(payload, "status", errors, choices=FEATURE_STATUSES)
    check_text(payload, "customerType", errors, choices=CUSTOMER_TYPES)
    check_int(payload, "customerCount", errors, minimum=0, maximum=INT_COLUMN_MAX)
    check_text(payload, "category", errors)
    check_string_list(payload, "tags", errors)
    return errors


def _clean_value(key: str, value):
    if key == "tags":
        return clean_string_list(value)
    if isinstance(value, str):
        return clean_text(value)
    return value


def build_feature_input(payload: dict, user: "User") -> FeatureInput:
    """Caller must have validated the payload. Any totalScore in it is ignored."""
    return FeatureInput(
        title=clean_text(payload["title"]),
        description=clean_text(payload["description"]),
        created_by_id=user.id,
        impact_score=payload.get("impactScore", DEFAULT_IMPACT_SCORE),
        effort_score=payload.get("effortScore", DEFAULT_EFFORT_SCORE),
        status=clean_text(payload.get("status", DEFAULT_STATUS)),
        customer_type=clean_text(payload.get("customerType", DEFAULT_CUSTOMER_TYPE)),
        customer_count=payload.get("customerCount", 0),
        category=clean_text(payload.get("category", DEFAULT_CATEGORY)),
        tags=clean_string_list(payload.get("tags")),
    )


def build_feature_patch(payload: dict) -> FeaturePatch:
    patch = FeaturePatch()
    for key, attr in _WRITABLE_FIELDS.items():
        if key in payload:
            setattr(patch, attr, _clean_value(key, payload[key]))
    return patch


def create_feature(store: "FeatureStore", payload: dict, user: "User") -> Feature:
    return store.create_feature(build_feature_input(payload, user))


def update_feature(store: "FeatureStore", feature_id: int, payload: dict) -> Feature | None:
    return store.update_feature(feature_id, build_feature_patch(payload))


# ---------- Listing ----------
def validate_list_args(args: dict) -> list[str]:
    errors: list[str] = []
    filter_key = args.get("filter")
    if filter_key and filter_key not in LIST_FILTERS:
        errors.append(f"Invalid filter. Must be one of: {', '.join(LIST_FILTERS)}")
    sort_key = args.get("sort")
    if sort_key and sort_key not in SORT_KEYS:
        errors.append(f"Invalid sort. Must be one of: {', '.join(SORT_KEYS)}")
    order = args.get("order")
    if order and order not in SORT_ORDERS:
        errors.append(f"Invalid order. Must be one of: {', '.join(SORT_ORDERS)}")
    return errors


def _matches_filter(f: Feature, filter_key: str) -> bool:
    high_impact = f.impact_score >= HIGH_IMPACT_THRESHOLD
    if filter_key == "high-impact":
        return high_impact
    if filter_key == "quick-wins":
        return high_impact and f.effort_score < LOW_EFFORT_THRESHOLD
    if filter_key == "strategic":
        return high_impact and f.effort_score >= LOW_EFFORT_THRESHOLD
    if filter_key == "customer":
        return f.customer_type != "internal"
    return True


def query_features(
    features: list[Feature],
    *,
    search: str | None = None,
    filter_key: str | None = None,
    sort_key: str | None = None,
    order: str | None = None,
) -> list[Feature]:
    """Search, filter and sort a feature list. No arguments keeps insertion order."""
    result = features
    if search:
        needle = search.lower()
        result = [f for f in result if needle in f.title.lower() or needle in f.description.lower()]
    if filter_key and filter_key != "all":
        result = [f for f in result if _matches_filter(f, filter_key)]
    if sort_key:
        attr = _SORT_ATTRS[sort_key]
        # Stable sort, so ties keep insertion order in either direction.
        result = sorted(result, key=lambda f: getattr(f, attr), reverse=(order or "desc") == "desc")
    return list(result)


def latest_activity(features: list[Feature]) -> datetime | None:
    if not features:
        return None
    return max(f.updated_at for f in features)
