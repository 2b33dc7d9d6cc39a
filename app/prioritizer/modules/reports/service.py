"""
Read-only aggregates over the current feature list.

Everything here is recomputed from whatever the store returns; nothing is
cached between requests.
"""
from __future__ import annotations

import csv
import io
from collections import Counter

from app.prioritizer.entities import CUSTOMER_TYPES, FEATURE_STATUSES, Feature
from app.prioritizer.modules.features.service import HIGH_IMPACT_THRESHOLD, LOW_EFFORT_THRESHOLD, latest_activity
from app.prioritizer.scoring import QUADRANT_LABELS, QUADRANTS, quadrant_for
from app.prioritizer.utils import isoformat_utc

IMPACT_BUCKET_WIDTH = 20
# The last bucket is closed so a score of exactly 100 has somewhere to go.
IMPACT_BUCKETS = ("0-19", "20-39", "40-59", "60-79", "80-100")


def impact_bucket(impact_score: int) -> str:
    idx = min(impact_score // IMPACT_BUCKET_WIDTH, len(IMPACT_BUCKETS) - 1)
    return IMPACT_BUCKETS[max(idx, 0)]


def build_matrix(features: list[Feature]) -> list[dict]:
    """The four quadrants in display order, each sorted by total score, best first."""
    grouped: dict[str, list[Feature]] = {q: [] for q in QUADRANTS}
    for f in features:
        grouped[quadrant_for(f.impact_score, f.effort_score)].append(f)

    result = []
    for key in QUADRANTS:
        members = sorted(grouped[key], key=lambda f: f.total_score, reverse=True)
        result.append(
            {
                "quadrant": key,
                "label": QUADRANT_LABELS[key],
                "count": len(members),
                "features": [f.to_dict() for f in members],
            }
        )
    return result


def _counts(values: list[str], known: tuple[str, ...]) -> dict[str, int]:
    """Known keys always present (zero-filled), unexpected values appended after them."""
    c = Counter(values)
    out = {k: c.get(k, 0) for k in known}
    for k in sorted(set(c) - set(known)):
        out[k] = c[k]
    return out


def build_summary(features: list[Feature]) -> dict:
    total = len(features)
    avg = round(sum(f.total_score for f in features) / total, 1) if total else 0.0
    return {
        "totalFeatures": total,
        "highImpactFeatures": sum(1 for f in features if f.impact_score >= HIGH_IMPACT_THRESHOLD),
        "lowEffortFeatures": sum(1 for f in features if f.effort_score < LOW_EFFORT_THRESHOLD),
        "averageTotalScore": avg,
        "impactDistribution": _counts([impact_bucket(f.impact_score) for f in features], IMPACT_BUCKETS),
        "countsByStatus": _counts([f.status for f in features], FEATURE_STATUSES),
        "countsByCustomerType": _counts([f.customer_type for f in features], CUSTOMER_TYPES),
        "countsByQuadrant": _counts([quadrant_for(f.impact_score, f.effort_score) for f in features], QUADRANTS),
        "lastUpdatedAt": isoformat_utc(latest_activity(features)),
    }


CSV_HEADER = [
    "ID",
    "Title",
    "Status",
    "Impact",
    "Effort",
    "Total Score",
    "Quadrant",
    "Customer Type",
    "Customer Count",
    "Category",
    "Tags",
    "Created By",
    "Created At",
    "Updated At",
]


def export_features_csv(features: list[Feature]) -> bytes:
    out = io.StringIO()
    w = csv.writer(out)
    w.writerow(CSV_HEADER)
    for f in sorted(features, key=lambda f: f.id):
        w.writerow(
            [
                f.id,
                f.title,
                f.status,
                f.impact_score,
                f.effort_score,
                f.total_score,
                quadrant_for(f.impact_score, f.effort_score),
                f.customer_type,
                f.customer_count,
                f.category,
                ";".join(f.tags),
                f.created_by_id,
                isoformat_utc(f.created_at),
                isoformat_utc(f.updated_at),
            ]
        )
    return out.getvalue().encode("utf-8")
