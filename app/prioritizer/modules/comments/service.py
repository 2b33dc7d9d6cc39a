from __future__ import annotations

from typing import TYPE_CHECKING

from app.prioritizer.entities import Comment, CommentInput
from app.prioritizer.validation import check_text, clean_text

if TYPE_CHECKING:
    from app.prioritizer.entities import User
    from app.prioritizer.store import FeatureStore


def validate_comment_payload(payload: dict) -> list[str]:
    errors: list[str] = []
    check_text(payload, "content", errors, required=True)
    return errors


def create_comment(store: "FeatureStore", feature_id: int, payload: dict, user: "User") -> Comment:
    """featureId and userId come from the URL and session, never from the body."""
    return store.create_comment(
        CommentInput(feature_id=feature_id, user_id=user.id, content=clean_text(payload["content"]))
    )
