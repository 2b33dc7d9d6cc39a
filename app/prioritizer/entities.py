"""
Value types for the four entity kinds held by the store.

`*Input` types carry everything a create needs (ids and timestamps are
assigned by the store). `*Patch` types carry a partial update: every field
defaults to `UNSET`, so "not present" is distinct from "present".
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any

from app.prioritizer.utils import isoformat_utc


class _Unset:
    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


# Widened to cover every value seen in existing data, not just the form defaults.
FEATURE_STATUSES = (
    "pending",
    "approved",
    "rejected",
    "in_progress",
    "completed",
    "planning",
    "research",
    "development",
    "backlog",
)
CUSTOMER_TYPES = ("internal", "enterprise", "smb", "mid-market", "all")

DEFAULT_IMPACT_SCORE = 50
DEFAULT_EFFORT_SCORE = 50
DEFAULT_STATUS = "pending"
DEFAULT_CUSTOMER_TYPE = "internal"
DEFAULT_CATEGORY = "feature"
DEFAULT_ROLE = "user"
DEFAULT_CRITERIA_WEIGHT = 20


# ---------- Users ----------
@dataclass
class UserInput:
    username: str
    password: str  # already hashed
    name: str
    role: str = DEFAULT_ROLE


@dataclass
class User:
    id: int
    username: str
    password: str
    name: str
    role: str = DEFAULT_ROLE

    def to_dict(self) -> dict[str, Any]:
        # The password hash never leaves the server.
        return {"id": self.id, "username": self.username, "name": self.name, "role": self.role}


# ---------- Features ----------
@dataclass
class FeatureInput:
    title: str
    description: str
    created_by_id: int
    impact_score: int = DEFAULT_IMPACT_SCORE
    effort_score: int = DEFAULT_EFFORT_SCORE
    status: str = DEFAULT_STATUS
    customer_type: str = DEFAULT_CUSTOMER_TYPE
    customer_count: int = 0
    category: str = DEFAULT_CATEGORY
    tags: list[str] = field(default_factory=list)


@dataclass
class FeaturePatch:
    title: str = UNSET
    description: str = UNSET
    impact_score: int = UNSET
    effort_score: int = UNSET
    status: str = UNSET
    customer_type: str = UNSET
    customer_count: int = UNSET
    category: str = UNSET
    tags: list[str] = UNSET

    def changes(self) -> dict[str, Any]:
        """Fields present in this patch, keyed by attribute name."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}

    def touches_score(self) -> bool:
        return self.impact_score is not UNSET or self.effort_score is not UNSET


@dataclass
class Feature:
    id: int
    title: str
    description: str
    created_by_id: int
    impact_score: int
    effort_score: int
    total_score: int
    status: str
    customer_type: str
    customer_count: int
    category: str
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "createdById": self.created_by_id,
            "impactScore": self.impact_score,
            "effortScore": self.effort_score,
            "totalScore": self.total_score,
            "status": self.status,
            "customerType": self.customer_type,
            "customerCount": self.customer_count,
            "category": self.category,
            "tags": list(self.tags),
            "createdAt": isoformat_utc(self.created_at),
            "updatedAt": isoformat_utc(self.updated_at),
        }


# ---------- Scoring criteria ----------
@dataclass
class ScoringCriteriaInput:
    name: str
    description: str
    order: int
    weight: int = DEFAULT_CRITERIA_WEIGHT


@dataclass
class ScoringCriteriaPatch:
    name: str = UNSET
    description: str = UNSET
    weight: int = UNSET
    order: int = UNSET

    def changes(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}


@dataclass
class ScoringCriteria:
    id: int
    name: str
    description: str
    weight: int
    order: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "weight": self.weight,
            "order": self.order,
        }


# ---------- Comments ----------
@dataclass
class CommentInput:
    feature_id: int
    user_id: int
    content: str


@dataclass
class Comment:
    id: int
    feature_id: int
    user_id: int
    content: str
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "featureId": self.feature_id,
            "userId": self.user_id,
            "content": self.content,
            "createdAt": isoformat_utc(self.created_at),
        }
