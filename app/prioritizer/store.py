from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import replace

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.prioritizer.db import create_sessionmaker, create_store_engine, session_scope
from app.prioritizer.entities import (
    Comment,
    CommentInput,
    Feature,
    FeatureInput,
    FeaturePatch,
    ScoringCriteria,
    ScoringCriteriaInput,
    ScoringCriteriaPatch,
    User,
    UserInput,
)
from app.prioritizer.models import Base, CommentRow, FeatureRow, ScoringCriteriaRow, UserRow
from app.prioritizer.scoring import compute_total_score
from app.prioritizer.utils import utcnow

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    pass


class FeatureStore:
    """
    Storage for users, features, scoring criteria and comments.

    Ids are assigned per entity kind and never reused. Lookups return None
    when the id is absent; nothing here raises for a missing entity.
    Returned entities are copies, mutating them does not touch the store.
    """

    # Users
    def get_user(self, user_id: int) -> User | None:
        raise NotImplementedError

    def get_user_by_username(self, username: str) -> User | None:
        raise NotImplementedError

    def list_users(self) -> list[User]:
        raise NotImplementedError

    def create_user(self, data: UserInput) -> User:
        raise NotImplementedError

    # Features
    def list_features(self) -> list[Feature]:
        raise NotImplementedError

    def get_feature(self, feature_id: int) -> Feature | None:
        raise NotImplementedError

    def create_feature(self, data: FeatureInput) -> Feature:
        raise NotImplementedError

    def update_feature(self, feature_id: int, patch: FeaturePatch) -> Feature | None:
        raise NotImplementedError

    def delete_feature(self, feature_id: int) -> bool:
        raise NotImplementedError

    # Scoring criteria
    def list_scoring_criteria(self) -> list[ScoringCriteria]:
        raise NotImplementedError

    def get_scoring_criteria(self, criteria_id: int) -> ScoringCriteria | None:
        raise NotImplementedError

    def create_scoring_criteria(self, data: ScoringCriteriaInput) -> ScoringCriteria:
        raise NotImplementedError

    def update_scoring_criteria(self, criteria_id: int, patch: ScoringCriteriaPatch) -> ScoringCriteria | None:
        raise NotImplementedError

    # Comments
    def list_comments_by_feature(self, feature_id: int) -> list[Comment]:
        raise NotImplementedError

    def create_comment(self, data: CommentInput) -> Comment:
        raise NotImplementedError


def _copy_feature(f: Feature) -> Feature:
    return replace(f, tags=list(f.tags))


class MemoryStore(FeatureStore):
    """Process-lifetime store: one dict per entity kind, one id counter per kind."""

    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._features: dict[int, Feature] = {}
        self._criteria: dict[int, ScoringCriteria] = {}
        self._comments: dict[int, Comment] = {}
        self._next_ids = {"user": 1, "feature": 1, "criteria": 1, "comment": 1}

    def _next_id(self, kind: str) -> int:
        nid = self._next_ids[kind]
        self._next_ids[kind] = nid + 1
        return nid

    # ---------- Users ----------
    def get_user(self, user_id: int) -> User | None:
        u = self._users.get(user_id)
        return replace(u) if u else None

    def get_user_by_username(self, username: str) -> User | None:
        for u in self._users.values():
            if u.username == username:
                return replace(u)
        return None

    def list_users(self) -> list[User]:
        return [replace(u) for u in self._users.values()]

    def create_user(self, data: UserInput) -> User:
        user = User(
            id=self._next_id("user"),
            username=data.username,
            password=data.password,
            name=data.name,
            role=data.role,
        )
        self._users[user.id] = user
        return replace(user)

    # ---------- Features ----------
    def list_features(self) -> list[Feature]:
        return [_copy_feature(f) for f in self._features.values()]

    def get_feature(self, feature_id: int) -> Feature | None:
        f = self._features.get(feature_id)
        return _copy_feature(f) if f else None

    def create_feature(self, data: FeatureInput) -> Feature:
        now = utcnow()
        feature = Feature(
            id=self._next_id("feature"),
            title=data.title,
            description=data.description,
            created_by_id=data.created_by_id,
            impact_score=data.impact_score,
            effort_score=data.effort_score,
            total_score=compute_total_score(data.impact_score, data.effort_score),
            status=data.status,
            customer_type=data.customer_type,
            customer_count=data.customer_count,
            category=data.category,
            tags=list(data.tags),
            created_at=now,
            updated_at=now,
        )
        self._features[feature.id] = feature
        return _copy_feature(feature)

    def update_feature(self, feature_id: int, patch: FeaturePatch) -> Feature | None:
        current = self._features.get(feature_id)
        if current is None:
            return None

        changes = patch.changes()
        if "tags" in changes:
            changes["tags"] = list(changes["tags"])
        updated = replace(current, **changes)
        # Clock steps backwards must not make updated_at go backwards.
        updated.updated_at = max(utcnow(), current.updated_at)
        if patch.touches_score():
            updated.total_score = compute_total_score(updated.impact_score, updated.effort_score)

        self._features[feature_id] = updated
        return _copy_feature(updated)

    def delete_feature(self, feature_id: int) -> bool:
        return self._features.pop(feature_id, None) is not None

    # ---------- Scoring criteria ----------
    def list_scoring_criteria(self) -> list[ScoringCriteria]:
        rows = sorted(self._criteria.values(), key=lambda c: (c.order, c.id))
        return [replace(c) for c in rows]

    def get_scoring_criteria(self, criteria_id: int) -> ScoringCriteria | None:
        c = self._criteria.get(criteria_id)
        return replace(c) if c else None

    def create_scoring_criteria(self, data: ScoringCriteriaInput) -> ScoringCriteria:
        criteria = ScoringCriteria(
            id=self._next_id("criteria"),
            name=data.name,
            description=data.description,
            weight=data.weight,
            order=data.order,
        )
        self._criteria[criteria.id] = criteria
        return replace(criteria)

    def update_scoring_criteria(self, criteria_id: int, patch: ScoringCriteriaPatch) -> ScoringCriteria | None:
        current = self._criteria.get(criteria_id)
        if current is None:
            return None
        updated = replace(current, **patch.changes())
        self._criteria[criteria_id] = updated
        return replace(updated)

    # ---------- Comments ----------
    def list_comments_by_feature(self, feature_id: int) -> list[Comment]:
        rows = [c for c in self._comments.values() if c.feature_id == feature_id]
        rows.sort(key=lambda c: (c.created_at, c.id))
        return [replace(c) for c in rows]

    def create_comment(self, data: CommentInput) -> Comment:
        comment = Comment(
            id=self._next_id("comment"),
            feature_id=data.feature_id,
            user_id=data.user_id,
            content=data.content,
            created_at=utcnow(),
        )
        self._comments[comment.id] = comment
        return replace(comment)


# ---------- SQL backend ----------
def _user_from_row(r: UserRow) -> User:
    return User(id=r.id, username=r.username, password=r.password, name=r.name, role=r.role)


def _feature_from_row(r: FeatureRow) -> Feature:
    return Feature(
        id=r.id,
        title=r.title,
        description=r.description,
        created_by_id=r.created_by_id,
        impact_score=r.impact_score,
        effort_score=r.effort_score,
        total_score=r.total_score,
        status=r.status,
        customer_type=r.customer_type,
        customer_count=r.customer_count,
        category=r.category,
        tags=list(r.tags or []),
        created_at=r.created_at,
        updated_at=r.updated_at,
    )


def _criteria_from_row(r: ScoringCriteriaRow) -> ScoringCriteria:
    return ScoringCriteria(id=r.id, name=r.name, description=r.description, weight=r.weight, order=r.order)


def _comment_from_row(r: CommentRow) -> Comment:
    return Comment(id=r.id, feature_id=r.feature_id, user_id=r.user_id, content=r.content, created_at=r.created_at)


class SqlStore(FeatureStore):
    """Same contract as MemoryStore, backed by SQLAlchemy tables."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._sm = create_sessionmaker(engine)

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def _scope(self) -> Generator[Session, None, None]:
        try:
            with session_scope(self._sm) as s:
                yield s
        except SQLAlchemyError as e:
            logger.error("Store operation failed: %s", e)
            raise StoreError(str(e)) from e

    # ---------- Users ----------
    def get_user(self, user_id: int) -> User | None:
        with self._scope() as s:
            row = s.get(UserRow, user_id)
            return _user_from_row(row) if row else None

    def get_user_by_username(self, username: str) -> User | None:
        with self._scope() as s:
            row = s.execute(select(UserRow).where(UserRow.username == username)).scalar_one_or_none()
            return _user_from_row(row) if row else None

    def list_users(self) -> list[User]:
        with self._scope() as s:
            rows = s.execute(select(UserRow).order_by(UserRow.id.asc())).scalars().all()
            return [_user_from_row(r) for r in rows]

    def create_user(self, data: UserInput) -> User:
        with self._scope() as s:
            row = UserRow(username=data.username, password=data.password, name=data.name, role=data.role)
            s.add(row)
            s.flush()
            return _user_from_row(row)

    # ---------- Features ----------
    def list_features(self) -> list[Feature]:
        with self._scope() as s:
            rows = s.execute(select(FeatureRow).order_by(FeatureRow.id.asc())).scalars().all()
            return [_feature_from_row(r) for r in rows]

    def get_feature(self, feature_id: int) -> Feature | None:
        with self._scope() as s:
            row = s.get(FeatureRow, feature_id)
            return _feature_from_row(row) if row else None

    def create_feature(self, data: FeatureInput) -> Feature:
        now = utcnow()
        with self._scope() as s:
            row = FeatureRow(
                title=data.title,
                description=data.description,
                created_by_id=data.created_by_id,
                impact_score=data.impact_score,
                effort_score=data.effort_score,
                total_score=compute_total_score(data.impact_score, data.effort_score),
                status=data.status,
                customer_type=data.customer_type,
                customer_count=data.customer_count,
                category=data.category,
                tags=list(data.tags),
                created_at=now,
                updated_at=now,
            )
            s.add(row)
            s.flush()
            return _feature_from_row(row)

    def update_feature(self, feature_id: int, patch: FeaturePatch) -> Feature | None:
        with self._scope() as s:
            row = s.get(FeatureRow, feature_id)
            if row is None:
                return None
            for key, value in patch.changes().items():
                setattr(row, key, list(value) if key == "tags" else value)
            row.updated_at = max(utcnow(), row.updated_at)
            if patch.touches_score():
                row.total_score = compute_total_score(row.impact_score, row.effort_score)
            s.flush()
            return _feature_from_row(row)

    def delete_feature(self, feature_id: int) -> bool:
        with self._scope() as s:
            row = s.get(FeatureRow, feature_id)
            if row is None:
                return False
            s.delete(row)
            return True

    # ---------- Scoring criteria ----------
    def list_scoring_criteria(self) -> list[ScoringCriteria]:
        with self._scope() as s:
            q = select(ScoringCriteriaRow).order_by(ScoringCriteriaRow.order.asc(), ScoringCriteriaRow.id.asc())
            return [_criteria_from_row(r) for r in s.execute(q).scalars().all()]

    def get_scoring_criteria(self, criteria_id: int) -> ScoringCriteria | None:
        with self._scope() as s:
            row = s.get(ScoringCriteriaRow, criteria_id)
            return _criteria_from_row(row) if row else None

    def create_scoring_criteria(self, data: ScoringCriteriaInput) -> ScoringCriteria:
        with self._scope() as s:
            row = ScoringCriteriaRow(name=data.name, description=data.description, weight=data.weight, order=data.order)
            s.add(row)
            s.flush()
            return _criteria_from_row(row)

    def update_scoring_criteria(self, criteria_id: int, patch: ScoringCriteriaPatch) -> ScoringCriteria | None:
        with self._scope() as s:
            row = s.get(ScoringCriteriaRow, criteria_id)
            if row is None:
                return None
            for key, value in patch.changes().items():
                setattr(row, key, value)
            s.flush()
            return _criteria_from_row(row)

    # ---------- Comments ----------
    def list_comments_by_feature(self, feature_id: int) -> list[Comment]:
        with self._scope() as s:
            q = (
                select(CommentRow)
                .where(CommentRow.feature_id == feature_id)
                .order_by(CommentRow.created_at.asc(), CommentRow.id.asc())
            )
            return [_comment_from_row(r) for r in s.execute(q).scalars().all()]

    def create_comment(self, data: CommentInput) -> Comment:
        with self._scope() as s:
            row = CommentRow(feature_id=data.feature_id, user_id=data.user_id, content=data.content, created_at=utcnow())
            s.add(row)
            s.flush()
            return _comment_from_row(row)


def store_from_config(config: dict) -> FeatureStore:
    backend = (config.get("STORE_BACKEND") or "memory").strip().lower()
    if backend == "sql":
        db_url = (config.get("DATABASE_URL") or "").strip()
        if not db_url:
            raise StoreError("DATABASE_URL is required for STORE_BACKEND=sql.")
        engine = create_store_engine(db_url, echo_checkout=config.get("ENV") not in ("prod", "production"))
        store = SqlStore(engine)
        store.create_all()
        return store
    if backend != "memory":
        raise StoreError(f"Unknown STORE_BACKEND {backend!r}; expected 'memory' or 'sql'.")
    # default in-memory
    return MemoryStore()
