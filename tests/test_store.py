"""Contract tests run against both store backends."""
import pytest

from app.prioritizer.db import create_store_engine
from app.prioritizer.entities import (
    UNSET,
    CommentInput,
    FeatureInput,
    FeaturePatch,
    ScoringCriteriaInput,
    ScoringCriteriaPatch,
    UserInput,
)
from app.prioritizer.store import MemoryStore, SqlStore


@pytest.fixture(params=["memory", "sql"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    s = SqlStore(create_store_engine(f"sqlite:///{tmp_path/'store.db'}"))
    s.create_all()
    return s


def _feature(**overrides):
    data = {
        "title": "Bulk export",
        "description": "Export every feature as CSV",
        "created_by_id": 1,
        "impact_score": 90,
        "effort_score": 70,
    }
    data.update(overrides)
    return FeatureInput(**data)


# ---------- Features ----------
def test_create_feature_assigns_id_timestamps_and_score(store):
    f = store.create_feature(_feature())
    assert f.id == 1
    assert f.total_score == 72
    assert f.created_at == f.updated_at
    assert f.status == "pending"
    assert f.customer_type == "internal"
    assert f.category == "feature"
    assert f.tags == []


def test_update_title_only_keeps_scores(store):
    f = store.create_feature(_feature())
    updated = store.update_feature(f.id, FeaturePatch(title="Bulk export v2"))
    assert updated.title == "Bulk export v2"
    assert updated.impact_score == 90
    assert updated.effort_score == 70
    assert updated.total_score == 72


def test_update_effort_recomputes_with_existing_impact(store):
    f = store.create_feature(_feature())
    updated = store.update_feature(f.id, FeaturePatch(effort_score=40))
    assert updated.impact_score == 90
    assert updated.total_score == 81
    assert store.get_feature(f.id).total_score == 81


def test_update_does_not_recompute_when_scores_untouched(store):
    # A stored score that disagrees with the formula stays put unless a score field changes.
    f = store.create_feature(_feature())
    if isinstance(store, MemoryStore):
        store._features[f.id].total_score = 5
    else:
        from app.prioritizer.models import FeatureRow

        with store._scope() as s:
            s.get(FeatureRow, f.id).total_score = 5
    updated = store.update_feature(f.id, FeaturePatch(status="approved"))
    assert updated.total_score == 5


def test_update_timestamps(store):
    f = store.create_feature(_feature())
    updated = store.update_feature(f.id, FeaturePatch(customer_count=3))
    assert updated.created_at == f.created_at
    assert updated.updated_at >= f.updated_at
    again = store.update_feature(f.id, FeaturePatch(category="ux"))
    assert again.updated_at >= updated.updated_at
    assert again.created_at == f.created_at


def test_update_missing_feature_returns_none(store):
    assert store.update_feature(999, FeaturePatch(title="x")) is None


def test_delete_feature_then_get_and_delete_again(store):
    f = store.create_feature(_feature())
    assert store.delete_feature(f.id) is True
    assert store.get_feature(f.id) is None
    assert store.delete_feature(f.id) is False


def test_ids_not_reused_after_delete(store):
    store.create_feature(_feature())
    second = store.create_feature(_feature(title="Second"))
    store.delete_feature(second.id)
    third = store.create_feature(_feature(title="Third"))
    assert third.id == 3


def test_list_features_in_insertion_order(store):
    for title in ("A", "B", "C"):
        store.create_feature(_feature(title=title))
    assert [f.title for f in store.list_features()] == ["A", "B", "C"]


def test_returned_feature_is_a_copy(store):
    f = store.create_feature(_feature(tags=["one"]))
    f.tags.append("mutated")
    f.title = "mutated"
    fresh = store.get_feature(f.id)
    assert fresh.tags == ["one"]
    assert fresh.title == "Bulk export"


def test_patch_tags_replace_list(store):
    f = store.create_feature(_feature(tags=["a", "b"]))
    updated = store.update_feature(f.id, FeaturePatch(tags=["c"]))
    assert updated.tags == ["c"]


def test_patch_changes_only_reports_present_fields():
    patch = FeaturePatch(title="x", effort_score=0)
    assert patch.changes() == {"title": "x", "effort_score": 0}
    assert patch.touches_score() is True
    assert FeaturePatch(status="approved").touches_score() is False
    assert FeaturePatch().impact_score is UNSET


# ---------- Scoring criteria ----------
def test_scoring_criteria_sorted_by_order(store):
    store.create_scoring_criteria(ScoringCriteriaInput(name="C", description="c", order=3))
    store.create_scoring_criteria(ScoringCriteriaInput(name="A", description="a", order=1, weight=40))
    store.create_scoring_criteria(ScoringCriteriaInput(name="B", description="b", order=2))
    criteria = store.list_scoring_criteria()
    assert [c.name for c in criteria] == ["A", "B", "C"]
    assert criteria[1].weight == 20


def test_update_scoring_criteria_weight(store):
    c = store.create_scoring_criteria(ScoringCriteriaInput(name="Revenue", description="r", order=1))
    updated = store.update_scoring_criteria(c.id, ScoringCriteriaPatch(weight=55))
    assert updated.weight == 55
    assert updated.name == "Revenue"
    assert store.update_scoring_criteria(404, ScoringCriteriaPatch(weight=1)) is None


# ---------- Comments ----------
def test_comments_listed_by_feature_oldest_first(store):
    f = store.create_feature(_feature())
    other = store.create_feature(_feature(title="Other"))
    for text in ("first", "second", "third"):
        store.create_comment(CommentInput(feature_id=f.id, user_id=1, content=text))
    store.create_comment(CommentInput(feature_id=other.id, user_id=1, content="elsewhere"))

    comments = store.list_comments_by_feature(f.id)
    assert [c.content for c in comments] == ["first", "second", "third"]
    assert all(a.created_at <= b.created_at for a, b in zip(comments, comments[1:]))


def test_comments_for_missing_feature_are_empty(store):
    assert store.list_comments_by_feature(12345) == []


def test_comment_on_deleted_feature_is_kept(store):
    f = store.create_feature(_feature())
    store.create_comment(CommentInput(feature_id=f.id, user_id=1, content="still here"))
    store.delete_feature(f.id)
    assert [c.content for c in store.list_comments_by_feature(f.id)] == ["still here"]


# ---------- Users ----------
def test_users_by_id_and_username(store):
    u = store.create_user(UserInput(username="dana", password="hash", name="Dana"))
    assert u.role == "user"
    assert store.get_user(u.id).username == "dana"
    assert store.get_user_by_username("dana").id == u.id
    assert store.get_user_by_username("nobody") is None
    assert [x.username for x in store.list_users()] == ["dana"]


def test_id_counters_are_independent(store):
    store.create_user(UserInput(username="dana", password="hash", name="Dana"))
    store.create_user(UserInput(username="eli", password="hash", name="Eli"))
    f = store.create_feature(_feature())
    c = store.create_scoring_criteria(ScoringCriteriaInput(name="A", description="a", order=1))
    assert f.id == 1
    assert c.id == 1
