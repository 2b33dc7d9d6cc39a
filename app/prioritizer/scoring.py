"""
Priority scoring for feature requests.

Higher impact is better and lower effort is better; impact carries 70% of the
weight. Inputs are validated upstream, nothing here clamps them.
"""
from __future__ import annotations

# Weights in tenths so the floor is taken on exact integers, not floats.
IMPACT_WEIGHT = 7
EFFORT_WEIGHT = 3

# A score at or above this threshold counts as "high" on its axis.
QUADRANT_THRESHOLD = 50

QUICK_WINS = "quick-wins"
MAJOR_PROJECTS = "major-projects"
FILL_INS = "fill-ins"
THANKLESS_TASKS = "thankless-tasks"

QUADRANTS = (QUICK_WINS, MAJOR_PROJECTS, FILL_INS, THANKLESS_TASKS)

QUADRANT_LABELS = {
    QUICK_WINS: "High Impact, Low Effort",
    MAJOR_PROJECTS: "High Impact, High Effort",
    FILL_INS: "Low Impact, Low Effort",
    THANKLESS_TASKS: "Low Impact, High Effort",
}


def compute_total_score(impact_score: int, effort_score: int) -> int:
    """floor(impact * 0.7 + (100 - effort) * 0.3)"""
    return (impact_score * IMPACT_WEIGHT + (100 - effort_score) * EFFORT_WEIGHT) // 10


def quadrant_for(impact_score: int, effort_score: int) -> str:
    high_impact = impact_score >= QUADRANT_THRESHOLD
    high_effort = effort_score >= QUADRANT_THRESHOLD
    if high_impact:
        return MAJOR_PROJECTS if high_effort else QUICK_WINS
    return THANKLESS_TASKS if high_effort else FILL_INS
