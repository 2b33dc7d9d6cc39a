"""
Startup seeding: default scoring criteria, the default admin user and,
optionally, a demo backlog of AI SDR feature requests.

Every step is idempotent, so running it against a persistent store that was
already seeded changes nothing.
"""
from __future__ import annotations

import logging

from werkzeug.security import generate_password_hash

from app.prioritizer.entities import CommentInput, FeatureInput, ScoringCriteriaInput, User, UserInput
from app.prioritizer.store import FeatureStore

logger = logging.getLogger(__name__)


DEFAULT_CRITERIA = (
    ("Revenue Impact", "Potential revenue generation or retention", 30, 1),
    ("Strategic Alignment", "Fit with company roadmap and goals", 25, 2),
    ("Implementation Effort", "Development and deployment resources required", 20, 3),
    ("Customer Demand", "Volume and tier of customer requests", 15, 4),
    ("Technical Debt", "Impact on maintainability and architecture", 10, 5),
)

# title, description, impact, effort, status, customer type, customer count, category, tags
DEMO_FEATURES = (
    (
        "AI-Powered Lead Qualification",
        "Implement AI algorithms to automatically qualify leads based on fit, intent, and engagement data. "
        "Should integrate with existing CRM data.",
        90, 70, "planning", "enterprise", 15, "ai-feature",
        ["ai", "lead-qualification", "automation"],
    ),
    (
        "Multi-Channel Outreach Automation",
        "Create a system to automatically execute personalized outreach across email, LinkedIn, phone, and SMS "
        "based on prospect preferences and engagement patterns.",
        85, 65, "research", "enterprise", 12, "communication",
        ["multi-channel", "personalization", "automation"],
    ),
    (
        "Sentiment Analysis for Prospect Responses",
        "Use NLP to analyze prospect responses and determine sentiment, interest level, and objections to "
        "inform follow-up strategy.",
        75, 45, "pending", "mid-market", 8, "ai-feature",
        ["nlp", "sentiment-analysis", "response-handling"],
    ),
    (
        "AI Meeting Scheduler with Contextual Awareness",
        "Develop an AI assistant that can automatically schedule meetings by analyzing calendar availability, "
        "communication history, and conversation context.",
        80, 40, "development", "all", 25, "productivity",
        ["meeting-scheduler", "calendar-integration", "ai-assistant"],
    ),
    (
        "Automated Competitive Intelligence",
        "Create a system that monitors prospect engagement with competitors and automatically provides relevant "
        "competitive intelligence to SDRs.",
        70, 80, "research", "enterprise", 7, "market-intelligence",
        ["competitive-intel", "market-monitoring", "sales-enablement"],
    ),
    (
        "Personalized Outreach Content Generator",
        "AI tool that generates personalized outreach messages based on prospect data, company news, and "
        "historical engagement patterns.",
        95, 60, "planning", "all", 30, "content",
        ["content-generation", "personalization", "outreach"],
    ),
    (
        "Predictive Lead Scoring",
        "Implement machine learning models to predict the likelihood of conversion for each lead based on "
        "historical data and current engagement.",
        85, 75, "pending", "enterprise", 10, "ai-feature",
        ["predictive-analytics", "lead-scoring", "ml"],
    ),
    (
        "Voice Analytics for SDR Calls",
        "Implement real-time voice analysis tools for SDR calls to provide coaching on tone, pace, and "
        "effectiveness with auto-generated improvement recommendations.",
        65, 85, "backlog", "mid-market", 5, "training",
        ["voice-analytics", "coaching", "call-analysis"],
    ),
    (
        "Account-Based Intelligence Dashboard",
        "Create a centralized dashboard that aggregates all available intelligence on target accounts including "
        "key contacts, recent news, and engagement history.",
        75, 55, "development", "enterprise", 18, "dashboard",
        ["abi", "account-intelligence", "dashboard"],
    ),
    (
        "Automated Objection Handling Assistant",
        "AI tool that suggests appropriate responses to common objections in real-time during prospect "
        "conversations based on successful past interactions.",
        80, 50, "planning", "all", 22, "sales-enablement",
        ["objection-handling", "real-time-assistance", "conversation-intelligence"],
    ),
)

# (1-based position in DEMO_FEATURES, content)
DEMO_COMMENTS = (
    (1, "This could significantly increase our conversion rates. Enterprise customers particularly mentioned "
        "this in the last advisory board."),
    (1, "We should integrate this with our existing lead scoring system to avoid creating a parallel workflow."),
    (2, "Multi-channel orchestration will be a key differentiator. Let's prioritize this for Q2."),
    (6, "The content generation capability should leverage our existing messaging library to maintain brand "
        "consistency."),
    (7, "We'll need to coordinate with the data science team for this. Initial models show promising accuracy."),
)


def seed_scoring_criteria(store: FeatureStore) -> int:
    if store.list_scoring_criteria():
        return 0
    for name, description, weight, order in DEFAULT_CRITERIA:
        store.create_scoring_criteria(ScoringCriteriaInput(name=name, description=description, weight=weight, order=order))
    logger.info("Seeded %s default scoring criteria", len(DEFAULT_CRITERIA))
    return len(DEFAULT_CRITERIA)


def ensure_admin_user(store: FeatureStore, *, username: str, password: str, name: str) -> User:
    """Does NOT overwrite an existing user's password."""
    existing = store.get_user_by_username(username)
    if existing:
        return existing
    user = store.create_user(
        UserInput(username=username, password=generate_password_hash(password), name=name, role="Admin")
    )
    logger.info("Default user %r created (id=%s)", username, user.id)
    return user


def seed_demo_data(store: FeatureStore, *, created_by_id: int) -> int:
    """Skipped when any feature already exists. Returns the number of features created."""
    if store.list_features():
        return 0

    created = []
    for title, description, impact, effort, status, customer_type, count, category, tags in DEMO_FEATURES:
        created.append(
            store.create_feature(
                FeatureInput(
                    title=title,
                    description=description,
                    created_by_id=created_by_id,
                    impact_score=impact,
                    effort_score=effort,
                    status=status,
                    customer_type=customer_type,
                    customer_count=count,
                    category=category,
                    tags=list(tags),
                )
            )
        )

    for position, content in DEMO_COMMENTS:
        feature = created[min(position, len(created)) - 1]
        store.create_comment(CommentInput(feature_id=feature.id, user_id=created_by_id, content=content))

    logger.info("Seeded %s demo features and %s comments", len(created), len(DEMO_COMMENTS))
    return len(created)


def seed_store(store: FeatureStore, config: dict) -> None:
    seed_scoring_criteria(store)
    admin = ensure_admin_user(
        store,
        username=config["ADMIN_USERNAME"],
        password=config["ADMIN_PASSWORD"],
        name=config["ADMIN_NAME"],
    )
    if config.get("SEED_DEMO_DATA"):
        seed_demo_data(store, created_by_id=admin.id)
