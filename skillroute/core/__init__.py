"""
Core Module - Shared records, errors and mastery math.

Components:
- models: Typed records (ReviewItem, AnswerEvent, ReviewStats, SkillSummary)
- errors: Engine error taxonomy
- mastery: Proficiency estimator and skill status classifier
- feature_flags: Explicit, expiring feature-flag cache
"""

from skillroute.core.errors import (
    InvalidReviewItemError,
    ReviewItemNotFoundError,
    SkillRouteError,
    StaleReviewItemError,
)
from skillroute.core.feature_flags import FeatureFlags, FlagCache, load_flags_from_env
from skillroute.core.mastery import (
    ProficiencyEstimator,
    SkillStatus,
    calculate_days_since,
    classify_skill,
    estimate_proficiency,
)
from skillroute.core.models import (
    AnswerEvent,
    QuizAnswer,
    ReviewItem,
    ReviewOutcome,
    ReviewStats,
    SkillSummary,
    SM2Result,
)

__all__ = [
    # Records
    "ReviewItem",
    "AnswerEvent",
    "QuizAnswer",
    "SM2Result",
    "ReviewOutcome",
    "ReviewStats",
    "SkillSummary",
    # Errors
    "SkillRouteError",
    "ReviewItemNotFoundError",
    "StaleReviewItemError",
    "InvalidReviewItemError",
    # Mastery
    "ProficiencyEstimator",
    "SkillStatus",
    "calculate_days_since",
    "classify_skill",
    "estimate_proficiency",
    # Flags
    "FeatureFlags",
    "FlagCache",
    "load_flags_from_env",
]
