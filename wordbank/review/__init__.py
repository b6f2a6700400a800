"""
Review - Spaced Repetition Scheduling

Quick start:
    from wordbank import review

    # Pure policy (no I/O)
    due_at = review.compute_next_due_date(word, now)
    updated = review.apply_review_outcome(word, success=True, now=now)

    # Against the repository
    engine = review.ReviewEngine(word_repository)
    engine.record_review_outcome(word.id, success=False)
    engine.get_due_count()
"""

# Pure policy
from wordbank.review.scheduling import (
    apply_review_outcome,
    compute_interval_days,
    compute_next_due_date,
    days_since_studied,
    get_due_count,
    get_due_words,
    is_due,
)

# Repository-backed engine
from wordbank.review.engine import ReviewEngine

# Interval bounds
from wordbank.review.constants import (
    MASTERED_MIN_DAYS,
    MASTERED_MAX_DAYS,
    LEARNING_MIN_DAYS,
    LEARNING_MAX_DAYS,
    FAILURE_INTERVAL_DAYS,
)


__all__ = [
    "apply_review_outcome",
    "compute_interval_days",
    "compute_next_due_date",
    "days_since_studied",
    "get_due_count",
    "get_due_words",
    "is_due",
    "ReviewEngine",
    "MASTERED_MIN_DAYS",
    "MASTERED_MAX_DAYS",
    "LEARNING_MIN_DAYS",
    "LEARNING_MAX_DAYS",
    "FAILURE_INTERVAL_DAYS",
]
