"""
Review Scheduling Constants

Interval bounds for the simplified spaced-repetition policy. Growth is
linear with a clamp, not a multiplicative ease factor.
"""

from datetime import timedelta

DAY = timedelta(days=1)

# ---- Mastered words ----
# interval = clamp(days_since * MASTERED_GROWTH, MASTERED_MIN_DAYS, MASTERED_MAX_DAYS)
MASTERED_GROWTH = 2
MASTERED_MIN_DAYS = 7
MASTERED_MAX_DAYS = 30

# ---- Learning words (not flagged) ----
# interval = clamp(days_since + 1, LEARNING_MIN_DAYS, LEARNING_MAX_DAYS)
LEARNING_MIN_DAYS = 1
LEARNING_MAX_DAYS = 7

# ---- Flat intervals ----
FLAGGED_INTERVAL_DAYS = 1    # learning + needs_review
UNLEARNED_INTERVAL_DAYS = 1
FAILURE_INTERVAL_DAYS = 1    # any failed review
