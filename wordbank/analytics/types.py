"""
Types for progress statistics.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LearningTrend:
    """Study time and words touched on one UTC day."""
    date: str  # YYYY-MM-DD
    minutes: int
    word_count: int


@dataclass(frozen=True)
class QuizScoreTrend:
    """Average quiz score on one UTC day."""
    date: str  # YYYY-MM-DD
    score: int
    quiz_count: int
