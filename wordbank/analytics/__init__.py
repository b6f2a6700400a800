"""
Analytics package exports.
"""

from wordbank.analytics.service import ProgressService, StatisticsService, StreakService
from wordbank.analytics.types import LearningTrend, QuizScoreTrend

__all__ = [
    "LearningTrend",
    "ProgressService",
    "QuizScoreTrend",
    "StatisticsService",
    "StreakService",
]
