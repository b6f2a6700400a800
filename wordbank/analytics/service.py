"""
Service layer for statistics, streaks and the progress snapshot.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Union

from loguru import logger

from wordbank.analytics.metrics import (
    compute_learning_trends,
    compute_quiz_score_trends,
    compute_streak,
    compute_total_study_minutes,
    round_minutes,
    since,
)
from wordbank.analytics.queries import load_ended_sessions_df, load_quizzes_df
from wordbank.analytics.types import LearningTrend, QuizScoreTrend
from wordbank.clock import ensure_utc, parse_day, utc_now
from wordbank.repos import ProgressRepository, QuizRepository
from wordbank.schemas import UserProgress, WordStatus
from wordbank.sessions import LearningSessionRepository
from wordbank.word_repo import WordRepository


def _resolve(now: Optional[datetime]) -> datetime:
    return ensure_utc(now) if now is not None else utc_now()


class StatisticsService:
    """Time-bucketed study statistics over ended sessions and quizzes."""

    def __init__(self, sessions: LearningSessionRepository, quizzes: QuizRepository):
        self.sessions = sessions
        self.quizzes = quizzes

    def aggregate_learning_trends(self, days: int = 30, now: Optional[datetime] = None) -> list[LearningTrend]:
        """
        Per-day study minutes and word counts over the last `days` days.

        Sessions are bucketed by the UTC day they ended on.
        """
        cutoff = _resolve(now) - timedelta(days=days)
        sessions_df = since(load_ended_sessions_df(self.sessions), "ended_at", cutoff)
        return compute_learning_trends(sessions_df)

    def aggregate_quiz_scores(self, days: int = 30, now: Optional[datetime] = None) -> list[QuizScoreTrend]:
        """Per-day average quiz score over the last `days` days."""
        cutoff = _resolve(now) - timedelta(days=days)
        quizzes_df = since(load_quizzes_df(self.quizzes), "created_at", cutoff)
        return compute_quiz_score_trends(quizzes_df)

    def get_daily_activity(self, day: Union[str, date]) -> int:
        """Minutes studied on one UTC day."""
        key = parse_day(day).isoformat()
        sessions_df = load_ended_sessions_df(self.sessions)
        if sessions_df.empty:
            return 0
        return round_minutes(sessions_df.loc[sessions_df["day"] == key, "duration_ms"].sum())

    def get_heatmap_data(self, days: int = 365, now: Optional[datetime] = None) -> dict[str, int]:
        """
        Study minutes per day for the calendar heatmap.

        Returns:
            {YYYY-MM-DD: minutes}, only days with ended sessions
        """
        return {t.date: t.minutes for t in self.aggregate_learning_trends(days=days, now=now)}

    def get_total_study_minutes(self) -> int:
        return compute_total_study_minutes(load_ended_sessions_df(self.sessions))

    def get_activity_days(self) -> set[date]:
        """UTC days with at least one ended session."""
        sessions_df = load_ended_sessions_df(self.sessions)
        return {date.fromisoformat(day) for day in sessions_df["day"].unique()}


class StreakService:
    """Consecutive-day study streak."""

    def __init__(self, statistics: StatisticsService, progress: Optional[ProgressRepository] = None):
        self.statistics = statistics
        self.progress = progress

    def calculate_streak(self, now: Optional[datetime] = None) -> int:
        today = _resolve(now).date()
        return compute_streak(self.statistics.get_activity_days(), today)

    def has_activity_today(self, now: Optional[datetime] = None) -> bool:
        return _resolve(now).date() in self.statistics.get_activity_days()

    def update_streak(self, now: Optional[datetime] = None) -> int:
        """
        Recalculate the streak and store it on the progress snapshot, if one exists.

        Returns:
            The current streak in days
        """
        streak = self.calculate_streak(now)
        if self.progress is not None:
            current = self.progress.get()
            if current is not None and current.streak_days != streak:
                self.progress.update(current.model_copy(update={"streak_days": streak}))
                logger.debug(f"Streak updated to {streak} days")
        return streak


class ProgressService:
    """Builds and stores the UserProgress snapshot."""

    def __init__(
        self,
        words: WordRepository,
        progress: ProgressRepository,
        statistics: StatisticsService,
        streak: StreakService
    ):
        self.words = words
        self.progress = progress
        self.statistics = statistics
        self.streak = streak

    def calculate_progress(self, now: Optional[datetime] = None) -> UserProgress:
        """
        Rebuild the progress snapshot from words and sessions.

        last_activity_at is the latest last_studied_at across the library;
        with nothing studied it keeps the stored value (or now).
        """
        now = _resolve(now)
        words = self.words.get_all()
        current = self.progress.get()

        studied = [w.last_studied_at for w in words if w.last_studied_at is not None]
        if studied:
            last_activity_at = max(studied)
        elif current is not None:
            last_activity_at = current.last_activity_at
        else:
            last_activity_at = now

        return UserProgress(
            total_words=len(words),
            mastered_words=sum(1 for w in words if w.status == WordStatus.MASTERED.value),
            streak_days=self.streak.calculate_streak(now),
            total_study_minutes=self.statistics.get_total_study_minutes(),
            last_activity_at=last_activity_at,
            heatmap=self.statistics.get_heatmap_data(days=365, now=now),
        )

    def refresh_progress(self, now: Optional[datetime] = None) -> UserProgress:
        """Recalculate and persist the snapshot."""
        snapshot = self.calculate_progress(now)
        self.progress.save(snapshot)
        logger.info(
            f"Progress refreshed: {snapshot.mastered_words}/{snapshot.total_words} mastered, "
            f"streak={snapshot.streak_days}, minutes={snapshot.total_study_minutes}"
        )
        return snapshot
