"""
Metric computations for progress statistics.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pandas as pd

from wordbank.analytics.types import LearningTrend, QuizScoreTrend

MS_PER_MINUTE = 60 * 1000


def round_minutes(total_ms: int) -> int:
    """Milliseconds to whole minutes, rounding halves up."""
    return int((int(total_ms) + MS_PER_MINUTE // 2) // MS_PER_MINUTE)


def session_minutes(sessions_df: pd.DataFrame) -> pd.Series:
    """
    Rounded minutes per session.
    """
    if sessions_df.empty:
        return pd.Series(dtype="int64")
    return ((sessions_df["duration_ms"] + MS_PER_MINUTE // 2) // MS_PER_MINUTE).astype("int64")


def since(df: pd.DataFrame, column: str, cutoff: datetime) -> pd.DataFrame:
    """Rows whose timestamp column is at or after the cutoff."""
    if df.empty:
        return df
    return df[df[column] >= pd.Timestamp(cutoff)]


def compute_total_study_minutes(sessions_df: pd.DataFrame) -> int:
    """
    Total study time over ended sessions, rounded once at the end.
    """
    if sessions_df.empty:
        return 0
    return round_minutes(sessions_df["duration_ms"].sum())


def compute_learning_trends(sessions_df: pd.DataFrame) -> list[LearningTrend]:
    """
    Per-day study minutes (sum of per-session rounded minutes) and word
    counts, sorted by date.
    """
    if sessions_df.empty:
        return []

    scoped = sessions_df.assign(minutes=session_minutes(sessions_df))
    daily = scoped.groupby("day").agg(
        minutes=("minutes", "sum"),
        word_count=("word_count", "sum"),
    ).sort_index()

    return [
        LearningTrend(date=str(day), minutes=int(row["minutes"]), word_count=int(row["word_count"]))
        for day, row in daily.iterrows()
    ]


def compute_quiz_score_trends(quizzes_df: pd.DataFrame) -> list[QuizScoreTrend]:
    """
    Per-day average quiz score (rounded half up) and quiz count.
    """
    if quizzes_df.empty:
        return []

    daily = quizzes_df.groupby("day").agg(
        total=("score_percent", "sum"),
        quiz_count=("score_percent", "count"),
    ).sort_index()

    trends = []
    for day, row in daily.iterrows():
        total = int(row["total"])
        count = int(row["quiz_count"])
        trends.append(QuizScoreTrend(
            date=str(day),
            score=(2 * total + count) // (2 * count),
            quiz_count=count,
        ))
    return trends


def compute_streak(activity_days: set[date], today: date) -> int:
    """
    Consecutive activity days ending today.

    If there is no activity yet today the streak may still end yesterday.
    """
    if not activity_days:
        return 0

    day = today if today in activity_days else today - timedelta(days=1)
    streak = 0
    while day in activity_days:
        streak += 1
        day -= timedelta(days=1)
    return streak
