"""
Data-loading helpers for statistics.
"""

from __future__ import annotations

import pandas as pd

from wordbank.clock import day_key
from wordbank.repos import QuizRepository
from wordbank.sessions import LearningSessionRepository

SESSION_COLUMNS = ["session_id", "type", "word_count", "duration_ms", "ended_at", "day"]
QUIZ_COLUMNS = ["quiz_id", "created_at", "day", "score_percent"]


def load_ended_sessions_df(sessions: LearningSessionRepository) -> pd.DataFrame:
    """
    Load ended learning sessions into a dataframe (one row per session).

    Active sessions are excluded: their duration is not fixed yet.
    """
    rows = [
        {
            "session_id": s.id,
            "type": s.type,
            "word_count": len(s.word_ids),
            "duration_ms": s.duration_ms,
            "ended_at": s.ended_at,
            "day": day_key(s.ended_at),
        }
        for s in sessions.get_ended()
    ]
    if not rows:
        return pd.DataFrame(columns=SESSION_COLUMNS)

    df = pd.DataFrame(rows, columns=SESSION_COLUMNS)
    df["ended_at"] = pd.to_datetime(df["ended_at"], utc=True)
    df["duration_ms"] = df["duration_ms"].astype("int64")
    df["word_count"] = df["word_count"].astype("int64")
    return df.sort_values("ended_at").reset_index(drop=True)


def load_quizzes_df(quizzes: QuizRepository) -> pd.DataFrame:
    """
    Load quizzes into a dataframe (one row per quiz).
    """
    rows = [
        {
            "quiz_id": q.id,
            "created_at": q.created_at,
            "day": day_key(q.created_at),
            "score_percent": q.score_percent,
        }
        for q in quizzes.get_all()
    ]
    if not rows:
        return pd.DataFrame(columns=QUIZ_COLUMNS)

    df = pd.DataFrame(rows, columns=QUIZ_COLUMNS)
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True)
    df["score_percent"] = df["score_percent"].astype("int64")
    return df.sort_values("created_at").reset_index(drop=True)
