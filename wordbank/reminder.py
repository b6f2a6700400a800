"""
Review reminder state.

Polls the due count and keeps a small banner state for the caller to show.
Scheduling the polls is up to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from loguru import logger

from wordbank.errors import WordbankError
from wordbank.review.engine import ReviewEngine


@dataclass
class ReminderState:
    count: int = 0
    message: str = ""
    show: bool = False


class ReviewReminder:
    def __init__(self, engine: ReviewEngine):
        self.engine = engine
        self.state = ReminderState()

    def check_due_words(self, now: Optional[datetime] = None) -> ReminderState:
        """
        Refresh the reminder from the current due count.

        A failed lookup is logged and leaves the previous state untouched.
        """
        try:
            count = self.engine.get_due_count(now)
        except WordbankError as exc:
            logger.error(f"Failed to check review reminder: {exc}")
            return self.state

        self.state.count = count
        if count > 0:
            self.state.message = f"You have {count} words due for review"
            self.state.show = True
        else:
            self.state.show = False

        logger.debug(f"Checked review reminder: count={count}")
        return self.state

    def dismiss(self) -> None:
        self.state.show = False

    @property
    def has_due_words(self) -> bool:
        return self.state.count > 0
