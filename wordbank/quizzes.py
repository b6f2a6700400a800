"""
Quizzes - Generation, Answers and Scoring

Builds a quiz from a set of words, records answers question by question and
writes the final score back onto the quiz record.

Scores are whole percentages, rounded half up.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable, Optional, Union

from loguru import logger

from wordbank.clock import ensure_utc, utc_now
from wordbank.errors import NotFoundError, ValidationError
from wordbank.repos import QuizRepository
from wordbank.schemas import Quiz, QuizMode, QuizQuestion, Word
from wordbank.word_repo import WordRepository

PASSING_SCORE = 70
WRONG_CHOICES = 3
FILLER_CHOICE = "其他選項"


class PerformanceLevel(str, Enum):
    EXCELLENT = "excellent"  # >= 90
    GOOD = "good"            # >= 70
    FAIR = "fair"            # >= 50
    POOR = "poor"


@dataclass(frozen=True)
class QuizScore:
    total_questions: int
    correct_answers: int
    incorrect_answers: int
    score_percent: int
    incorrect_question_ids: list[str] = field(default_factory=list)


def score_percent(correct: int, total: int) -> int:
    """round(correct / total * 100), half up; 0 for an empty quiz."""
    if total <= 0:
        return 0
    return (200 * correct + total) // (2 * total)


def is_passing(score: int) -> bool:
    return score >= PASSING_SCORE


def get_performance_level(score: int) -> PerformanceLevel:
    if score >= 90:
        return PerformanceLevel.EXCELLENT
    if score >= PASSING_SCORE:
        return PerformanceLevel.GOOD
    if score >= 50:
        return PerformanceLevel.FAIR
    return PerformanceLevel.POOR


def _normalize_answer(answer: str) -> str:
    return answer.strip().lower()


class QuizService:
    """
    Quiz lifecycle over the word and quiz repositories.

    The random source is injectable so choice order can be fixed in tests.
    """

    def __init__(
        self,
        words: WordRepository,
        quizzes: QuizRepository,
        clock: Callable[[], datetime] = utc_now,
        rng: Optional[random.Random] = None
    ):
        self.words = words
        self.quizzes = quizzes
        self._clock = clock
        self._rng = rng or random.Random()

    # ---- Generation ----

    def generate_quiz(self, mode: Union[QuizMode, str], word_ids: Iterable[str]) -> Quiz:
        """
        Create a quiz with one question per word.

        Unknown word ids are skipped.

        Raises:
            ValidationError: if no word ids are given or none resolve
        """
        mode = QuizMode(mode)
        word_ids = list(word_ids)
        if not word_ids:
            raise ValidationError("Cannot generate a quiz with no words", field="word_ids")

        words = [w for w in (self.words.get_by_id(i) for i in word_ids) if w is not None]
        if not words:
            raise ValidationError("No valid words found for quiz generation", field="word_ids")

        quiz = Quiz(mode=mode, created_at=ensure_utc(self._clock()))
        questions = [self._build_question(quiz.id, mode, word, words) for word in words]

        for question in questions:
            self.quizzes.create_question(question)
        quiz = quiz.model_copy(update={"question_ids": [q.id for q in questions]})
        self.quizzes.create(quiz)

        logger.info(f"Generated {mode.value} quiz {quiz.id} with {len(questions)} questions")
        return quiz

    def _build_question(self, quiz_id: str, mode: QuizMode, word: Word, pool: list[Word]) -> QuizQuestion:
        if mode == QuizMode.MULTIPLE_CHOICE:
            wrong = [
                w.definition_zh for w in pool
                if w.id != word.id and w.definition_zh.strip()
            ][:WRONG_CHOICES]
            wrong += [FILLER_CHOICE] * (WRONG_CHOICES - len(wrong))
            choices = [word.definition_zh, *wrong]
            self._rng.shuffle(choices)
            return QuizQuestion(
                quiz_id=quiz_id,
                word_id=word.id,
                prompt=f'What is the Chinese meaning of "{word.lemma}"?',
                choices=choices,
                correct_answer=word.definition_zh,
            )

        if mode == QuizMode.FILL_IN:
            return QuizQuestion(
                quiz_id=quiz_id,
                word_id=word.id,
                prompt=f'Fill in the blank: "{word.definition_zh}" means _____ in English.',
                correct_answer=word.lemma,
            )

        return QuizQuestion(
            quiz_id=quiz_id,
            word_id=word.id,
            prompt=f'Spell the word that means "{word.definition_zh}":',
            correct_answer=word.lemma.lower(),
        )

    # ---- Answers ----

    def submit_answer(self, question_id: str, answer: str) -> bool:
        """
        Record an answer. Comparison ignores case and surrounding whitespace.

        Returns:
            Whether the answer is correct

        Raises:
            NotFoundError: if the question does not exist
        """
        question = self.quizzes.get_question_by_id(question_id)
        if question is None:
            raise NotFoundError("QuizQuestion", question_id)

        is_correct = _normalize_answer(answer) == _normalize_answer(question.correct_answer)
        self.quizzes.update_question(question.model_copy(update={
            "user_answer": answer,
            "is_correct": is_correct,
        }))

        logger.debug(f"Answer submitted for question {question_id}: correct={is_correct}")
        return is_correct

    def get_questions(self, quiz_id: str) -> list[QuizQuestion]:
        return self.quizzes.get_questions_by_quiz_id(quiz_id)

    # ---- Scoring ----

    def calculate_detailed_score(self, quiz_id: str) -> QuizScore:
        """
        Score a quiz and store score_percent on it (when the quiz exists).
        """
        questions = self.get_questions(quiz_id)
        correct = sum(1 for q in questions if q.is_correct)
        score = QuizScore(
            total_questions=len(questions),
            correct_answers=correct,
            incorrect_answers=len(questions) - correct,
            score_percent=score_percent(correct, len(questions)),
            incorrect_question_ids=[q.id for q in questions if not q.is_correct],
        )

        quiz = self.quizzes.get_by_id(quiz_id)
        if quiz is not None:
            self.quizzes.update(quiz.model_copy(update={"score_percent": score.score_percent}))

        logger.info(f"Quiz {quiz_id} scored {score.score_percent}% ({correct}/{len(questions)})")
        return score

    def calculate_score(self, quiz_id: str) -> int:
        return self.calculate_detailed_score(quiz_id).score_percent

    def is_passing(self, quiz_id: str) -> bool:
        return is_passing(self.calculate_score(quiz_id))
