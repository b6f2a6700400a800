"""
Tests for quiz generation, answers and scoring.
Run: pytest tests/test_quizzes.py -v
"""
import random

import pytest

from tests.conftest import T0
from wordbank.errors import NotFoundError, ValidationError
from wordbank.quizzes import (
    FILLER_CHOICE,
    PerformanceLevel,
    QuizService,
    get_performance_level,
    is_passing,
    score_percent,
)
from wordbank.schemas import QuizMode


@pytest.fixture
def library(make_word):
    return [
        make_word("Apple", definition_zh="蘋果"),
        make_word("pear", definition_zh="梨"),
        make_word("plum", definition_zh="李子"),
    ]


class TestScoringHelpers:

    @pytest.mark.parametrize("correct,total,expected", [
        (0, 0, 0), (0, 3, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (3, 3, 100),
    ])
    def test_score_percent_rounds_half_up(self, correct, total, expected):
        assert score_percent(correct, total) == expected

    def test_passing_threshold(self):
        assert is_passing(70)
        assert not is_passing(69)

    @pytest.mark.parametrize("score,level", [
        (100, PerformanceLevel.EXCELLENT), (90, PerformanceLevel.EXCELLENT),
        (89, PerformanceLevel.GOOD), (70, PerformanceLevel.GOOD),
        (69, PerformanceLevel.FAIR), (50, PerformanceLevel.FAIR),
        (49, PerformanceLevel.POOR), (0, PerformanceLevel.POOR),
    ])
    def test_performance_level(self, score, level):
        assert get_performance_level(score) == level


class TestGenerateQuiz:

    def test_multiple_choice(self, app, library):
        quiz = app.quiz.generate_quiz(QuizMode.MULTIPLE_CHOICE, [w.id for w in library])

        assert app.quizzes.get_by_id(quiz.id) == quiz
        assert quiz.created_at == T0
        questions = app.quiz.get_questions(quiz.id)
        assert {q.id for q in questions} == set(quiz.question_ids)

        apple = next(q for q in questions if q.word_id == library[0].id)
        assert apple.correct_answer == "蘋果"
        assert sorted(apple.choices) == sorted(["蘋果", "梨", "李子", FILLER_CHOICE])
        assert '"Apple"' in apple.prompt

    def test_spell_and_fill_in_answers(self, app, library):
        spell = app.quiz.generate_quiz("spell", [library[0].id])
        fill_in = app.quiz.generate_quiz("fill-in", [library[0].id])

        assert app.quiz.get_questions(spell.id)[0].correct_answer == "apple"
        question = app.quiz.get_questions(fill_in.id)[0]
        assert question.correct_answer == "Apple"
        assert question.choices == []

    def test_unknown_ids_are_skipped(self, app, library):
        quiz = app.quiz.generate_quiz("spell", [library[1].id, "missing"])
        assert len(quiz.question_ids) == 1

    def test_no_words(self, app, library):
        with pytest.raises(ValidationError):
            app.quiz.generate_quiz("spell", [])
        with pytest.raises(ValidationError):
            app.quiz.generate_quiz("spell", ["missing"])
        assert app.quizzes.count() == 0

    def test_seeded_choice_order_is_repeatable(self, app, library):
        ids = [w.id for w in library]
        first = QuizService(app.words, app.quizzes, rng=random.Random(7)).generate_quiz("multiple-choice", ids)
        second = QuizService(app.words, app.quizzes, rng=random.Random(7)).generate_quiz("multiple-choice", ids)

        def choices(quiz):
            return {q.word_id: q.choices for q in app.quiz.get_questions(quiz.id)}

        assert choices(first) == choices(second)


class TestAnswersAndScore:

    def test_submit_answer_ignores_case_and_whitespace(self, app, library):
        quiz = app.quiz.generate_quiz("spell", [library[0].id])
        question_id = quiz.question_ids[0]

        assert app.quiz.submit_answer(question_id, "  APPLE ") is True
        stored = app.quizzes.get_question_by_id(question_id)
        assert stored.user_answer == "  APPLE "
        assert stored.is_correct is True

        assert app.quiz.submit_answer(question_id, "aple") is False
        assert app.quizzes.get_question_by_id(question_id).is_correct is False

    def test_submit_unknown_question(self, app):
        with pytest.raises(NotFoundError):
            app.quiz.submit_answer("missing", "x")

    def test_score_written_back_to_quiz(self, app, library):
        quiz = app.quiz.generate_quiz("spell", [w.id for w in library])
        questions = {q.word_id: q for q in app.quiz.get_questions(quiz.id)}
        app.quiz.submit_answer(questions[library[0].id].id, "apple")
        app.quiz.submit_answer(questions[library[1].id].id, "pear")
        app.quiz.submit_answer(questions[library[2].id].id, "plumb")

        score = app.quiz.calculate_detailed_score(quiz.id)
        assert score.total_questions == 3
        assert score.correct_answers == 2
        assert score.incorrect_answers == 1
        assert score.score_percent == 67
        assert score.incorrect_question_ids == [questions[library[2].id].id]
        assert app.quizzes.get_by_id(quiz.id).score_percent == 67
        assert app.quiz.is_passing(quiz.id) is False

    def test_empty_quiz_scores_zero(self, app):
        assert app.quiz.calculate_score("missing") == 0

    def test_scores_feed_quiz_trends(self, app, library):
        quiz = app.quiz.generate_quiz("spell", [library[0].id])
        app.quiz.submit_answer(quiz.question_ids[0], "apple")
        app.quiz.calculate_score(quiz.id)

        trends = app.statistics.aggregate_quiz_scores(now=T0)
        assert [(t.date, t.score, t.quiz_count) for t in trends] == [("2024-03-10", 100, 1)]
