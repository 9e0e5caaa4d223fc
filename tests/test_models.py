"""Tests for data model classes."""
from datetime import datetime

import pytest

from prost_reader.models import Completion, Option, Progress, Question, VocabularyWord
from conftest import make_exam, make_question


def test_question_is_correct():
    q = make_question("q1", correct=1)
    assert q.is_correct("q1-o1")
    assert not q.is_correct("q1-o0")
    assert not q.is_correct(None)


def test_question_correct_option():
    q = make_question("q1", correct=1)
    assert q.correct_option.text == "Option 1"


def test_question_rejects_foreign_correct_option():
    options = (Option(id="a", text="Richtig"), Option(id="b", text="Falsch"))
    with pytest.raises(ValueError):
        Question(id="q", prompt="?", options=options, correct_option_id="c")


def test_exam_total_questions_is_sum_of_parts():
    exam = make_exam(part_sizes=(5, 4, 6))
    assert exam.total_questions == 15
    assert len(exam.all_questions) == 15


def test_exam_part_lookup_and_range():
    exam = make_exam()
    assert exam.part(2).part_number == 2
    assert exam.part(2).question_range == "Questions 6-10"
    assert exam.part(4) is None


def test_completion_clamps_score_and_attempt():
    c = Completion(id="c", user_id="u", subject_id="s", level="A1", score=1.4,
                   completed_at=datetime(2025, 1, 1), attempt_number=0)
    assert c.score == 1.0
    assert c.attempt_number == 1
    assert c.is_perfect
    low = Completion(id="d", user_id="u", subject_id="s", level="A1", score=-0.2,
                     completed_at=datetime(2025, 1, 1), attempt_number=2)
    assert low.score == 0.0


def test_completion_score_percentage_truncates():
    c = Completion(id="c", user_id="u", subject_id="s", level="A1", score=2 / 3,
                   completed_at=datetime(2025, 1, 1), attempt_number=1)
    assert c.score_percentage == 66


def test_completion_time_spent_formatted():
    c = Completion(id="c", user_id="u", subject_id="s", level="A1", score=0.8,
                   completed_at=datetime(2025, 1, 1), attempt_number=1, time_spent=1350)
    assert c.time_spent_formatted == "22:30"
    no_time = Completion(id="d", user_id="u", subject_id="s", level="A1", score=0.8,
                         completed_at=datetime(2025, 1, 1), attempt_number=1)
    assert no_time.time_spent_formatted is None


def test_progress_defaults():
    p = Progress(user_id="u", level="B1")
    assert p.completed_count == 0
    assert p.total_attempts == 0
    assert p.average_score == 0.0
    assert p.last_activity_at is None
    assert p.part_average(1) == 0.0


def test_vocabulary_word_defaults():
    w = VocabularyWord(id=1, user_id="u", word="Haus", context="Das Haus", source_passage_id="p",
                       source_passage_title="T", level="A1", added_at="2025-01-01T00:00:00")
    assert w.notes is None
    assert w.is_favorite is False
