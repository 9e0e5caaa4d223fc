import pytest

from prost_reader.models import Exam, ExamPart, Option, Passage, Question


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_prost.db")
    return db_path


def make_question(qid: str, correct: int = 0, n_options: int = 2, number: int = 0) -> Question:
    options = tuple(Option(id=f"{qid}-o{i}", text=f"Option {i}") for i in range(n_options))
    return Question(id=qid, prompt=f"Prompt {qid}", options=options,
                    correct_option_id=options[correct].id, number=number)


def make_passage(pid: str = "p1", title: str = "Passage", level: str = "A2", n_questions: int = 3, tags=()) -> Passage:
    questions = tuple(make_question(f"{pid}-q{i}", n_options=3) for i in range(n_questions))
    return Passage(id=pid, title=title, level=level, text="Text", questions=questions, tags=tuple(tags))


def make_exam(eid: str = "e1", part_sizes=(5, 5, 5), level: str = "A1") -> Exam:
    parts = []
    number = 1
    for part_number, size in enumerate(part_sizes, 1):
        questions = []
        for _ in range(size):
            questions.append(make_question(f"{eid}-q{number}", number=number))
            number += 1
        parts.append(ExamPart(
            id=f"{eid}-part{part_number}", part_number=part_number, title=f"Part {part_number}",
            instructions="Lesen Sie.", text_type="informal_texts", texts=(), questions=tuple(questions),
        ))
    return Exam(id=eid, title=f"Exam {eid}", parts=tuple(parts), level=level)


def answers_for(questions, correct_count: int) -> dict:
    """Answer the first ``correct_count`` questions correctly and the rest wrongly."""
    answers = {}
    for i, q in enumerate(questions):
        if i < correct_count:
            answers[q.id] = q.correct_option_id
        else:
            answers[q.id] = next(o.id for o in q.options if o.id != q.correct_option_id)
    return answers


@pytest.fixture
def passage():
    return make_passage()


@pytest.fixture
def exam():
    return make_exam()
