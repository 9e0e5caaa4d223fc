"""Grading of passage and exam attempts."""
from prost_reader.models import (
    PASS_THRESHOLD_PERCENT, Exam, ExamResult, Passage, PartResult, QuestionResult,
)


def score_percentage(score: float) -> int:
    return int(score * 100)


def is_passing_score(score: float) -> bool:
    return score_percentage(score) >= PASS_THRESHOLD_PERCENT


def grade_questions(questions, answers: dict) -> tuple:
    """Pair each question with the chosen option. A missing answer counts as incorrect."""
    return tuple(QuestionResult(question=q, selected_option_id=answers.get(q.id)) for q in questions)


def grade_passage(passage: Passage, answers: dict) -> PartResult:
    return PartResult(part_number=1, question_results=grade_questions(passage.questions, answers))


def grade_exam(exam: Exam, answers: dict) -> ExamResult:
    parts = tuple(
        PartResult(part_number=p.part_number, question_results=grade_questions(p.questions, answers))
        for p in exam.parts
    )
    return ExamResult(exam_id=exam.id, part_results=parts)
