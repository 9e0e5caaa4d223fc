# tests/test_quiz.py
from prost_reader.quiz import grade_exam, grade_passage, is_passing_score, score_percentage
from conftest import answers_for, make_exam, make_passage


def test_grade_passage_two_of_three():
    passage = make_passage(n_questions=3)
    result = grade_passage(passage, answers_for(passage.questions, 2))
    assert result.correct_count == 2
    assert result.score == 2 / 3
    assert result.score_percentage == 66


def test_grade_passage_missing_answers_are_incorrect():
    passage = make_passage(n_questions=3)
    q = passage.questions[0]
    result = grade_passage(passage, {q.id: q.correct_option_id})
    assert result.correct_count == 1
    assert result.total_count == 3
    missing = result.question_results[1]
    assert missing.selected_option_id is None
    assert missing.selected_option_text is None
    assert missing.correct_option_text == "Option 0"


def test_grade_passage_no_answers():
    passage = make_passage(n_questions=2)
    assert grade_passage(passage, {}).score == 0.0


def test_grade_exam_part_scores():
    exam = make_exam()
    answers = answers_for(exam.part(1).questions, 5)
    answers.update(answers_for(exam.part(2).questions, 3))
    answers.update(answers_for(exam.part(3).questions, 1))
    result = grade_exam(exam, answers)
    assert result.part_scores == {1: 1.0, 2: 0.6, 3: 0.2}
    assert result.correct_count == 9
    assert result.overall_score == 0.6
    assert result.overall_score_percentage == 60
    assert result.is_passed


def test_grade_exam_uses_raw_counts_not_part_average():
    exam = make_exam(part_sizes=(2, 2, 6))
    answers = answers_for(exam.part(1).questions, 2)
    answers.update(answers_for(exam.part(2).questions, 2))
    answers.update(answers_for(exam.part(3).questions, 0))
    result = grade_exam(exam, answers)
    # 4/10 correct overall, while the mean of part scores would be 2/3.
    assert result.overall_score == 0.4
    assert not result.is_passed


def test_grade_exam_below_threshold():
    exam = make_exam()
    answers = answers_for(exam.all_questions, 8)
    result = grade_exam(exam, answers)
    assert result.overall_score_percentage == 53
    assert not result.is_passed


def test_pass_threshold_boundary():
    assert is_passing_score(0.60)
    assert is_passing_score(9 / 15)
    assert not is_passing_score(0.59)
    assert score_percentage(0.59) == 59
