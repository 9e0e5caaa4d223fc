# tests/test_integration.py
"""End-to-end test of the core reading workflow."""
from datetime import datetime, timedelta

from prost_reader.catalog import get_exams, get_passages
from prost_reader.dashboard import build_dashboard, get_study_stats
from prost_reader.db import init_db
from prost_reader.filters import CompletionFilter, PassageFilters, SortOption, apply_filters, load_filters, save_filters
from prost_reader.progress import FirstAttempt, Improved
from prost_reader.seed import DEMO_USER_ID, seed_all
from prost_reader.tracker import compare_with_previous, get_completion_info, get_progress, record_completion
from prost_reader.vocabulary import add_word, get_user_words
from conftest import answers_for

T0 = datetime(2025, 12, 13, 9, 0)


def test_full_reading_workflow(tmp_db):
    """Seed, read passages, take the exam, then check dashboard, filters and vocabulary."""
    init_db(tmp_db)
    seed_all(tmp_db)
    user = DEMO_USER_ID

    # Read an A2 passage twice
    berlin = next(p for p in get_passages(tmp_db, level="A2") if p.title == "Ein Tag in Berlin")
    first, _ = record_completion(tmp_db, user, berlin, answers_for(berlin.questions, 1), completed_at=T0)
    assert compare_with_previous(tmp_db, user, berlin.id, first.score, exclude_id=first.id) == FirstAttempt()
    second, progress = record_completion(
        tmp_db, user, berlin, answers_for(berlin.questions, len(berlin.questions)),
        completed_at=T0 + timedelta(hours=1),
    )
    assert second.attempt_number == 2
    assert isinstance(compare_with_previous(tmp_db, user, berlin.id, second.score, exclude_id=second.id), Improved)
    assert progress.completed_ids == (berlin.id,)
    assert progress.total_attempts == 2
    assert progress.best_score == 1.0
    assert progress.latest_score == 1.0

    # Take the Goethe exam and pass
    exam = get_exams(tmp_db, level="A1")[0]
    result, exam_progress = record_completion(tmp_db, user, exam, answers_for(exam.all_questions, 12))
    assert result.is_passed
    assert set(result.part_scores) == {1, 2, 3}
    assert exam_progress.kind == "exam"
    assert get_progress(tmp_db, user, "A1", kind="passage").total_attempts == 0

    dashboard = build_dashboard(tmp_db, user)
    assert [e.status for e in dashboard] == ["Passed", "In progress", "Not started", "Not started"]

    # Filters: only the untouched A2 passage remains
    filters = PassageFilters(completion_filter=CompletionFilter.INCOMPLETE, sort_option=SortOption.BEST_SCORE)
    save_filters(tmp_db, filters)
    info = get_completion_info(tmp_db, user, kind="passage")
    remaining = apply_filters(get_passages(tmp_db, level="A2"), load_filters(tmp_db), info)
    assert [p.title for p in remaining] == ["Ein Wochenende in München"]

    # Vocabulary
    assert add_word(tmp_db, user, "Stadt", berlin.text, berlin)
    assert not add_word(tmp_db, user, "stadt", berlin.text, berlin)
    assert [w.word for w in get_user_words(tmp_db, user)] == ["Stadt"]

    stats = get_study_stats(tmp_db, user)
    assert stats["passages_completed"] == 1
    assert stats["exams_taken"] == 1
    assert stats["total_attempts"] == 3
    assert stats["words_saved"] == 1
