# tests/test_dashboard.py
from prost_reader.catalog import save_exam, save_passage
from prost_reader.dashboard import (
    GoetheProgressEntry, LevelProgressEntry, build_dashboard, get_score_color, get_score_label, get_study_stats,
)
from prost_reader.db import init_db
from prost_reader.seed import seed_all, DEMO_USER_ID
from prost_reader.tracker import record_completion
from prost_reader.vocabulary import add_word
from conftest import answers_for, make_exam, make_passage


def test_dashboard_order_with_no_data(tmp_db):
    init_db(tmp_db)
    seed_all(tmp_db)
    entries = build_dashboard(tmp_db, DEMO_USER_ID)
    assert [e.title for e in entries] == ["Goethe-Zertifikat A1", "Level A2", "Level B1", "Level B2"]
    assert isinstance(entries[0], GoetheProgressEntry)
    assert all(isinstance(e, LevelProgressEntry) for e in entries[1:])
    assert all(e.status == "Not started" for e in entries)
    assert entries[0].exam_count == 1
    assert entries[1].passage_count == 2


def test_goethe_entry_status(tmp_db):
    init_db(tmp_db)
    exam = make_exam()
    save_exam(tmp_db, exam)
    record_completion(tmp_db, "u1", exam, answers_for(exam.all_questions, 5))
    assert build_dashboard(tmp_db, "u1")[0].status == "In progress"
    record_completion(tmp_db, "u1", exam, answers_for(exam.all_questions, 9))
    goethe = build_dashboard(tmp_db, "u1")[0]
    assert goethe.status == "Passed"
    assert goethe.progress.total_attempts == 2


def test_level_entry_counts_only_its_level(tmp_db):
    init_db(tmp_db)
    b1 = make_passage("b1", level="B1")
    save_passage(tmp_db, b1)
    record_completion(tmp_db, "u1", b1, answers_for(b1.questions, 3))
    by_title = {e.title: e for e in build_dashboard(tmp_db, "u1")}
    assert by_title["Level B1"].status == "In progress"
    assert by_title["Level B1"].progress.best_score == 1.0
    assert by_title["Level A2"].status == "Not started"
    assert by_title["Goethe-Zertifikat A1"].progress.total_attempts == 0


def test_score_label():
    assert get_score_label(85) == "EXCELLENT"
    assert get_score_label(60) == "PASSING"
    assert get_score_label(45) == "NEEDS WORK"
    assert get_score_label(10) == "NOT YET"


def test_score_color():
    assert get_score_color(80) == "green"
    assert get_score_color(59) == "dark_orange"
    assert get_score_color(0) == "red"


def test_study_stats_empty(tmp_db):
    init_db(tmp_db)
    stats = get_study_stats(tmp_db, "u1")
    assert stats == {
        "passages_completed": 0, "exams_taken": 0, "total_attempts": 0, "avg_score": 0.0, "words_saved": 0,
    }


def test_study_stats_with_data(tmp_db):
    init_db(tmp_db)
    passage = make_passage(n_questions=2)
    exam = make_exam(part_sizes=(2, 2))
    record_completion(tmp_db, "u1", passage, answers_for(passage.questions, 2))
    record_completion(tmp_db, "u1", passage, answers_for(passage.questions, 1))
    record_completion(tmp_db, "u1", exam, answers_for(exam.all_questions, 0))
    add_word(tmp_db, "u1", "Haus", "ctx", passage)
    stats = get_study_stats(tmp_db, "u1")
    assert stats["passages_completed"] == 1
    assert stats["exams_taken"] == 1
    assert stats["total_attempts"] == 3
    assert stats["avg_score"] == 50.0
    assert stats["words_saved"] == 1
