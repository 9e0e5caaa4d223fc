# tests/test_catalog.py
from prost_reader.catalog import (
    delete_exam, delete_passage, get_exam, get_exams, get_passage, get_passages, save_exam, save_passage,
)
from prost_reader.db import get_connection, init_db
from conftest import make_exam, make_passage


def count(db_path, table):
    conn = get_connection(db_path)
    n = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
    conn.close()
    return n


def test_save_and_get_passage(tmp_db):
    init_db(tmp_db)
    passage = make_passage("p1", tags=["travel", "food"])
    save_passage(tmp_db, passage)
    assert get_passage(tmp_db, "p1") == passage


def test_get_passage_unknown_returns_none(tmp_db):
    init_db(tmp_db)
    assert get_passage(tmp_db, "nope") is None
    assert get_exam(tmp_db, "nope") is None


def test_get_passages_keeps_insertion_order_and_filters(tmp_db):
    init_db(tmp_db)
    save_passage(tmp_db, make_passage("z", title="Zebra", level="A2", tags=["animals"]))
    save_passage(tmp_db, make_passage("a", title="Apfel", level="B1"))
    save_passage(tmp_db, make_passage("m", title="Mond", level="A2"))
    assert [p.id for p in get_passages(tmp_db)] == ["z", "a", "m"]
    assert [p.id for p in get_passages(tmp_db, level="A2")] == ["z", "m"]
    assert [p.id for p in get_passages(tmp_db, tag="animals")] == ["z"]


def test_save_passage_twice_replaces(tmp_db):
    init_db(tmp_db)
    save_passage(tmp_db, make_passage("p1", n_questions=3))
    save_passage(tmp_db, make_passage("p1", n_questions=2))
    assert len(get_passages(tmp_db)) == 1
    assert count(tmp_db, "questions") == 2


def test_save_and_get_exam(tmp_db):
    init_db(tmp_db)
    exam = make_exam()
    save_exam(tmp_db, exam)
    loaded = get_exam(tmp_db, exam.id)
    assert loaded == exam
    assert loaded.total_questions == 15
    assert [e.id for e in get_exams(tmp_db, level="A1")] == [exam.id]
    assert get_exams(tmp_db, level="B2") == []


def test_delete_exam_cascades(tmp_db):
    init_db(tmp_db)
    exam = make_exam()
    save_exam(tmp_db, exam)
    assert count(tmp_db, "options") == 30
    delete_exam(tmp_db, exam.id)
    assert get_exam(tmp_db, exam.id) is None
    for table in ("exam_parts", "exam_texts", "questions", "options"):
        assert count(tmp_db, table) == 0


def test_delete_passage_cascades(tmp_db):
    init_db(tmp_db)
    save_passage(tmp_db, make_passage("p1"))
    save_passage(tmp_db, make_passage("p2"))
    delete_passage(tmp_db, "p1")
    assert [p.id for p in get_passages(tmp_db)] == ["p2"]
    assert count(tmp_db, "questions") == 3
    assert count(tmp_db, "options") == 9
