"""Storage and lookup of reading passages and exams."""
import json

from prost_reader.db import get_connection
from prost_reader.models import Exam, ExamPart, ExamText, Option, Passage, Question


def _insert_questions(conn, questions, passage_id=None, part_id=None) -> None:
    for position, q in enumerate(questions):
        conn.execute(
            """INSERT OR REPLACE INTO questions
            (id, passage_id, part_id, position, number, prompt, type, correct_option_id, explanation)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (q.id, passage_id, part_id, position, q.number, q.prompt, q.type, q.correct_option_id, q.explanation),
        )
        for o_position, o in enumerate(q.options):
            conn.execute(
                "INSERT OR REPLACE INTO options (id, question_id, position, text, value) VALUES (?, ?, ?, ?, ?)",
                (o.id, q.id, o_position, o.text, o.value),
            )


def insert_passage(conn, passage: Passage) -> None:
    conn.execute("DELETE FROM passages WHERE id = ?", (passage.id,))
    conn.execute(
        "INSERT INTO passages (id, title, level, text, tags) VALUES (?, ?, ?, ?, ?)",
        (passage.id, passage.title, passage.level, passage.text, json.dumps(list(passage.tags))),
    )
    _insert_questions(conn, passage.questions, passage_id=passage.id)


def insert_exam(conn, exam: Exam) -> None:
    conn.execute("DELETE FROM exams WHERE id = ?", (exam.id,))
    conn.execute(
        """INSERT INTO exams (id, title, level, exam_type, duration_minutes, total_questions, tags)
        VALUES (?, ?, ?, ?, ?, ?, ?)""",
        (exam.id, exam.title, exam.level, exam.exam_type, exam.duration_minutes,
         exam.total_questions, json.dumps(list(exam.tags))),
    )
    for part in exam.parts:
        conn.execute(
            "INSERT INTO exam_parts (id, exam_id, part_number, title, instructions, text_type) VALUES (?, ?, ?, ?, ?, ?)",
            (part.id, exam.id, part.part_number, part.title, part.instructions, part.text_type),
        )
        for position, text in enumerate(part.texts):
            conn.execute(
                "INSERT INTO exam_texts (id, part_id, position, title, content, text_number) VALUES (?, ?, ?, ?, ?, ?)",
                (text.id, part.id, position, text.title, text.content, text.text_number),
            )
        _insert_questions(conn, part.questions, part_id=part.id)


def save_passage(db_path: str, passage: Passage) -> None:
    """Insert a passage with its questions, replacing any stored copy."""
    conn = get_connection(db_path)
    with conn:
        insert_passage(conn, passage)
    conn.close()


def save_exam(db_path: str, exam: Exam) -> None:
    """Insert an exam with parts, texts and questions, replacing any stored copy."""
    conn = get_connection(db_path)
    with conn:
        insert_exam(conn, exam)
    conn.close()


def _load_questions(conn, column: str, owner_id: str) -> tuple:
    rows = conn.execute(
        f"SELECT * FROM questions WHERE {column} = ? ORDER BY position", (owner_id,)
    ).fetchall()
    questions = []
    for row in rows:
        options = conn.execute(
            "SELECT * FROM options WHERE question_id = ? ORDER BY position", (row["id"],)
        ).fetchall()
        questions.append(Question(
            id=row["id"],
            prompt=row["prompt"],
            options=tuple(Option(id=o["id"], text=o["text"], value=o["value"] or "") for o in options),
            correct_option_id=row["correct_option_id"],
            number=row["number"],
            type=row["type"],
            explanation=row["explanation"] or "",
        ))
    return tuple(questions)


def _passage_from_row(conn, row) -> Passage:
    return Passage(
        id=row["id"],
        title=row["title"],
        level=row["level"],
        text=row["text"],
        questions=_load_questions(conn, "passage_id", row["id"]),
        tags=tuple(json.loads(row["tags"] or "[]")),
    )


def _exam_from_row(conn, row) -> Exam:
    parts = []
    for p in conn.execute(
        "SELECT * FROM exam_parts WHERE exam_id = ? ORDER BY part_number", (row["id"],)
    ).fetchall():
        texts = conn.execute(
            "SELECT * FROM exam_texts WHERE part_id = ? ORDER BY position", (p["id"],)
        ).fetchall()
        parts.append(ExamPart(
            id=p["id"],
            part_number=p["part_number"],
            title=p["title"],
            instructions=p["instructions"] or "",
            text_type=p["text_type"] or "",
            texts=tuple(
                ExamText(id=t["id"], content=t["content"], title=t["title"], text_number=t["text_number"])
                for t in texts
            ),
            questions=_load_questions(conn, "part_id", p["id"]),
        ))
    return Exam(
        id=row["id"],
        title=row["title"],
        parts=tuple(parts),
        level=row["level"],
        exam_type=row["exam_type"],
        duration_minutes=row["duration_minutes"],
        tags=tuple(json.loads(row["tags"] or "[]")),
    )


def get_passages(db_path: str, level: str = None, tag: str = None) -> list:
    """Passages in the order they were added, optionally narrowed by level and tag."""
    conn = get_connection(db_path)
    if level:
        rows = conn.execute("SELECT * FROM passages WHERE level = ? ORDER BY rowid", (level,)).fetchall()
    else:
        rows = conn.execute("SELECT * FROM passages ORDER BY rowid").fetchall()
    passages = [_passage_from_row(conn, r) for r in rows]
    conn.close()
    if tag:
        passages = [p for p in passages if tag in p.tags]
    return passages


def get_passage(db_path: str, passage_id: str) -> Passage | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM passages WHERE id = ?", (passage_id,)).fetchone()
    passage = _passage_from_row(conn, row) if row else None
    conn.close()
    return passage


def get_exams(db_path: str, level: str = None) -> list:
    conn = get_connection(db_path)
    if level:
        rows = conn.execute("SELECT * FROM exams WHERE level = ? ORDER BY rowid", (level,)).fetchall()
    else:
        rows = conn.execute("SELECT * FROM exams ORDER BY rowid").fetchall()
    exams = [_exam_from_row(conn, r) for r in rows]
    conn.close()
    return exams


def get_exam(db_path: str, exam_id: str) -> Exam | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM exams WHERE id = ?", (exam_id,)).fetchone()
    exam = _exam_from_row(conn, row) if row else None
    conn.close()
    return exam


def delete_passage(db_path: str, passage_id: str) -> None:
    """Remove a passage; its questions and options go with it."""
    conn = get_connection(db_path)
    with conn:
        conn.execute("DELETE FROM passages WHERE id = ?", (passage_id,))
    conn.close()


def delete_exam(db_path: str, exam_id: str) -> None:
    """Remove an exam; parts, texts, questions and options cascade."""
    conn = get_connection(db_path)
    with conn:
        conn.execute("DELETE FROM exams WHERE id = ?", (exam_id,))
    conn.close()
