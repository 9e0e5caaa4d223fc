"""Completion log backed by SQLite, with progress derived on read."""
import logging
from datetime import datetime

from prost_reader.db import get_connection
from prost_reader.models import LEVELS, Completion
from prost_reader.progress import (
    build_completion, compare_score, completion_history, completion_info, recompute_progress,
)

logger = logging.getLogger(__name__)


def _completion_from_row(conn, row) -> Completion:
    parts = conn.execute(
        "SELECT part_number, score FROM completion_parts WHERE completion_id = ? ORDER BY part_number",
        (row["id"],),
    ).fetchall()
    return Completion(
        id=row["id"],
        user_id=row["user_id"],
        subject_id=row["subject_id"],
        level=row["level"],
        score=row["score"],
        completed_at=datetime.fromisoformat(row["completed_at"]),
        attempt_number=row["attempt_number"],
        is_passed=bool(row["is_passed"]),
        subject_kind=row["subject_kind"],
        part_scores={p["part_number"]: p["score"] for p in parts},
        time_spent=row["time_spent"],
    )


def _select(conn, where: str = "1 = 1", params: tuple = ()) -> list:
    # seq keeps insertion order, which breaks ties between equal timestamps.
    rows = conn.execute(f"SELECT * FROM completions WHERE {where} ORDER BY seq", params).fetchall()
    return [_completion_from_row(conn, r) for r in rows]


def _insert(conn, completion: Completion) -> None:
    conn.execute(
        """INSERT INTO completions
        (id, user_id, subject_kind, subject_id, level, score, is_passed, attempt_number, completed_at, time_spent)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (completion.id, completion.user_id, completion.subject_kind, completion.subject_id,
         completion.level, completion.score, int(completion.is_passed), completion.attempt_number,
         completion.completed_at.isoformat(), completion.time_spent),
    )
    for part_number, score in completion.part_scores.items():
        conn.execute(
            "INSERT INTO completion_parts (completion_id, part_number, score) VALUES (?, ?, ?)",
            (completion.id, part_number, score),
        )


def record_completion(
    db_path: str,
    user_id: str,
    subject,
    answers: dict,
    completed_at: datetime = None,
    time_spent: int = None,
) -> tuple:
    """Grade an attempt, append it to the log and return ``(completion, progress)``.

    Counting earlier attempts, the insert and the progress fold share one
    write transaction, so concurrent recorders cannot interleave.
    """
    conn = get_connection(db_path)
    try:
        with conn:
            conn.execute("BEGIN IMMEDIATE")
            prior = _select(conn, "user_id = ? AND subject_id = ?", (user_id, subject.id))
            completion = build_completion(user_id, subject, answers, prior, completed_at, time_spent)
            _insert(conn, completion)
            level_log = _select(
                conn, "user_id = ? AND level = ? AND subject_kind = ?",
                (user_id, completion.level, completion.subject_kind),
            )
            progress = recompute_progress(user_id, completion.level, level_log, kind=completion.subject_kind)
    finally:
        conn.close()
    logger.info(
        "Recorded attempt %d at %s for user %s: %d%%",
        completion.attempt_number, subject.title, user_id, completion.score_percentage,
    )
    return completion, progress


def get_completions(db_path: str, user_id: str = None, kind: str = None) -> list:
    """Completions in the order they were recorded."""
    clauses, params = [], []
    if user_id is not None:
        clauses.append("user_id = ?")
        params.append(user_id)
    if kind is not None:
        clauses.append("subject_kind = ?")
        params.append(kind)
    conn = get_connection(db_path)
    completions = _select(conn, " AND ".join(clauses) or "1 = 1", tuple(params))
    conn.close()
    return completions


def get_history(db_path: str, user_id: str, subject_id: str) -> list:
    return completion_history(get_completions(db_path, user_id), user_id, subject_id)


def is_completed(db_path: str, user_id: str, subject_id: str) -> bool:
    return bool(get_history(db_path, user_id, subject_id))


def get_progress(db_path: str, user_id: str, level: str, kind: str = "passage"):
    return recompute_progress(user_id, level, get_completions(db_path, user_id, kind), kind=kind)


def get_all_progress(db_path: str, user_id: str, kind: str = "passage", levels=LEVELS) -> list:
    completions = get_completions(db_path, user_id, kind)
    return [recompute_progress(user_id, level, completions, kind=kind) for level in levels]


def get_completion_info(db_path: str, user_id: str, kind: str = None) -> dict:
    return completion_info(get_completions(db_path, user_id, kind), user_id)


def compare_with_previous(db_path: str, user_id: str, subject_id: str, new_score: float, exclude_id: str = None):
    """Compare a score against the user's most recent earlier attempt at a subject."""
    return compare_score(get_history(db_path, user_id, subject_id), new_score, exclude_id=exclude_id)
