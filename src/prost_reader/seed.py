"""Seed the database with the demo user, practice passages and exams."""
import logging
from datetime import datetime
from pathlib import Path

from prost_reader.catalog import insert_exam, insert_passage
from prost_reader.db import get_connection, set_setting
from prost_reader.loader import load_exam, load_part1_practices, load_part2_practices, load_passages

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).parent / "content"

DEMO_USER_ID = "00000000-0000-0000-0000-000000000001"

EXAM_FILES = [
    ("Goethe A1 Lesen - Übung 1", ["exam1-part1.json", "exam1-part2.json", "exam1-part3.json"]),
]


def is_seeded(db_path: str) -> bool:
    """Check whether the database already holds reading content."""
    conn = get_connection(db_path)
    count = conn.execute("SELECT COUNT(*) FROM passages").fetchone()[0]
    conn.close()
    return count > 0


def seed_user(db_path: str, user_id: str = DEMO_USER_ID, name: str = "Demo User", email: str = "demo@prost.app") -> None:
    """Create the demo user and make it the current user."""
    conn = get_connection(db_path)
    conn.execute(
        "INSERT OR IGNORE INTO users (id, name, email, created_at) VALUES (?, ?, ?, ?)",
        (user_id, name, email, datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()
    set_setting(db_path, "current_user_id", user_id)


def seed_passages(db_path: str, content_dir: Path = CONTENT_DIR) -> int:
    """Insert A1 practices and leveled passages. Returns the number inserted."""
    passages = (
        load_part1_practices(content_dir / "reading.json")
        + load_part2_practices(content_dir / "reading-part2.json")
        + load_passages(content_dir / "passages.json")
    )
    conn = get_connection(db_path)
    with conn:
        for passage in passages:
            insert_passage(conn, passage)
    conn.close()
    logger.info("Seeded %d passages", len(passages))
    return len(passages)


def seed_exams(db_path: str, content_dir: Path = CONTENT_DIR) -> int:
    """Insert the three-part Goethe A1 exams. Returns the number inserted."""
    exams = [
        load_exam([content_dir / f for f in files], exam_number=n, title=title)
        for n, (title, files) in enumerate(EXAM_FILES, 1)
    ]
    conn = get_connection(db_path)
    with conn:
        for exam in exams:
            insert_exam(conn, exam)
    conn.close()
    logger.info("Seeded %d exams", len(exams))
    return len(exams)


def seed_all(db_path: str) -> None:
    """Run all seed functions in order."""
    if is_seeded(db_path):
        logger.debug("Database %s already seeded", db_path)
        return
    seed_user(db_path)
    seed_passages(db_path)
    seed_exams(db_path)
