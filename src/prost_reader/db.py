"""Database initialization and connection management."""
import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = str(Path.home() / ".prost" / "prost.db")

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS passages (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    level TEXT NOT NULL,
    text TEXT NOT NULL,
    tags TEXT DEFAULT '[]'
);

CREATE TABLE IF NOT EXISTS exams (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    level TEXT NOT NULL,
    exam_type TEXT NOT NULL,
    duration_minutes INTEGER NOT NULL,
    total_questions INTEGER NOT NULL,
    tags TEXT DEFAULT '[]'
);

CREATE TABLE IF NOT EXISTS exam_parts (
    id TEXT PRIMARY KEY,
    exam_id TEXT NOT NULL REFERENCES exams(id) ON DELETE CASCADE,
    part_number INTEGER NOT NULL,
    title TEXT NOT NULL,
    instructions TEXT,
    text_type TEXT
);

CREATE TABLE IF NOT EXISTS exam_texts (
    id TEXT PRIMARY KEY,
    part_id TEXT NOT NULL REFERENCES exam_parts(id) ON DELETE CASCADE,
    position INTEGER NOT NULL,
    title TEXT,
    content TEXT NOT NULL,
    text_number INTEGER
);

CREATE TABLE IF NOT EXISTS questions (
    id TEXT PRIMARY KEY,
    passage_id TEXT REFERENCES passages(id) ON DELETE CASCADE,
    part_id TEXT REFERENCES exam_parts(id) ON DELETE CASCADE,
    position INTEGER NOT NULL,
    number INTEGER DEFAULT 0,
    prompt TEXT NOT NULL,
    type TEXT NOT NULL,
    correct_option_id TEXT NOT NULL,
    explanation TEXT
);

CREATE TABLE IF NOT EXISTS options (
    id TEXT PRIMARY KEY,
    question_id TEXT NOT NULL REFERENCES questions(id) ON DELETE CASCADE,
    position INTEGER NOT NULL,
    text TEXT NOT NULL,
    value TEXT
);

CREATE TABLE IF NOT EXISTS completions (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    id TEXT NOT NULL UNIQUE,
    user_id TEXT NOT NULL,
    subject_kind TEXT NOT NULL,
    subject_id TEXT NOT NULL,
    level TEXT NOT NULL,
    score REAL NOT NULL,
    is_passed INTEGER NOT NULL,
    attempt_number INTEGER NOT NULL,
    completed_at TEXT NOT NULL,
    time_spent INTEGER
);

CREATE TABLE IF NOT EXISTS completion_parts (
    completion_id TEXT NOT NULL REFERENCES completions(id) ON DELETE CASCADE,
    part_number INTEGER NOT NULL,
    score REAL NOT NULL,
    PRIMARY KEY (completion_id, part_number)
);

CREATE TABLE IF NOT EXISTS vocabulary_words (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    word TEXT NOT NULL,
    word_key TEXT NOT NULL,
    context TEXT,
    source_passage_id TEXT,
    source_passage_title TEXT,
    level TEXT,
    notes TEXT,
    is_favorite INTEGER DEFAULT 0,
    added_at TEXT NOT NULL,
    UNIQUE(user_id, word_key)
);

CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()
