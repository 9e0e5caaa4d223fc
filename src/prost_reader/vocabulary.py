"""Personal vocabulary list collected while reading."""
import logging
from datetime import datetime

from prost_reader.db import get_connection
from prost_reader.models import VocabularyWord

logger = logging.getLogger(__name__)


def _word_from_row(row) -> VocabularyWord:
    return VocabularyWord(
        id=row["id"],
        user_id=row["user_id"],
        word=row["word"],
        context=row["context"] or "",
        source_passage_id=row["source_passage_id"],
        source_passage_title=row["source_passage_title"] or "",
        level=row["level"],
        added_at=row["added_at"],
        notes=row["notes"],
        is_favorite=bool(row["is_favorite"]),
    )


def add_word(
    db_path: str,
    user_id: str,
    word: str,
    context: str,
    passage,
    notes: str = None,
) -> bool:
    """Save a word from ``passage``. Returns False if the user already saved it (any case)."""
    word = word.strip()
    conn = get_connection(db_path)
    cursor = conn.execute(
        """INSERT OR IGNORE INTO vocabulary_words
        (user_id, word, word_key, context, source_passage_id, source_passage_title, level, notes, added_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (user_id, word, word.lower(), context, passage.id, passage.title, passage.level,
         notes, datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()
    if cursor.rowcount == 0:
        logger.debug("Word %r already saved for user %s", word, user_id)
        return False
    logger.info("Saved word %r from %s", word, passage.title)
    return True


def remove_word(db_path: str, word_id: int) -> None:
    conn = get_connection(db_path)
    conn.execute("DELETE FROM vocabulary_words WHERE id = ?", (word_id,))
    conn.commit()
    conn.close()


def toggle_favorite(db_path: str, word_id: int) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "UPDATE vocabulary_words SET is_favorite = 1 - is_favorite WHERE id = ?", (word_id,)
    )
    conn.commit()
    conn.close()


def update_word_notes(db_path: str, word_id: int, notes: str | None) -> None:
    conn = get_connection(db_path)
    conn.execute("UPDATE vocabulary_words SET notes = ? WHERE id = ?", (notes, word_id))
    conn.commit()
    conn.close()


def get_user_words(db_path: str, user_id: str) -> list:
    """All of a user's words, most recently added first."""
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM vocabulary_words WHERE user_id = ? ORDER BY added_at DESC, id DESC",
        (user_id,),
    ).fetchall()
    conn.close()
    return [_word_from_row(r) for r in rows]


def get_words_for_level(db_path: str, user_id: str, level: str) -> list:
    return [w for w in get_user_words(db_path, user_id) if w.level == level]


def get_favorite_words(db_path: str, user_id: str) -> list:
    return [w for w in get_user_words(db_path, user_id) if w.is_favorite]


def search_words(db_path: str, user_id: str, query: str) -> list:
    """Case-insensitive match on the word, its context or the notes."""
    words = get_user_words(db_path, user_id)
    if not query:
        return words
    query = query.lower()
    return [
        w for w in words
        if query in w.word.lower() or query in w.context.lower() or query in (w.notes or "").lower()
    ]


def is_word_saved(db_path: str, user_id: str, word: str) -> bool:
    conn = get_connection(db_path)
    row = conn.execute(
        "SELECT 1 FROM vocabulary_words WHERE user_id = ? AND word_key = ?",
        (user_id, word.strip().lower()),
    ).fetchone()
    conn.close()
    return row is not None
