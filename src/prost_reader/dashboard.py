"""Reading dashboard: per-level cards, score labels and study statistics."""
from dataclasses import dataclass

from prost_reader.catalog import get_exams, get_passages
from prost_reader.db import get_connection
from prost_reader.models import LEVELS, Progress
from prost_reader.tracker import get_progress


def _level_rank(level: str) -> int:
    return LEVELS.index(level) if level in LEVELS else len(LEVELS)


@dataclass(frozen=True)
class GoetheProgressEntry:
    """Exam-format card: attempts at the three-part Goethe exams for one level."""
    progress: Progress
    exam_count: int = 0

    @property
    def title(self) -> str:
        return f"Goethe-Zertifikat {self.progress.level}"

    @property
    def status(self) -> str:
        if self.progress.total_attempts == 0:
            return "Not started"
        if self.progress.is_passed:
            return "Passed"
        return "In progress"

    @property
    def sort_key(self) -> tuple:
        return (0, _level_rank(self.progress.level))


@dataclass(frozen=True)
class LevelProgressEntry:
    """Leveled passage card."""
    progress: Progress
    passage_count: int = 0

    @property
    def title(self) -> str:
        return f"Level {self.progress.level}"

    @property
    def status(self) -> str:
        return "Not started" if self.progress.total_attempts == 0 else "In progress"

    @property
    def sort_key(self) -> tuple:
        return (1, _level_rank(self.progress.level))


def build_dashboard(db_path: str, user_id: str, exam_levels=("A1",)) -> list:
    """Exam-format cards first, then one card per remaining level, in CEFR order."""
    entries = []
    for level in exam_levels:
        entries.append(GoetheProgressEntry(
            progress=get_progress(db_path, user_id, level, kind="exam"),
            exam_count=len(get_exams(db_path, level=level)),
        ))
    for level in LEVELS:
        if level in exam_levels:
            continue
        entries.append(LevelProgressEntry(
            progress=get_progress(db_path, user_id, level, kind="passage"),
            passage_count=len(get_passages(db_path, level=level)),
        ))
    return sorted(entries, key=lambda e: e.sort_key)


def get_score_label(score: float) -> str:
    if score >= 80:
        return "EXCELLENT"
    elif score >= 60:
        return "PASSING"
    elif score >= 40:
        return "NEEDS WORK"
    return "NOT YET"


def get_score_color(score: float) -> str:
    if score >= 80:
        return "green"
    elif score >= 60:
        return "yellow"
    elif score >= 40:
        return "dark_orange"
    return "red"


def get_study_stats(db_path: str, user_id: str) -> dict:
    conn = get_connection(db_path)
    passages = conn.execute(
        "SELECT COUNT(DISTINCT subject_id) FROM completions WHERE user_id = ? AND subject_kind = 'passage'",
        (user_id,),
    ).fetchone()[0]
    exams = conn.execute(
        "SELECT COUNT(*) FROM completions WHERE user_id = ? AND subject_kind = 'exam'", (user_id,)
    ).fetchone()[0]
    attempts = conn.execute("SELECT COUNT(*) FROM completions WHERE user_id = ?", (user_id,)).fetchone()[0]
    avg_row = conn.execute("SELECT AVG(score) * 100 as avg FROM completions WHERE user_id = ?", (user_id,)).fetchone()
    words = conn.execute("SELECT COUNT(*) FROM vocabulary_words WHERE user_id = ?", (user_id,)).fetchone()[0]
    conn.close()
    return {
        "passages_completed": passages,
        "exams_taken": exams,
        "total_attempts": attempts,
        "avg_score": round(avg_row["avg"], 1) if avg_row["avg"] is not None else 0.0,
        "words_saved": words,
    }
