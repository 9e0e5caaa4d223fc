"""Completion records and the progress statistics derived from them.

Everything here is a pure function over in-memory completion lists. Progress
is never stored: it is always the fold of a user's completions for one level
(and one subject kind), so two folds over the same completions are equal
whatever order the completions arrived in. Only ``latest_score`` and
``last_activity_at`` depend on recency, and they follow ``completed_at``
with ties going to the later list position.
"""
import math
import uuid
from dataclasses import dataclass
from datetime import datetime

from prost_reader.models import Completion, CompletionInfo, Exam, Passage, Progress
from prost_reader.quiz import grade_exam, grade_passage, is_passing_score

# Differences within one percentage point count as the same score.
SCORE_TOLERANCE = 0.01


def subject_kind(subject) -> str:
    return "exam" if isinstance(subject, Exam) else "passage"


def subject_completions(completions, user_id: str, subject_id: str) -> list:
    return [c for c in completions if c.user_id == user_id and c.subject_id == subject_id]


def next_attempt_number(completions, user_id: str, subject_id: str) -> int:
    return len(subject_completions(completions, user_id, subject_id)) + 1


def completion_history(completions, user_id: str, subject_id: str) -> list:
    """Attempts at one subject, oldest first."""
    return sorted(subject_completions(completions, user_id, subject_id), key=lambda c: c.completed_at)


def latest_completion(completions):
    """Most recent completion by completed_at; on a tie the later one in the list wins."""
    latest = None
    for c in completions:
        if latest is None or c.completed_at >= latest.completed_at:
            latest = c
    return latest


def build_completion(
    user_id: str,
    subject,
    answers: dict,
    prior_completions=(),
    completed_at: datetime = None,
    time_spent: int = None,
) -> Completion:
    """Grade an attempt and build its completion record.

    ``prior_completions`` is the existing log; only entries for the same user
    and subject affect the attempt number.
    """
    if isinstance(subject, Exam):
        result = grade_exam(subject, answers)
        score = result.overall_score
        part_scores = result.part_scores
    else:
        score = grade_passage(subject, answers).score
        part_scores = {}
    return Completion(
        id=str(uuid.uuid4()),
        user_id=user_id,
        subject_id=subject.id,
        level=subject.level,
        score=score,
        completed_at=completed_at or datetime.now(),
        attempt_number=next_attempt_number(prior_completions, user_id, subject.id),
        is_passed=is_passing_score(score),
        subject_kind=subject_kind(subject),
        part_scores=part_scores,
        time_spent=time_spent,
    )


def _mean(values) -> float:
    # fsum is exactly rounded, so the mean does not depend on summation order.
    return math.fsum(values) / len(values) if values else 0.0


def recompute_progress(user_id: str, level: str, completions, kind: str = None) -> Progress:
    """Fold every completion for ``user_id`` at ``level`` into a Progress snapshot.

    ``kind`` narrows the fold to passage or exam completions; ``None`` folds both
    and labels the snapshot "all".
    Unknown users or levels produce an empty snapshot.
    """
    filtered = [
        c for c in completions
        if c.user_id == user_id and c.level == level and (kind is None or c.subject_kind == kind)
    ]
    scores = [c.score for c in filtered]
    latest = latest_completion(filtered)

    part_scores = {}
    for c in filtered:
        for part_number, part_score in c.part_scores.items():
            part_scores.setdefault(part_number, []).append(part_score)

    return Progress(
        user_id=user_id,
        level=level,
        kind=kind or "all",
        completed_ids=tuple(sorted({c.subject_id for c in filtered})),
        total_attempts=len(filtered),
        average_score=_mean(scores),
        best_score=max(scores, default=0.0),
        latest_score=latest.score if latest else 0.0,
        is_passed=any(c.is_passed for c in filtered),
        last_activity_at=latest.completed_at if latest else None,
        part_average_scores={n: _mean(v) for n, v in sorted(part_scores.items())},
    )


def completion_info(completions, user_id: str) -> dict:
    """Attempt count and best score per subject, keyed by subject id."""
    info = {}
    for c in completions:
        if c.user_id != user_id:
            continue
        current = info.get(c.subject_id)
        if current is None:
            info[c.subject_id] = CompletionInfo(attempt_count=1, best_score=c.score)
        else:
            info[c.subject_id] = CompletionInfo(
                attempt_count=current.attempt_count + 1,
                best_score=max(current.best_score, c.score),
            )
    return info


@dataclass(frozen=True)
class FirstAttempt:
    @property
    def message(self) -> str:
        return "First attempt complete!"


@dataclass(frozen=True)
class Improved:
    from_score: float
    to_score: float

    @property
    def message(self) -> str:
        return f"Improved from {int(self.from_score * 100)}% to {int(self.to_score * 100)}%!"


@dataclass(frozen=True)
class Decreased:
    from_score: float
    to_score: float

    @property
    def message(self) -> str:
        return f"Score: {int(self.to_score * 100)}% (previous: {int(self.from_score * 100)}%)"


@dataclass(frozen=True)
class Same:
    score: float

    @property
    def message(self) -> str:
        return f"Score: {int(self.score * 100)}% (same as before)"


def compare_score(previous_completions, new_score: float, exclude_id: str = None):
    """Compare ``new_score`` with the chronologically last earlier attempt.

    ``previous_completions`` should hold the attempts at a single subject;
    ``exclude_id`` drops the attempt that produced ``new_score``.
    """
    prior = [c for c in previous_completions if c.id != exclude_id]
    previous = latest_completion(prior)
    if previous is None:
        return FirstAttempt()
    delta = new_score - previous.score
    # Round away float noise such as 0.68 - 0.67 == 0.010000000000000009.
    if round(abs(delta), 9) <= SCORE_TOLERANCE:
        return Same(previous.score)
    if delta > 0:
        return Improved(previous.score, new_score)
    return Decreased(previous.score, new_score)
