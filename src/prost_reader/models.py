"""Data classes for the reading-practice domain model."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

# Goethe A1 pass mark, applied to the truncated percentage.
PASS_THRESHOLD_PERCENT = 60

LEVELS = ("A1", "A2", "B1", "B2")


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    created_at: str = ""


@dataclass(frozen=True)
class Option:
    id: str
    text: str
    value: str = ""


@dataclass(frozen=True)
class Question:
    id: str
    prompt: str
    options: tuple
    correct_option_id: str
    number: int = 0
    type: str = "multiple_choice"  # true_false, binary_choice, multiple_choice
    explanation: str = ""

    def __post_init__(self):
        if self.correct_option_id not in {o.id for o in self.options}:
            raise ValueError(
                f"Question {self.id}: correct option {self.correct_option_id} is not one of its options"
            )

    def is_correct(self, selected_option_id: Optional[str]) -> bool:
        return selected_option_id == self.correct_option_id

    def option(self, option_id: Optional[str]) -> Optional[Option]:
        return next((o for o in self.options if o.id == option_id), None)

    @property
    def correct_option(self) -> Option:
        return self.option(self.correct_option_id)


@dataclass(frozen=True)
class Passage:
    id: str
    title: str
    level: str
    text: str
    questions: tuple
    tags: tuple = ()


@dataclass(frozen=True)
class ExamText:
    id: str
    content: str
    title: Optional[str] = None
    text_number: Optional[int] = None


@dataclass(frozen=True)
class ExamPart:
    id: str
    part_number: int
    title: str
    instructions: str
    text_type: str
    texts: tuple
    questions: tuple

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def question_range(self) -> str:
        if not self.questions:
            return ""
        return f"Questions {self.questions[0].number}-{self.questions[-1].number}"


@dataclass(frozen=True)
class Exam:
    id: str
    title: str
    parts: tuple
    level: str = "A1"
    exam_type: str = "goethe_a1_reading"
    duration_minutes: int = 25
    tags: tuple = ()

    @property
    def total_questions(self) -> int:
        return sum(p.question_count for p in self.parts)

    @property
    def all_questions(self) -> list:
        return [q for p in self.parts for q in p.questions]

    def part(self, part_number: int) -> Optional[ExamPart]:
        return next((p for p in self.parts if p.part_number == part_number), None)


@dataclass(frozen=True)
class QuestionResult:
    question: Question
    selected_option_id: Optional[str]

    @property
    def is_correct(self) -> bool:
        return self.question.is_correct(self.selected_option_id)

    @property
    def selected_option_text(self) -> Optional[str]:
        selected = self.question.option(self.selected_option_id)
        return selected.text if selected else None

    @property
    def correct_option_text(self) -> str:
        return self.question.correct_option.text


@dataclass(frozen=True)
class PartResult:
    part_number: int
    question_results: tuple

    @property
    def correct_count(self) -> int:
        return sum(1 for r in self.question_results if r.is_correct)

    @property
    def total_count(self) -> int:
        return len(self.question_results)

    @property
    def score(self) -> float:
        if self.total_count == 0:
            return 0.0
        return self.correct_count / self.total_count

    @property
    def score_percentage(self) -> int:
        return int(self.score * 100)


@dataclass(frozen=True)
class ExamResult:
    exam_id: str
    part_results: tuple

    @property
    def correct_count(self) -> int:
        return sum(p.correct_count for p in self.part_results)

    @property
    def total_count(self) -> int:
        return sum(p.total_count for p in self.part_results)

    @property
    def overall_score(self) -> float:
        # Raw counts, not the mean of part percentages.
        if self.total_count == 0:
            return 0.0
        return self.correct_count / self.total_count

    @property
    def overall_score_percentage(self) -> int:
        return int(self.overall_score * 100)

    @property
    def is_passed(self) -> bool:
        return self.overall_score_percentage >= PASS_THRESHOLD_PERCENT

    @property
    def part_scores(self) -> dict:
        return {p.part_number: p.score for p in self.part_results}

    def part(self, part_number: int) -> Optional[PartResult]:
        return next((p for p in self.part_results if p.part_number == part_number), None)


@dataclass(frozen=True)
class Completion:
    id: str
    user_id: str
    subject_id: str
    level: str
    score: float
    completed_at: datetime
    attempt_number: int
    is_passed: bool = False
    subject_kind: str = "passage"  # passage or exam
    part_scores: dict = field(default_factory=dict)
    time_spent: Optional[int] = None  # seconds

    def __post_init__(self):
        object.__setattr__(self, "score", min(max(self.score, 0.0), 1.0))
        object.__setattr__(self, "attempt_number", max(self.attempt_number, 1))

    @property
    def score_percentage(self) -> int:
        return int(self.score * 100)

    @property
    def is_perfect(self) -> bool:
        return self.score == 1.0

    @property
    def time_spent_formatted(self) -> Optional[str]:
        if self.time_spent is None:
            return None
        minutes, seconds = divmod(self.time_spent, 60)
        return f"{minutes}:{seconds:02d}"


@dataclass(frozen=True)
class Progress:
    user_id: str
    level: str
    kind: str = "passage"
    completed_ids: tuple = ()
    total_attempts: int = 0
    average_score: float = 0.0
    best_score: float = 0.0
    latest_score: float = 0.0
    is_passed: bool = False
    last_activity_at: Optional[datetime] = None
    part_average_scores: dict = field(default_factory=dict)

    @property
    def completed_count(self) -> int:
        return len(self.completed_ids)

    @property
    def average_score_percentage(self) -> int:
        return int(self.average_score * 100)

    @property
    def best_score_percentage(self) -> int:
        return int(self.best_score * 100)

    @property
    def latest_score_percentage(self) -> int:
        return int(self.latest_score * 100)

    def part_average(self, part_number: int) -> float:
        return self.part_average_scores.get(part_number, 0.0)


@dataclass(frozen=True)
class CompletionInfo:
    attempt_count: int
    best_score: float


@dataclass
class VocabularyWord:
    id: int
    user_id: str
    word: str
    context: str
    source_passage_id: str
    source_passage_title: str
    level: str
    added_at: str
    notes: Optional[str] = None
    is_favorite: bool = False
