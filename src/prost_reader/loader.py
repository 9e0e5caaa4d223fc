"""Load seed reading content from JSON documents.

Two document shapes are understood:

* true/false parts (Goethe A1 Part 1 and Part 3)::

    {"exam", "section", "part", "instructions_de",
     "tests": [{"id", "text", "statements": [{"id", "statement", "answer": "R"|"F"}]}]}

* A/B choice parts (Part 2)::

    {"exam", "section", "difficulty",
     "questions": [{"id", "situation", "textA", "textB", "answer": "A"|"B",
                    "explanation", "tags"?}]}

plus a leveled passage document (``{"passages": [...]}``) for the generic
A2-B2 reading exercises. Ids are derived with uuid5 from the document
contents so reloading the same file yields the same ids.
"""
import json
import logging
import uuid
from pathlib import Path

from prost_reader.models import Exam, ExamPart, ExamText, Option, Passage, Question

logger = logging.getLogger(__name__)

CONTENT_NAMESPACE = uuid.UUID("6f1c2a52-9d44-4d0e-a3b8-7f0e4c1d9b21")

PART_TITLES = {
    1: "Part 1: Short Informal Texts",
    2: "Part 2: Situation-Based Texts",
    3: "Part 3: Signs and Notices",
}

PART_TEXT_TYPES = {1: "informal_texts", 2: "situation_based", 3: "notices_signs"}


class ContentError(Exception):
    """Base class for seed content failures shown to the user."""


class ContentNotFoundError(ContentError):
    def __init__(self, path):
        self.path = str(path)
        super().__init__(f"Content file not found: {Path(path).name}")


class MalformedContentError(ContentError):
    def __init__(self, path, reason):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Invalid content in {Path(path).name}: {reason}")


class EmptyContentError(ContentError):
    def __init__(self, path):
        self.path = str(path)
        super().__init__(f"No practice items found in {Path(path).name}")


def content_id(*parts) -> str:
    return str(uuid.uuid5(CONTENT_NAMESPACE, "/".join(str(p) for p in parts)))


def read_document(path) -> dict:
    path = Path(path)
    if not path.is_file():
        raise ContentNotFoundError(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise MalformedContentError(path, "not valid UTF-8") from e
    except json.JSONDecodeError as e:
        raise MalformedContentError(path, f"not valid JSON ({e.msg} at line {e.lineno})") from e
    if not isinstance(data, dict):
        raise MalformedContentError(path, "top level must be an object")
    return data


def _two_way_question(key, prompt, answer, choices, number=0, type="true_false", explanation=""):
    """Build a question with exactly two options; ``choices`` maps answer codes to (text, value)."""
    codes = list(choices)
    if answer not in choices:
        raise ValueError(f"answer must be one of {'/'.join(codes)}, got {answer!r}")
    options = tuple(
        Option(id=content_id(key, code), text=text, value=value)
        for code, (text, value) in choices.items()
    )
    return Question(
        id=content_id(key),
        prompt=prompt,
        options=options,
        correct_option_id=content_id(key, answer),
        number=number,
        type=type,
        explanation=explanation,
    )


TRUE_FALSE = {"R": ("Richtig", "True"), "F": ("Falsch", "False")}


def _statement_question(source, test_id, statement, number=0):
    return _two_way_question(
        (source, test_id, statement["id"]), statement["statement"], statement["answer"],
        TRUE_FALSE, number=number,
    )


def _situation_question(source, item, number=0, option_labels=("Text A", "Text B")):
    choices = {
        "A": (option_labels[0], item["textA"]),
        "B": (option_labels[1], item["textB"]),
    }
    return _two_way_question(
        (source, item["id"]), item["situation"], item["answer"], choices,
        number=number, type="binary_choice", explanation=item.get("explanation", ""),
    )


def practice_title(text: str) -> str:
    """Short title from the first four words of a text."""
    first_line = next((line for line in text.splitlines() if line.strip()), "")
    if not first_line:
        return "Informal Text"
    title = " ".join(first_line.split()[:4])
    return title[:30] + "..." if len(title) > 30 else title


def load_part1_practices(path) -> list:
    """Each test of a true/false document becomes one A1 practice passage."""
    data = read_document(path)
    source = Path(path).stem
    try:
        practices = []
        for index, test in enumerate(data["tests"], 1):
            questions = tuple(_statement_question(source, test["id"], s) for s in test["statements"])
            practices.append(Passage(
                id=content_id(source, test["id"]),
                title=f"Practice {index}: {practice_title(test['text'])}",
                level="A1",
                text=test["text"],
                questions=questions,
                tags=("part1", "informal-text", "richtig-falsch"),
            ))
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedContentError(path, str(e)) from e
    if not practices:
        raise EmptyContentError(path)
    logger.debug("Loaded %d Part 1 practices from %s", len(practices), path)
    return practices


def load_part2_practices(path) -> list:
    """Each situation of an A/B document becomes a single-question practice."""
    data = read_document(path)
    source = Path(path).stem
    try:
        practices = []
        for item in data["questions"]:
            question = _situation_question(source, item)
            practices.append(Passage(
                id=content_id(source, "practice", item["id"]),
                title=f"Practice {item['id']}: Situation Choice",
                level="A1",
                text=item["situation"],
                questions=(question,),
                tags=tuple(item.get("tags") or ()) + ("part2", "situation", "a-b-choice"),
            ))
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedContentError(path, str(e)) from e
    if not practices:
        raise EmptyContentError(path)
    logger.debug("Loaded %d Part 2 practices from %s", len(practices), path)
    return practices


def load_passages(path) -> list:
    """Load leveled passages: ``{"passages": [{title, level, text, tags, questions}]}``.

    Each question lists its ``options`` and the zero-based index of the correct one.
    """
    data = read_document(path)
    source = Path(path).stem
    try:
        passages = []
        for item in data["passages"]:
            key = (source, item["id"])
            questions = []
            for q_index, q in enumerate(item["questions"]):
                q_key = key + (q_index,)
                if len(q["options"]) < 2:
                    raise ValueError(f"question {q['prompt']!r} needs at least two options")
                answer = q["answer"]
                if isinstance(answer, bool) or not isinstance(answer, int) or not 0 <= answer < len(q["options"]):
                    raise ValueError(f"question {q['prompt']!r}: answer {answer!r} is not an option index")
                options = tuple(
                    Option(id=content_id(*q_key, o_index), text=text)
                    for o_index, text in enumerate(q["options"])
                )
                questions.append(Question(
                    id=content_id(*q_key),
                    prompt=q["prompt"],
                    options=options,
                    correct_option_id=options[answer].id,
                    number=q_index + 1,
                ))
            passages.append(Passage(
                id=content_id(*key),
                title=item["title"],
                level=item["level"],
                text=item["text"],
                questions=tuple(questions),
                tags=tuple(item.get("tags", ())),
            ))
    except (KeyError, TypeError, ValueError, IndexError) as e:
        raise MalformedContentError(path, str(e)) from e
    if not passages:
        raise EmptyContentError(path)
    return passages


def _exam_part(path, data, source, part_number, start_number):
    number = start_number
    questions = []
    texts = []
    instructions = ""
    if "tests" in data:
        for test in data["tests"]:
            texts.append(ExamText(id=content_id(source, test["id"], "text"), content=test["text"]))
            for statement in test["statements"]:
                questions.append(_statement_question(source, test["id"], statement, number=number))
                number += 1
        instructions = data["instructions_de"]
    elif "questions" in data:
        for position, item in enumerate(data["questions"], 1):
            texts.append(ExamText(
                id=content_id(source, item["id"], "text"),
                title=item["situation"],
                content=f"A: {item['textA']}\nB: {item['textB']}",
                text_number=position,
            ))
            questions.append(_situation_question(source, item, number=number, option_labels=("A", "B")))
            number += 1
        instructions = data.get("instructions_de", "Welcher Text passt? Wählen Sie A oder B.")
    else:
        raise MalformedContentError(path, "expected 'tests' or 'questions'")
    part = ExamPart(
        id=content_id(source, "part", part_number),
        part_number=part_number,
        title=PART_TITLES.get(part_number, f"Part {part_number}"),
        instructions=instructions,
        text_type=PART_TEXT_TYPES.get(part_number, "other"),
        texts=tuple(texts),
        questions=tuple(questions),
    )
    return part, number


def load_exam(part_paths, exam_number: int = 1, title: str = None) -> Exam:
    """Assemble a three-part exam from part documents given in part order.

    Questions are numbered 1..N across the whole exam.
    """
    if not part_paths:
        raise EmptyContentError("exam")
    parts = []
    number = 1
    for part_number, path in enumerate(part_paths, 1):
        data = read_document(path)
        source = Path(path).stem
        try:
            part, number = _exam_part(path, data, source, data.get("part", part_number), number)
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedContentError(path, str(e)) from e
        if not part.questions:
            raise EmptyContentError(path)
        parts.append(part)
    exam = Exam(
        id=content_id("exam", *(Path(p).stem for p in part_paths)),
        title=title or f"Goethe A1 Reading Practice {exam_number}",
        parts=tuple(parts),
        tags=("goethe", "a1", "practice", "reading"),
    )
    logger.debug("Assembled %s with %d questions", exam.title, exam.total_questions)
    return exam
