"""
Parse the plain-text quiz authoring syntax into an Assessment.

  title: Sample Quiz            (or "# Sample Quiz", first 5 lines only)

  1. What is 2 + 2?
  a) 3
  *b) 4
  feedback: Count on your fingers.

Each numbered line opens a question. The first non-blank line after it
decides the question type; the per-type sub-parsers in
quizqti/question_types consume the body, then trailing
feedback:/correct:/incorrect:/solution: lines are collected.
"""

from __future__ import annotations
import re
from types import ModuleType
from typing import List, Optional, Sequence, Tuple

from quizqti.cursor import QUESTION_RE, LineCursor
from quizqti.errors import InvalidFormat, ParseError
from quizqti.model import Assessment, Feedback, Question
from quizqti.registry import discover_question_types

DEFAULT_TITLE = "Untitled Assessment"
TITLE_SCAN_LINES = 5

FEEDBACK_PREFIXES = ("feedback:", "correct:", "incorrect:", "solution:")

# Characters XML 1.0 cannot carry, even escaped.
ILLEGAL_XML_CHAR_RE = re.compile(r"[^\t\n\r\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def split_lines(text: str) -> List[str]:
    """Split on "\\n" only; other Unicode line breaks stay inside the line."""
    return [l.rstrip() for l in text.split("\n")]


def check_characters(lines: Sequence[str]) -> None:
    for i, line in enumerate(lines):
        m = ILLEGAL_XML_CHAR_RE.search(line)
        if m:
            raise ParseError(f"Character {m.group()!r} is not allowed in QTI text", i)


def extract_title(lines: Sequence[str]) -> Optional[str]:
    for line in lines[:TITLE_SCAN_LINES]:
        if line.lower().startswith("title:"):
            return line[len("title:"):].strip()
        if line.startswith("#"):
            return line.lstrip("#").strip()
    return None


def classify(cursor: LineCursor, handlers: Sequence[ModuleType]) -> ModuleType:
    """First handler whose pattern matches the current line wins."""
    for mod in handlers:
        if mod.matches(cursor.line):
            return mod
    raise InvalidFormat(cursor.pos, f"Cannot determine question type from: {cursor.line}")


def parse_feedback_and_solution(cursor: LineCursor) -> Tuple[Optional[Feedback], Optional[str]]:
    fields = {"feedback:": None, "correct:": None, "incorrect:": None}
    solution = None
    while not cursor.at_end():
        line = cursor.line
        lowered = line.lower()
        prefix = next((p for p in FEEDBACK_PREFIXES if lowered.startswith(p)), None)
        if prefix == "solution:":
            solution = line[len(prefix):].strip()
        elif prefix:
            fields[prefix] = line[len(prefix):].strip()
        elif not cursor.is_blank():
            break
        cursor.advance()

    fb = Feedback(
        correct=fields["correct:"],
        incorrect=fields["incorrect:"],
        general=fields["feedback:"],
    )
    if fb.correct is None and fb.incorrect is None and fb.general is None:
        return None, solution
    return fb, solution


def parse_question(cursor: LineCursor, handlers: Sequence[ModuleType]) -> Question:
    question_line = cursor.pos
    text = QUESTION_RE.sub("", cursor.line, count=1).strip()
    cursor.advance()

    cursor.skip_blank()
    if cursor.at_end():
        raise ParseError("Unexpected end of input: question has no answer lines", question_line)

    handler = classify(cursor, handlers)
    question_type = handler.parse_body(cursor)
    feedback, solution = parse_feedback_and_solution(cursor)

    return Question(text=text, question_type=question_type, feedback=feedback, solution=solution)


def parse(text: str) -> Assessment:
    """Parse authoring text. Raises ParseError (or InvalidFormat) on the first problem."""
    lines = split_lines(text)
    check_characters(lines)
    cursor = LineCursor(lines)
    handlers = discover_question_types()

    questions: List[Question] = []
    while not cursor.at_end():
        if cursor.at_question():
            questions.append(parse_question(cursor, handlers))
        else:
            cursor.advance()

    if not questions:
        raise ParseError("No questions found in input")

    return Assessment(title=extract_title(lines) or DEFAULT_TITLE, questions=tuple(questions))
