"""Multiple choice: `*b) text` marks the correct choice, `a) text` the others."""

from __future__ import annotations
import re
from typing import List

from quizqti.cursor import LineCursor
from quizqti.errors import ParseError
from quizqti.model import Choice, MultipleChoice

TYPE_NAME = "multiple_choice"
PRIORITY = 10

CORRECT_RE = re.compile(r"^\*[a-zA-Z]\)\s*")
INCORRECT_RE = re.compile(r"^[a-zA-Z]\)\s*")


def matches(line: str) -> bool:
    return bool(CORRECT_RE.match(line) or INCORRECT_RE.match(line))


def parse_body(cursor: LineCursor) -> MultipleChoice:
    start = cursor.pos
    choices: List[Choice] = []
    while not cursor.at_end():
        line = cursor.line
        m = CORRECT_RE.match(line)
        if m:
            choices.append(Choice(line[m.end():].strip(), correct=True))
        elif INCORRECT_RE.match(line):
            choices.append(Choice(INCORRECT_RE.sub("", line, count=1).strip(), correct=False))
        elif cursor.is_blank():
            pass
        else:
            break
        cursor.advance()

    if not choices:
        raise ParseError("No choices found for multiple choice question", start)
    correct_count = sum(1 for c in choices if c.correct)
    if correct_count != 1:
        raise ParseError(
            f"Multiple choice question must have exactly 1 correct answer, found {correct_count}",
            start,
        )
    return MultipleChoice(choices=tuple(choices), shuffle=True)
