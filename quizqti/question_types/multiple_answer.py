"""Multiple answer: `[*] text` is correct, `[ ] text` (or `[]`) is not."""

from __future__ import annotations
import re
from typing import List

from quizqti.cursor import LineCursor
from quizqti.errors import ParseError
from quizqti.model import Choice, MultipleAnswer

TYPE_NAME = "multiple_answer"
PRIORITY = 20

CORRECT_RE = re.compile(r"^\[\*\]\s*")
INCORRECT_RE = re.compile(r"^\[\s?\]\s*")


def matches(line: str) -> bool:
    return bool(CORRECT_RE.match(line) or INCORRECT_RE.match(line))


def parse_body(cursor: LineCursor) -> MultipleAnswer:
    start = cursor.pos
    choices: List[Choice] = []
    while not cursor.at_end():
        line = cursor.line
        m = CORRECT_RE.match(line) or INCORRECT_RE.match(line)
        if m:
            choices.append(Choice(line[m.end():].strip(), correct=line.startswith("[*]")))
        elif not cursor.is_blank():
            break
        cursor.advance()

    if not choices:
        raise ParseError("No choices found for multiple answer question", start)
    return MultipleAnswer(choices=tuple(choices), partial_credit=True)
