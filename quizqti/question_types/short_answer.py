"""Short answer: one `* text` line per acceptable answer."""

from __future__ import annotations
import re
from typing import List

from quizqti.cursor import LineCursor
from quizqti.errors import ParseError
from quizqti.model import AcceptableAnswer, ShortAnswer

TYPE_NAME = "short_answer"
PRIORITY = 30

ANSWER_RE = re.compile(r"^\*\s*")


def matches(line: str) -> bool:
    return ANSWER_RE.match(line) is not None


def parse_body(cursor: LineCursor) -> ShortAnswer:
    start = cursor.pos
    answers: List[AcceptableAnswer] = []
    while not cursor.at_end():
        m = ANSWER_RE.match(cursor.line)
        if m:
            answers.append(AcceptableAnswer(cursor.line[m.end():].strip()))
        elif not cursor.is_blank():
            break
        cursor.advance()

    if not answers:
        raise ParseError("No answers found for short answer question", start)
    return ShortAnswer(answers=tuple(answers), case_sensitive=False)
