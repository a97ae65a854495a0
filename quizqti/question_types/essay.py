from __future__ import annotations
import re

from quizqti.cursor import LineCursor
from quizqti.model import Essay

TYPE_NAME = "essay"
PRIORITY = 50

MARKER_RE = re.compile(r"^_{3,}$")


def matches(line: str) -> bool:
    return MARKER_RE.match(line) is not None


def parse_body(cursor: LineCursor) -> Essay:
    cursor.advance()  # the ___ line
    return Essay(expected_length=None, rich_text=True)
