"""Numerical: `= 3.14 ± 0.01`, the tolerance part is optional."""

from __future__ import annotations
import re

from quizqti.cursor import LineCursor
from quizqti.errors import ParseError
from quizqti.model import Numerical

TYPE_NAME = "numerical"
PRIORITY = 40

NUMBER = r"[-+]?\d*\.?\d+"
NUMERICAL_RE = re.compile(rf"^=\s*({NUMBER})\s*(?:±\s*({NUMBER}))?")


def matches(line: str) -> bool:
    return NUMERICAL_RE.match(line) is not None


def parse_body(cursor: LineCursor) -> Numerical:
    m = NUMERICAL_RE.match(cursor.line)
    if not m:
        raise ParseError("Invalid numerical answer format", cursor.pos)
    try:
        answer = float(m.group(1))
        margin = float(m.group(2)) if m.group(2) is not None else None
    except ValueError as e:
        raise ParseError(f"Invalid numerical answer: {cursor.line}", cursor.pos) from e
    cursor.advance()
    # min/max stay unset until the authoring syntax grows a range form.
    return Numerical(answer=answer, margin=margin)
