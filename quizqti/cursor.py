from __future__ import annotations
import re
from typing import List

QUESTION_RE = re.compile(r"^\d+\.(?:\s+|$)")


class LineCursor:
    """
    Explicit index into the document's lines. Sub-parsers advance `pos`
    over the lines they consume and leave it on the first line they do not
    own, which hands control back to the driver.
    """

    def __init__(self, lines: List[str], pos: int = 0):
        self.lines = lines
        self.pos = pos

    def at_end(self) -> bool:
        return self.pos >= len(self.lines)

    @property
    def line(self) -> str:
        return self.lines[self.pos]

    def advance(self, n: int = 1) -> None:
        self.pos += n

    def is_blank(self) -> bool:
        return not self.line.strip()

    def at_question(self) -> bool:
        return QUESTION_RE.match(self.line) is not None

    def skip_blank(self) -> None:
        while not self.at_end() and self.is_blank():
            self.pos += 1

    def next_nonblank(self) -> int:
        """Index of the first non-blank line at or after pos (len(lines) if none)."""
        i = self.pos
        while i < len(self.lines) and not self.lines[i].strip():
            i += 1
        return i
