from __future__ import annotations
import re

from quizqti.cursor import LineCursor
from quizqti.model import FileUpload

TYPE_NAME = "file_upload"
PRIORITY = 60

MARKER_RE = re.compile(r"^\^{3,}$")
DEFAULT_EXTENSIONS = ("pdf", "docx", "txt")


def matches(line: str) -> bool:
    return MARKER_RE.match(line) is not None


def parse_body(cursor: LineCursor) -> FileUpload:
    cursor.advance()  # the ^^^ line
    return FileUpload(allowed_extensions=DEFAULT_EXTENSIONS)
