"""
Error taxonomy shared by the parser, builder, validator and exporter.

Every error raised by quizqti derives from QtiError, so a caller that only
wants to turn failures into a message can catch that one type.
"""

from __future__ import annotations
from typing import Optional


class QtiError(RuntimeError):
    pass


class ParseError(QtiError):
    """Document-level parse failure. `line` is 0-based when known."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.message = message
        self.line = line
        super().__init__(message)

    def __str__(self) -> str:
        if self.line is None:
            return f"Parse error: {self.message}"
        return f"Parse error at line {self.line}: {self.message}"


class InvalidFormat(ParseError):
    """A question's body line could not be classified."""

    def __init__(self, line: int, message: str):
        super().__init__(message, line)

    def __str__(self) -> str:
        return f"Invalid question format at line {self.line}: {self.message}"


class ValidationError(QtiError):
    pass


class XmlError(QtiError):
    pass


class ConfigError(QtiError):
    pass
