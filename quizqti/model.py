"""
In-memory assessment model.

All records are frozen dataclasses; a new Assessment is built per
conversion. QuestionType is a closed union of the variant records below,
and the builder keeps one entry per variant in its dispatch table.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


def _ident(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4()}"


@dataclass(frozen=True)
class Choice:
    text: str
    correct: bool = False
    feedback: Optional[str] = None
    weight: Optional[float] = None  # partial credit
    id: str = field(default_factory=lambda: _ident("choice"))


@dataclass(frozen=True)
class AcceptableAnswer:
    text: str
    weight: float = 1.0  # multiplies question points


@dataclass(frozen=True)
class Feedback:
    correct: Optional[str] = None
    incorrect: Optional[str] = None
    general: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.correct or self.incorrect or self.general)


# -------------------- Question type variants --------------------

@dataclass(frozen=True)
class MultipleChoice:
    choices: Tuple[Choice, ...]
    shuffle: bool = True


@dataclass(frozen=True)
class TrueFalse:
    correct_answer: bool


@dataclass(frozen=True)
class MultipleAnswer:
    choices: Tuple[Choice, ...]
    partial_credit: bool = True


@dataclass(frozen=True)
class ShortAnswer:
    answers: Tuple[AcceptableAnswer, ...]
    case_sensitive: bool = False


@dataclass(frozen=True)
class Numerical:
    answer: float
    margin: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None


@dataclass(frozen=True)
class Essay:
    expected_length: Optional[int] = None
    rich_text: bool = True


@dataclass(frozen=True)
class FileUpload:
    allowed_extensions: Tuple[str, ...] = ("pdf", "docx", "txt")


QuestionType = Union[
    MultipleChoice, TrueFalse, MultipleAnswer, ShortAnswer, Numerical, Essay, FileUpload
]

QUESTION_TYPES: Tuple[type, ...] = (
    MultipleChoice, TrueFalse, MultipleAnswer, ShortAnswer, Numerical, Essay, FileUpload,
)


# -------------------- Questions and assessments --------------------

@dataclass(frozen=True)
class Question:
    text: str
    question_type: QuestionType
    title: str = ""
    points: float = 1.0
    feedback: Optional[Feedback] = None
    solution: Optional[str] = None
    id: str = field(default_factory=lambda: _ident("question"))


@dataclass(frozen=True)
class AssessmentMetadata:
    author: Optional[str] = None
    course: Optional[str] = None
    shuffle_questions: bool = False
    shuffle_answers: bool = False
    show_feedback: bool = False
    allow_review: bool = False


@dataclass(frozen=True)
class Assessment:
    title: str = "Untitled Assessment"
    questions: Tuple[Question, ...] = ()
    description: Optional[str] = None
    time_limit: Optional[int] = None  # minutes
    metadata: AssessmentMetadata = field(default_factory=AssessmentMetadata)
    identifier: str = field(default_factory=lambda: _ident("assessment"))
