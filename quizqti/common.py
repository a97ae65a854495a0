"""
Common helpers for quizqti: identifier hygiene and YAML dumps of a parsed
Assessment (used by `quizqti parse`).
"""

from __future__ import annotations
import re
from typing import Any, Dict, List, Optional

import yaml

from quizqti.model import (
    Assessment, Essay, FileUpload, MultipleAnswer, MultipleChoice, Numerical,
    Question, QuestionType, ShortAnswer, TrueFalse,
)

# ---------- Identifiers ----------

SAFE_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*$")


def is_safe_identifier(s: str) -> bool:
    """True if `s` is usable both as an XML id and as a file name."""
    return bool(s) and SAFE_IDENT_RE.match(s) is not None


def sanitize_identifier(s: str, maxlen: int = 64) -> str:
    s = re.sub(r"\s+", "_", s.strip())
    s = re.sub(r"[^A-Za-z0-9_\-]", "-", s)
    s = s.strip("-_")[:maxlen]
    if not s:
        return "quiz"
    if not (s[0].isalpha() or s[0] == "_"):
        s = f"quiz_{s}"
    return s


# ---------- YAML block-scalar helper ----------
class LiteralStr(str): pass
def _repr_literal(dumper, data):
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
yaml.add_representer(LiteralStr, _repr_literal)
yaml.add_representer(LiteralStr, _repr_literal, Dumper=yaml.SafeDumper)

def blockify(s: Optional[str]) -> Optional[str]:
    if s is None:
        return None
    s = str(s)
    if "\n" in s:
        return LiteralStr(s.rstrip("\n"))
    return s

# ---------- Assessment -> plain data ----------

TYPE_NAMES = {
    MultipleChoice: "multiple_choice",
    TrueFalse: "true_false",
    MultipleAnswer: "multiple_answer",
    ShortAnswer: "short_answer",
    Numerical: "numerical",
    Essay: "essay",
    FileUpload: "file_upload",
}


def question_type_name(qt: QuestionType) -> str:
    return TYPE_NAMES[type(qt)]


def _choices(choices) -> List[Dict[str, Any]]:
    out = []
    for c in choices:
        d: Dict[str, Any] = {"id": c.id, "text": blockify(c.text), "correct": c.correct}
        if c.feedback:
            d["feedback"] = blockify(c.feedback)
        if c.weight is not None:
            d["weight"] = c.weight
        out.append(d)
    return out


def question_to_dict(q: Question) -> Dict[str, Any]:
    qt = q.question_type
    data: Dict[str, Any] = {
        "id": q.id,
        "type": question_type_name(qt),
        "points": q.points,
        "text": blockify(q.text),
    }
    if q.title:
        data["title"] = q.title
    if isinstance(qt, MultipleChoice):
        data["shuffle"] = qt.shuffle
        data["choices"] = _choices(qt.choices)
    elif isinstance(qt, MultipleAnswer):
        data["partial_credit"] = qt.partial_credit
        data["choices"] = _choices(qt.choices)
    elif isinstance(qt, TrueFalse):
        data["answer"] = qt.correct_answer
    elif isinstance(qt, ShortAnswer):
        data["case_sensitive"] = qt.case_sensitive
        data["answers"] = [{"text": a.text, "weight": a.weight} for a in qt.answers]
    elif isinstance(qt, Numerical):
        data["answer"] = qt.answer
        for k in ("margin", "min", "max"):
            v = getattr(qt, k)
            if v is not None:
                data[k] = v
    elif isinstance(qt, Essay):
        data["rich_text"] = qt.rich_text
        if qt.expected_length is not None:
            data["expected_length"] = qt.expected_length
    elif isinstance(qt, FileUpload):
        data["allowed_extensions"] = list(qt.allowed_extensions)
    if q.feedback is not None:
        data["feedback"] = {
            k: blockify(v) for k, v in (
                ("correct", q.feedback.correct),
                ("incorrect", q.feedback.incorrect),
                ("general", q.feedback.general),
            ) if v
        }
    if q.solution:
        data["solution"] = blockify(q.solution)
    return data


def assessment_to_dict(a: Assessment) -> Dict[str, Any]:
    data: Dict[str, Any] = {"identifier": a.identifier, "title": a.title}
    if a.description:
        data["description"] = blockify(a.description)
    if a.time_limit is not None:
        data["time_limit"] = a.time_limit
    md = a.metadata
    data["metadata"] = {
        "author": md.author,
        "course": md.course,
        "shuffle_questions": md.shuffle_questions,
        "shuffle_answers": md.shuffle_answers,
        "show_feedback": md.show_feedback,
        "allow_review": md.allow_review,
    }
    data["questions"] = [question_to_dict(q) for q in a.questions]
    return data


def dump_assessment_yaml(a: Assessment) -> str:
    return yaml.safe_dump(assessment_to_dict(a), sort_keys=False, allow_unicode=True)
