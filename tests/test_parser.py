# tests/test_parser.py
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Repo root on sys.path so "quizqti.*" imports work when running pytest at repo root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from quizqti.errors import InvalidFormat, ParseError
from quizqti.model import (
    Essay, FileUpload, MultipleAnswer, MultipleChoice, Numerical, ShortAnswer,
)
from quizqti.parser import DEFAULT_TITLE, extract_title, parse
from quizqti.registry import discover_question_types

SAMPLE_QUIZ = """
title: Sample Quiz

1. What is 2 + 2?
a) 3
*b) 4
c) 5
d) 6

2. What is the capital of France?
*a) Paris
b) London
c) Berlin
d) Madrid
"""


def test_end_to_end_multiple_choice():
    a = parse("title: Sample\n1. 2+2?\na) 3\n*b) 4\nc) 5")
    assert a.title == "Sample"
    assert len(a.questions) == 1
    q = a.questions[0]
    assert q.text == "2+2?"
    assert isinstance(q.question_type, MultipleChoice)
    assert [c.text for c in q.question_type.choices] == ["3", "4", "5"]
    assert [c.correct for c in q.question_type.choices] == [False, True, False]


def test_parse_multiple_choice_questions():
    a = parse(SAMPLE_QUIZ)
    assert a.title == "Sample Quiz"
    assert len(a.questions) == 2
    q1, q2 = a.questions
    assert q1.text == "What is 2 + 2?"
    assert len(q1.question_type.choices) == 4
    assert q1.question_type.choices[1].correct
    assert q2.question_type.choices[0].text == "Paris"
    assert q1.question_type.shuffle is True
    assert q1.points == 1.0


def test_question_count_matches_numbered_blocks():
    text = "\n".join(f"{n}. Question {n}\n* answer {n}\n" for n in range(1, 8))
    a = parse(text)
    assert len(a.questions) == 7
    assert [q.text for q in a.questions] == [f"Question {n}" for n in range(1, 8)]


@pytest.mark.parametrize("body,found", [
    ("a) x\nb) y\nc) z", 0),
    ("*a) x\n*b) y\nc) z", 2),
    ("*a) x\n*b) y\n*c) z", 3),
])
def test_multiple_choice_requires_exactly_one_correct(body: str, found: int):
    with pytest.raises(ParseError) as exc:
        parse(f"1. Pick one\n{body}")
    assert f"found {found}" in exc.value.message
    assert not isinstance(exc.value, InvalidFormat)


def test_multiple_answer_preserves_order_and_correctness():
    a = parse("1. Select all prime numbers:\n[*] 2\n[*] 3\n[ ] 4\n[*] 5\n")
    qt = a.questions[0].question_type
    assert isinstance(qt, MultipleAnswer)
    assert [c.text for c in qt.choices] == ["2", "3", "4", "5"]
    assert [c.correct for c in qt.choices] == [True, True, False, True]
    assert qt.partial_credit is True


def test_multiple_answer_allows_no_correct_and_empty_brackets():
    a = parse("1. None of these\n[] red\n[ ] blue")
    qt = a.questions[0].question_type
    assert [c.correct for c in qt.choices] == [False, False]


def test_short_answer():
    a = parse("1. Largest planet?\n* Jupiter\n* jupiter\n\n2. A primary color\n* red\n* blue\n* yellow\n")
    q1, q2 = a.questions
    assert isinstance(q1.question_type, ShortAnswer)
    assert [x.text for x in q1.question_type.answers] == ["Jupiter", "jupiter"]
    assert all(x.weight == 1.0 for x in q1.question_type.answers)
    assert q1.question_type.case_sensitive is False
    assert len(q2.question_type.answers) == 3


@pytest.mark.parametrize("line,answer,margin", [
    ("= 3.14 ± 0.01", 3.14, 0.01),
    ("= 42", 42.0, None),
    ("=-1.5", -1.5, None),
    ("= +7 ± 2", 7.0, 2.0),
])
def test_numerical(line: str, answer: float, margin):
    qt = parse(f"1. Number?\n{line}").questions[0].question_type
    assert isinstance(qt, Numerical)
    assert qt.answer == pytest.approx(answer)
    if margin is None:
        assert qt.margin is None
    else:
        assert qt.margin == pytest.approx(margin)
    assert qt.min is None and qt.max is None


def test_essay_and_file_upload():
    a = parse("1. Explain.\n___\n\n2. Upload.\n^^^^^\n")
    essay, upload = (q.question_type for q in a.questions)
    assert isinstance(essay, Essay)
    assert essay.rich_text is True and essay.expected_length is None
    assert isinstance(upload, FileUpload)
    assert upload.allowed_extensions == ("pdf", "docx", "txt")


def test_classification_priority_order():
    names = [m.TYPE_NAME for m in discover_question_types()]
    assert names == [
        "multiple_choice", "multiple_answer", "short_answer", "numerical", "essay", "file_upload",
    ]
    # "*a)" is also a short-answer line, multiple choice is tried first
    qt = parse("1. Q\n*a) yes\nb) no").questions[0].question_type
    assert isinstance(qt, MultipleChoice)


def test_blank_lines_between_question_and_answers():
    a = parse("1. Q\n\n\na) x\n\n*b) y\n")
    assert len(a.questions[0].question_type.choices) == 2


def test_unclassifiable_line_reports_index_and_text():
    with pytest.raises(InvalidFormat) as exc:
        parse("title: T\n\n1. Question\n\nwhat is this?\n")
    assert exc.value.line == 4
    assert "what is this?" in exc.value.message
    assert "line 4" in str(exc.value)


def test_next_question_line_cannot_be_a_body():
    with pytest.raises(InvalidFormat) as exc:
        parse("1. First\n2. Second\n* x")
    assert exc.value.line == 1


def test_no_questions_is_a_parse_error():
    with pytest.raises(ParseError) as exc:
        parse("title: Empty\n\nJust some notes.\n")
    assert "No questions" in str(exc.value)


def test_question_without_body_is_a_parse_error():
    with pytest.raises(ParseError):
        parse("1. Dangling question\n\n")


@pytest.mark.parametrize("text,title", [
    ("title: Colon\n# Hash\n1. Q\n* a", "Colon"),
    ("# Hash\ntitle: Colon\n1. Q\n* a", "Hash"),
    ("TITLE:   Upper  \n1. Q\n* a", "Upper"),
    ("## Deep heading\n1. Q\n* a", "Deep heading"),
    ("1. Q\n* a", DEFAULT_TITLE),
    ("\n\n\n\n\ntitle: Too late\n1. Q\n* a", DEFAULT_TITLE),
])
def test_title_extraction(text: str, title: str):
    assert parse(text).title == title


def test_extract_title_scans_first_five_lines_only():
    lines = ["", "", "", "", "# Fifth"]
    assert extract_title(lines) == "Fifth"
    assert extract_title([""] + lines) is None


def test_feedback_and_solution():
    a = parse(
        "1. 2+2?\na) 3\n*b) 4\n"
        "Feedback: Count.\ncorrect: Yes!\nINCORRECT: No.\nsolution: It is 4.\n"
        "\n2. Next\n* x\n"
    )
    q1, q2 = a.questions
    assert q1.feedback is not None
    assert q1.feedback.general == "Count."
    assert q1.feedback.correct == "Yes!"
    assert q1.feedback.incorrect == "No."
    assert q1.solution == "It is 4."
    assert q2.feedback is None and q2.solution is None


def test_solution_alone_does_not_create_feedback():
    q = parse("1. Q\n* a\nsolution: a\n").questions[0]
    assert q.feedback is None
    assert q.solution == "a"


def test_unrecognized_line_after_body_is_skipped():
    a = parse("1. Q\n* a\nsome stray note\n2. R\n* b\n")
    assert len(a.questions) == 2


def test_generated_identifiers_are_unique():
    a = parse(SAMPLE_QUIZ)
    ids = [q.id for q in a.questions] + [c.id for q in a.questions for c in q.question_type.choices]
    assert len(ids) == len(set(ids))
    assert a.identifier.startswith("assessment_")
    assert all(q.id.startswith("question_") for q in a.questions)


@pytest.mark.parametrize("sep", ["\u2028", "\x85"], ids=["line-separator", "next-line"])
def test_unicode_line_breaks_stay_inside_question_text(sep: str):
    a = parse(f"1. Growth is 5{sep}per year?\n* yes\n")
    assert len(a.questions) == 1
    assert a.questions[0].text == f"Growth is 5{sep}per year?"
    assert isinstance(a.questions[0].question_type, ShortAnswer)


def test_crlf_line_endings():
    a = parse("title: Windows\r\n1. Q\r\n*a) yes\r\nb) no\r\n")
    assert a.title == "Windows"
    assert [c.text for c in a.questions[0].question_type.choices] == ["yes", "no"]


def test_numbered_line_without_text_still_opens_a_question():
    a = parse("1. \n* a\n2. Real\n* b\n")
    assert [q.text for q in a.questions] == ["", "Real"]
    assert [q.question_type.answers[0].text for q in a.questions] == ["a", "b"]


@pytest.mark.parametrize("ch", ["\x01", "\x0c", "\x1e", "\uFFFE"])
def test_characters_not_allowed_in_xml_are_rejected(ch: str):
    with pytest.raises(ParseError) as exc:
        parse(f"title: T\n1. Bad{ch}text\n* a\n")
    assert exc.value.line == 1
    assert "not allowed" in exc.value.message
