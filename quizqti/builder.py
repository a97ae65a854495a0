"""
Build a QTI 1.2 `questestinterop` element tree from an Assessment.

Layout:
  questestinterop
    assessment (ident, title) [+ qtimetadata with canvas extensions]
      section
        item per question
          [itemmetadata]  question_type + points_possible (canvas extensions)
          presentation    material/mattext + one response element
          resprocessing   outcomes/decvar SCORE + respcondition(s)
          itemfeedback    correct / incorrect, when the question has them

Response mapping per question type:
  multiple_choice  response_lid Single   one respcondition per choice, continue=No
  true_false       response_lid Single   as multiple choice over True/False
  multiple_answer  response_lid Multiple one respcondition per choice, continue=Yes, Add
  short_answer     response_str          one respcondition per accepted answer
  numerical        response_num Decimal  single zero-score respcondition
  essay            response_str          single zero-score respcondition
  file_upload      response_str          single zero-score respcondition
"""

from __future__ import annotations

import uuid
from typing import Callable, Dict, Optional, Sequence, Tuple
import xml.etree.ElementTree as ET

from quizqti.errors import ConfigError
from quizqti.model import (
    Assessment, Choice, Essay, FileUpload, MultipleAnswer, MultipleChoice,
    Numerical, Question, QuestionType, ShortAnswer, TrueFalse,
)
from quizqti.schema import QTI_NS, QTI_SCHEMA_LOCATION, XSI_NS

CANVAS_TYPE_LABELS = {
    MultipleChoice: "multiple_choice_question",
    TrueFalse: "true_false_question",
    MultipleAnswer: "multiple_answers_question",
    ShortAnswer: "short_answer_question",
    Numerical: "numerical_question",
    Essay: "essay_question",
    FileUpload: "file_upload_question",
}


# -------------------- QTI 1.2 building helpers --------------------

def mattext(parent: ET.Element, text: str, texttype: str = "text/html") -> ET.Element:
    material = ET.SubElement(parent, "material")
    m = ET.SubElement(material, "mattext", {"texttype": texttype})
    m.text = text if text is not None else ""
    return m

def metadata_field(parent: ET.Element, label: str, entry: str) -> ET.Element:
    field = ET.SubElement(parent, "qtimetadatafield")
    ET.SubElement(field, "fieldlabel").text = label
    ET.SubElement(field, "fieldentry").text = entry
    return field

def response_ident(question: Question) -> str:
    return f"response_{question.id}"

def score_text(score: float) -> str:
    return str(float(score))

def add_display_feedback(respcondition: ET.Element, linkrefid: str):
    ET.SubElement(respcondition, "displayfeedback", {"feedbacktype": "Response", "linkrefid": linkrefid})

def has_feedback(question: Question, kind: str) -> bool:
    return question.feedback is not None and bool(getattr(question.feedback, kind))

def true_false_choices(question: Question, qt: TrueFalse) -> Tuple[Choice, Choice]:
    """The two synthesized choices a true/false question is rendered with."""
    return (
        Choice("True", correct=qt.correct_answer, id=f"{question.id}_true"),
        Choice("False", correct=not qt.correct_answer, id=f"{question.id}_false"),
    )

def choices_for(question: Question) -> Sequence[Choice]:
    qt = question.question_type
    if isinstance(qt, TrueFalse):
        return true_false_choices(question, qt)
    return qt.choices


# -------------------- Presentation --------------------

def build_response_lid(parent: ET.Element, question: Question, choices: Sequence[Choice],
                       rcardinality: str, shuffle: bool) -> ET.Element:
    response = ET.SubElement(parent, "response_lid",
                             {"ident": response_ident(question), "rcardinality": rcardinality})
    render = ET.SubElement(response, "render_choice", {"shuffle": "Yes" if shuffle else "No"})
    for choice in choices:
        label = ET.SubElement(render, "response_label", {"ident": choice.id})
        mattext(label, choice.text)
    return response

def build_response_str(parent: ET.Element, question: Question) -> ET.Element:
    response = ET.SubElement(parent, "response_str",
                             {"ident": response_ident(question), "rcardinality": "Single"})
    render = ET.SubElement(response, "render_fib")
    qt = question.question_type
    if isinstance(qt, ShortAnswer):
        render.set("columns", "40")
    elif isinstance(qt, Essay):
        render.set("rows", "10")
        render.set("columns", "80")
    return response

def build_response_num(parent: ET.Element, question: Question) -> ET.Element:
    response = ET.SubElement(parent, "response_num",
                             {"ident": response_ident(question), "rcardinality": "Single", "numtype": "Decimal"})
    ET.SubElement(response, "render_fib")
    return response

def _present_multiple_choice(p: ET.Element, q: Question) -> ET.Element:
    return build_response_lid(p, q, q.question_type.choices, "Single", q.question_type.shuffle)

def _present_true_false(p: ET.Element, q: Question) -> ET.Element:
    return build_response_lid(p, q, choices_for(q), "Single", False)

def _present_multiple_answer(p: ET.Element, q: Question) -> ET.Element:
    return build_response_lid(p, q, q.question_type.choices, "Multiple", False)


# -------------------- Response processing --------------------

def build_respcondition(parent: ET.Element, question: Question, value: Optional[str], score: float,
                        action: str = "Set", cont: Optional[str] = "No",
                        case: Optional[str] = None) -> ET.Element:
    """One respcondition: varequal on `value` (or <other/> when None) -> setvar SCORE."""
    attrs = {"continue": cont} if cont else {}
    rc = ET.SubElement(parent, "respcondition", attrs)
    cv = ET.SubElement(rc, "conditionvar")
    if value is None:
        ET.SubElement(cv, "other")
    else:
        ve_attrs = {"respident": response_ident(question)}
        if case:
            ve_attrs["case"] = case
        ET.SubElement(cv, "varequal", ve_attrs).text = value
    ET.SubElement(rc, "setvar", {"varname": "SCORE", "action": action}).text = score_text(score)
    return rc

def _choice_conditions(rp: ET.Element, q: Question) -> None:
    """Single-select: full points for the correct choice, first match stops."""
    for choice in choices_for(q):
        rc = build_respcondition(rp, q, choice.id, q.points if choice.correct else 0.0)
        if choice.correct and has_feedback(q, "correct"):
            add_display_feedback(rc, "correct")
        elif not choice.correct and has_feedback(q, "incorrect"):
            add_display_feedback(rc, "incorrect")

def _multiple_answer_conditions(rp: ET.Element, q: Question) -> None:
    """
    Conditions accumulate (continue=Yes). A correct choice adds the full
    points, or points / 2 with partial credit: a fixed halving, not a
    share of the number of correct choices.
    """
    qt: MultipleAnswer = q.question_type
    for choice in qt.choices:
        if not choice.correct:
            score = 0.0
        elif qt.partial_credit:
            score = q.points / 2.0
        else:
            score = q.points
        build_respcondition(rp, q, choice.id, score, action="Add", cont="Yes")

def _short_answer_conditions(rp: ET.Element, q: Question) -> None:
    qt: ShortAnswer = q.question_type
    case = "Yes" if qt.case_sensitive else "No"
    for answer in qt.answers:
        rc = build_respcondition(rp, q, answer.text, q.points * answer.weight, case=case)
        if has_feedback(q, "correct"):
            add_display_feedback(rc, "correct")

def _zero_score_condition(rp: ET.Element, q: Question) -> None:
    # TODO: numerical answers should score through a vargte/varlte pair built from margin/min/max.
    build_respcondition(rp, q, None, 0, cont=None)


# -------------------- Dispatch --------------------

PresentFn = Callable[[ET.Element, Question], ET.Element]
ConditionFn = Callable[[ET.Element, Question], None]

ITEM_BUILDERS: Dict[type, Tuple[PresentFn, ConditionFn]] = {
    MultipleChoice: (_present_multiple_choice, _choice_conditions),
    TrueFalse: (_present_true_false, _choice_conditions),
    MultipleAnswer: (_present_multiple_answer, _multiple_answer_conditions),
    ShortAnswer: (build_response_str, _short_answer_conditions),
    Numerical: (build_response_num, _zero_score_condition),
    Essay: (build_response_str, _zero_score_condition),
    FileUpload: (build_response_str, _zero_score_condition),
}

def _builders_for(qt: QuestionType) -> Tuple[PresentFn, ConditionFn]:
    try:
        return ITEM_BUILDERS[type(qt)]
    except KeyError:
        raise ConfigError(f"No QTI mapping for question type {type(qt).__name__}") from None


# -------------------- Item --------------------

def item_title(question: Question) -> str:
    return question.title or f"Question {question.id[9:15]}"

def build_itemmetadata(parent: ET.Element, question: Question) -> ET.Element:
    itemmetadata = ET.SubElement(parent, "itemmetadata")
    qtimetadata = ET.SubElement(itemmetadata, "qtimetadata")
    metadata_field(qtimetadata, "question_type", CANVAS_TYPE_LABELS[type(question.question_type)])
    metadata_field(qtimetadata, "points_possible", score_text(question.points))
    return itemmetadata

def build_presentation(parent: ET.Element, question: Question) -> ET.Element:
    present, _ = _builders_for(question.question_type)
    presentation = ET.SubElement(parent, "presentation")
    mattext(presentation, question.text)
    present(presentation, question)
    return presentation

def build_resprocessing(parent: ET.Element, question: Question) -> ET.Element:
    _, conditions = _builders_for(question.question_type)
    resprocessing = ET.SubElement(parent, "resprocessing")
    outcomes = ET.SubElement(resprocessing, "outcomes")
    ET.SubElement(outcomes, "decvar", {"varname": "SCORE", "vartype": "Decimal",
                                       "minvalue": "0", "maxvalue": score_text(question.points)})
    conditions(resprocessing, question)
    return resprocessing

def build_itemfeedback(parent: ET.Element, ident: str, text: str) -> ET.Element:
    fb = ET.SubElement(parent, "itemfeedback", {"ident": ident, "view": "All"})
    mattext(fb, text)
    return fb

def build_item(question: Question, canvas_extensions: bool = False) -> ET.Element:
    item = ET.Element("item", {"ident": question.id, "title": item_title(question)})
    if canvas_extensions:
        build_itemmetadata(item, question)
    build_presentation(item, question)
    build_resprocessing(item, question)
    if question.feedback is not None:
        if question.feedback.correct:
            build_itemfeedback(item, "correct", question.feedback.correct)
        if question.feedback.incorrect:
            build_itemfeedback(item, "incorrect", question.feedback.incorrect)
    return item


# -------------------- Assessment --------------------

def build_qtimetadata(parent: ET.Element, assessment: Assessment) -> ET.Element:
    qtimetadata = ET.SubElement(parent, "qtimetadata")
    if assessment.time_limit is not None:
        metadata_field(qtimetadata, "time_limit", str(assessment.time_limit))
    if assessment.metadata.shuffle_questions:
        metadata_field(qtimetadata, "shuffle_questions", "true")
    if assessment.metadata.shuffle_answers:
        metadata_field(qtimetadata, "shuffle_answers", "true")
    return qtimetadata

def build_section(parent: ET.Element, assessment: Assessment, canvas_extensions: bool = False) -> ET.Element:
    section = ET.SubElement(parent, "section", {"ident": f"section_{uuid.uuid4()}", "title": "Main Section"})
    for question in assessment.questions:
        section.append(build_item(question, canvas_extensions))
    return section

def build_questestinterop(assessment: Assessment, canvas_extensions: bool = False) -> ET.Element:
    root = ET.Element("questestinterop", {
        "xmlns": QTI_NS,
        "xmlns:xsi": XSI_NS,
        "xsi:schemaLocation": QTI_SCHEMA_LOCATION,
    })
    assessment_el = ET.SubElement(root, "assessment", {"ident": assessment.identifier, "title": assessment.title})
    if canvas_extensions:
        build_qtimetadata(assessment_el, assessment)
    build_section(assessment_el, assessment, canvas_extensions)
    return root

build = build_questestinterop
