"""
Hand-authored allow-list of the QTI 1.2 (ims_qtiasiv1p2p1.xsd) elements that
quizqti emits: attributes (required flag, enumerated values) and legal
children for each element. It is not a general XSD interpreter.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

QTI_NS = "http://www.imsglobal.org/xsd/ims_qtiasiv1p2"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
QTI_SCHEMA_LOCATION = f"{QTI_NS} http://www.imsglobal.org/xsd/ims_qtiasiv1p2p1.xsd"

YES_NO = ("Yes", "No")
CARDINALITY = ("Single", "Multiple", "Ordered")


@dataclass(frozen=True)
class AttributeDef:
    name: str
    required: bool = False
    values: Optional[Tuple[str, ...]] = None  # enumerated legal values

    @property
    def is_namespace_decl(self) -> bool:
        return self.name == "xmlns" or self.name.startswith("xmlns:")


@dataclass(frozen=True)
class ElementDef:
    name: str
    attributes: Tuple[AttributeDef, ...] = ()
    children: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class QtiSchema:
    root: str
    elements: Dict[str, ElementDef]

    def get(self, name: str) -> Optional[ElementDef]:
        return self.elements.get(name)


def _el(name: str, attributes: Iterable[AttributeDef] = (), children: Iterable[str] = ()) -> ElementDef:
    return ElementDef(name, tuple(attributes), frozenset(children))


def _attr(name: str, required: bool = False, values: Optional[Tuple[str, ...]] = None) -> AttributeDef:
    return AttributeDef(name, required, values)


IDENT = _attr("ident", required=True)
TITLE = _attr("title")
RESPIDENT = _attr("respident", required=True)
CONDITIONS = ("varequal", "vargte", "varlte", "vargt", "varlt", "and", "or", "not", "other")


def qti_1_2_schema() -> QtiSchema:
    defs = [
        _el("questestinterop",
            [_attr("xmlns", True, (QTI_NS,)), _attr("xmlns:xsi", True, (XSI_NS,))],
            ["qticomment", "assessment"]),
        _el("qticomment"),
        _el("assessment", [IDENT, _attr("title", required=True)],
            ["qticomment", "qtimetadata", "section"]),
        _el("qtimetadata", children=["qtimetadatafield"]),
        _el("itemmetadata", children=["qtimetadata", "qtimetadatafield"]),
        _el("qtimetadatafield", children=["fieldlabel", "fieldentry"]),
        _el("fieldlabel"),
        _el("fieldentry"),
        _el("section", [IDENT, TITLE], ["qtimetadata", "section", "item"]),
        _el("item", [IDENT, TITLE, _attr("maxattempts")],
            ["itemmetadata", "presentation", "resprocessing", "itemfeedback"]),
        _el("presentation", [_attr("label")],
            ["material", "response_lid", "response_str", "response_num", "response_grp"]),
        _el("material", [_attr("label")], ["mattext", "matimage"]),
        _el("mattext", [_attr("texttype", values=("text/plain", "text/html"))]),
        _el("matimage", [_attr("imagtype"), _attr("uri")]),

        # response elements
        _el("response_lid",
            [IDENT, _attr("rcardinality", values=CARDINALITY), _attr("rtiming", values=YES_NO)],
            ["material", "render_choice"]),
        _el("response_str",
            [IDENT, _attr("rcardinality", values=CARDINALITY), _attr("rtiming", values=YES_NO)],
            ["material", "render_fib"]),
        _el("response_num",
            [IDENT, _attr("rcardinality", values=CARDINALITY),
             _attr("numtype", values=("Integer", "Decimal", "Scientific"))],
            ["material", "render_fib"]),
        _el("response_grp",
            [IDENT, _attr("rcardinality", values=CARDINALITY)],
            ["material", "render_choice"]),
        _el("render_choice", [_attr("shuffle", values=YES_NO)], ["material", "response_label"]),
        _el("response_label", [IDENT], ["material"]),
        _el("render_fib",
            [_attr("fibtype", values=("String", "Integer", "Decimal", "Scientific")),
             _attr("rows"), _attr("columns"), _attr("prompt")],
            ["material", "response_label"]),

        # response processing
        _el("resprocessing", children=["outcomes", "respcondition"]),
        _el("outcomes", children=["decvar"]),
        _el("decvar",
            [_attr("varname", required=True),
             _attr("vartype", values=("Integer", "String", "Decimal", "Scientific", "Boolean")),
             _attr("minvalue"), _attr("maxvalue"), _attr("defaultval")]),
        _el("respcondition", [TITLE, _attr("continue", values=YES_NO)],
            ["conditionvar", "setvar", "displayfeedback"]),
        _el("conditionvar", children=CONDITIONS),
        _el("and", children=CONDITIONS),
        _el("or", children=CONDITIONS),
        _el("not", children=CONDITIONS),
        _el("other"),
        _el("varequal", [RESPIDENT, _attr("case", values=YES_NO)]),
        _el("vargte", [RESPIDENT]),
        _el("varlte", [RESPIDENT]),
        _el("vargt", [RESPIDENT]),
        _el("varlt", [RESPIDENT]),
        _el("setvar",
            [_attr("varname"), _attr("action", values=("Set", "Add", "Subtract", "Multiply", "Divide"))]),
        _el("displayfeedback",
            [_attr("linkrefid", required=True), _attr("feedbacktype", values=("Response", "Solution", "Hint"))]),
        _el("itemfeedback", [IDENT, TITLE, _attr("view")], ["material", "flow_mat"]),
        _el("flow_mat", children=["material", "flow_mat"]),
    ]
    return QtiSchema(root="questestinterop", elements={d.name: d for d in defs})


QTI_1_2_SCHEMA = qti_1_2_schema()
