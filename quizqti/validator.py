"""
Validate QTI 1.2 XML produced by the builder (or supplied by a user).

Two independent checks:
  - structural: every element, attribute and child is allowed by the
    SchemaModel in quizqti.schema (fails on the first violation)
  - completeness: questestinterop/assessment/section holds at least one
    item, and each item has an ident, question text, resprocessing and a
    response element

Both raise ValidationError. Text that is not well-formed XML raises XmlError.
"""

from __future__ import annotations
from typing import Iterator, List, Optional
import xml.etree.ElementTree as ET

from quizqti.errors import ValidationError, XmlError
from quizqti.schema import QTI_1_2_SCHEMA, QtiSchema

RESPONSE_ELEMENTS = ("response_lid", "response_str", "response_num", "response_grp")


# ---------------- XML helpers ----------------

def local_name(tag: str) -> str:
    """Strip an ElementTree '{namespace}' prefix."""
    return tag.rsplit("}", 1)[-1] if tag.startswith("{") else tag


def child_elements(el: ET.Element, name: Optional[str] = None) -> Iterator[ET.Element]:
    for child in el:
        if not isinstance(child.tag, str):
            continue  # comments / processing instructions
        if name is None or local_name(child.tag) == name:
            yield child


def first_child(el: ET.Element, name: str) -> Optional[ET.Element]:
    return next(child_elements(el, name), None)


def attributes(el: ET.Element) -> dict:
    return {local_name(k) if k.startswith("{") else k: v for k, v in el.attrib.items()}


def parse_xml(xml: str) -> ET.Element:
    try:
        return ET.fromstring(xml.encode("utf-8"))
    except ET.ParseError as e:
        raise XmlError(f"Failed to parse XML: {e}") from e


# ---------------- Structural check ----------------

def validate_element(el: ET.Element, expected: str, schema: QtiSchema) -> None:
    name = local_name(el.tag)
    if name != expected:
        raise ValidationError(f"Expected element '{expected}', found '{name}'")

    el_def = schema.get(name)
    if el_def is None:
        raise ValidationError(f"Unknown element: {name}")

    attrs = attributes(el)
    for attr_def in el_def.attributes:
        # namespace declarations are consumed by the XML parser
        if attr_def.is_namespace_decl:
            continue
        value = attrs.get(attr_def.name)
        if value is None:
            if attr_def.required:
                raise ValidationError(
                    f"Missing required attribute '{attr_def.name}' on element '{name}'"
                )
            continue
        if attr_def.values is not None and value not in attr_def.values:
            raise ValidationError(
                f"Invalid value '{value}' for attribute '{attr_def.name}' on element '{name}'. "
                f"Valid values: {list(attr_def.values)}"
            )

    for child in child_elements(el):
        child_name = local_name(child.tag)
        if child_name not in el_def.children:
            raise ValidationError(f"Unexpected child element '{child_name}' in '{name}'")
        validate_element(child, child_name, schema)


def validate_tree(root: ET.Element, schema: QtiSchema = QTI_1_2_SCHEMA) -> None:
    validate_element(root, schema.root, schema)


def validate_xml(xml: str, schema: QtiSchema = QTI_1_2_SCHEMA) -> ET.Element:
    """Parse and structurally validate; returns the parsed root."""
    root = parse_xml(xml)
    validate_tree(root, schema)
    return root


# ---------------- Completeness check ----------------

def _require(el: ET.Element, name: str, message: str) -> ET.Element:
    found = first_child(el, name)
    if found is None:
        raise ValidationError(message)
    return found


def validate_item(item: ET.Element) -> None:
    if not item.get("ident"):
        raise ValidationError("Item missing required 'ident' attribute")
    presentation = _require(item, "presentation", "Item missing 'presentation' element")
    _require(item, "resprocessing", "Item missing 'resprocessing' element")
    material = _require(presentation, "material", "Presentation missing 'material' element")
    mattext = _require(material, "mattext", "Material missing 'mattext' element")
    if not (mattext.text or "").strip():
        raise ValidationError(f"Question text cannot be empty (item {item.get('ident')})")
    if not any(first_child(presentation, r) is not None for r in RESPONSE_ELEMENTS):
        raise ValidationError(f"Item presentation missing response element (item {item.get('ident')})")


def validate_completeness(root: ET.Element) -> None:
    name = local_name(root.tag)
    if name != "questestinterop":
        raise ValidationError(f"Root element must be 'questestinterop', found '{name}'")
    assessment = _require(root, "assessment", "Missing 'assessment' element")
    section = _require(assessment, "section", "Missing 'section' element")
    items: List[ET.Element] = list(child_elements(section, "item"))
    if not items:
        raise ValidationError("Assessment must contain at least one item")
    for item in items:
        validate_item(item)


def validate_document(xml: str, schema: QtiSchema = QTI_1_2_SCHEMA) -> ET.Element:
    root = validate_xml(xml, schema)
    validate_completeness(root)
    return root
