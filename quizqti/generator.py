"""
Serialize an Assessment to QTI 1.2 XML plus an IMS content-package manifest.

  package = build_and_validate(assessment, ExportOptions(canvas_extensions=True))
  package.assessment_xml   # questestinterop document
  package.manifest_xml     # imsmanifest.xml, references <identifier>.xml
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import xml.etree.ElementTree as ET

from quizqti.builder import build_questestinterop
from quizqti.common import is_safe_identifier
from quizqti.config import ExportOptions
from quizqti.errors import ValidationError
from quizqti.model import Assessment
from quizqti.validator import validate_document

CC_NS = "http://www.imsglobal.org/xsd/imsccv1p1/imscp_v1p1"
CC_SCHEMA_LOCATION = (
    "http://www.imsglobal.org/xsd/imsccv1p1/imscp_v1p1 "
    "http://www.imsglobal.org/profile/cc/ccv1p1/ccv1p1_imscp_v1p2_v1p0.xsd"
)


@dataclass(frozen=True)
class QtiResource:
    filename: str
    content: bytes


@dataclass(frozen=True)
class QtiPackage:
    assessment_xml: str
    manifest_xml: str
    resources: List[QtiResource] = field(default_factory=list)


def to_xml_string(root: ET.Element, pretty_print: bool = True) -> str:
    if pretty_print:
        ET.indent(root, space="  ")
    return ET.tostring(root, encoding="utf-8", xml_declaration=True).decode("utf-8")


def assessment_filename(assessment: Assessment) -> str:
    return f"{assessment.identifier}.xml"


def generate(assessment: Assessment, options: Optional[ExportOptions] = None) -> str:
    """QTI XML for the assessment, without validation or packaging."""
    options = options or ExportOptions()
    root = build_questestinterop(assessment, canvas_extensions=options.canvas_extensions)
    return to_xml_string(root, options.pretty_print)


def generate_manifest(assessment: Assessment, pretty_print: bool = True) -> str:
    manifest = ET.Element(
        "manifest",
        {
            "identifier": f"{assessment.identifier}_manifest",
            "xmlns": CC_NS,
            "xmlns:lom": "http://ltsc.ieee.org/xsd/imsccv1p1/LOM/resource",
            "xmlns:lomimscc": "http://ltsc.ieee.org/xsd/imsccv1p1/LOM/manifest",
            "xmlns:xsi": "http://www.w3.org/2001/XMLSchema-instance",
            "xsi:schemaLocation": CC_SCHEMA_LOCATION,
        },
    )
    metadata = ET.SubElement(manifest, "metadata")
    ET.SubElement(metadata, "schema").text = "IMS Content"
    ET.SubElement(metadata, "schemaversion").text = "1.1.3"
    ET.SubElement(manifest, "organizations")
    resources = ET.SubElement(manifest, "resources")
    href = assessment_filename(assessment)
    res = ET.SubElement(resources, "resource", {
        "identifier": f"{assessment.identifier}_resource",
        "type": "imsqti_xmlv1p2",
        "href": href,
    })
    ET.SubElement(res, "file", {"href": href})
    return to_xml_string(manifest, pretty_print)


def generate_package(assessment: Assessment, options: Optional[ExportOptions] = None) -> QtiPackage:
    options = options or ExportOptions()
    return QtiPackage(
        assessment_xml=generate(assessment, options),
        manifest_xml=generate_manifest(assessment, options.pretty_print),
    )


def build_and_validate(assessment: Assessment, options: Optional[ExportOptions] = None) -> QtiPackage:
    """
    Generate the package and, unless options.skip_validation, run the
    structural and completeness checks on the serialized XML.
    """
    options = options or ExportOptions()
    # The identifier names a file inside the archive, so it is checked even without validation.
    if not is_safe_identifier(assessment.identifier):
        raise ValidationError(
            f"Assessment identifier {assessment.identifier!r} is not XML-id/filesystem safe"
        )
    package = generate_package(assessment, options)
    if not options.skip_validation:
        validate_document(package.assessment_xml)
    return package
