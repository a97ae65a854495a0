"""
Write a QtiPackage as a deflated zip archive:

  imsmanifest.xml
  <identifier>.xml     (identifier read back from the assessment XML)
  ...auxiliary resources
"""

from __future__ import annotations
import io
import zipfile
from pathlib import Path
from typing import BinaryIO, Optional, Union

from quizqti.config import ExportOptions
from quizqti.errors import XmlError
from quizqti.generator import QtiPackage, build_and_validate
from quizqti.model import Assessment
from quizqti.validator import first_child, parse_xml

MANIFEST_NAME = "imsmanifest.xml"


def extract_assessment_ident(xml: str) -> str:
    root = parse_xml(xml)
    assessment = first_child(root, "assessment")
    if assessment is None:
        raise XmlError("No assessment element found")
    ident = assessment.get("ident")
    if not ident:
        raise XmlError("Assessment missing ident attribute")
    return ident


def export_to_zip(package: QtiPackage, target: Union[str, Path, BinaryIO]) -> None:
    ident = extract_assessment_ident(package.assessment_xml)
    with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as z:
        z.writestr(MANIFEST_NAME, package.manifest_xml)
        z.writestr(f"{ident}.xml", package.assessment_xml)
        for res in package.resources:
            z.writestr(res.filename, res.content)


def export_to_bytes(package: QtiPackage) -> bytes:
    buf = io.BytesIO()
    export_to_zip(package, buf)
    return buf.getvalue()


def export_to_file(assessment: Assessment, path: Union[str, Path],
                   options: Optional[ExportOptions] = None) -> Path:
    """Build, validate and archive `assessment` at `path`; returns the path written."""
    package = build_and_validate(assessment, options)
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    export_to_zip(package, out)
    return out
