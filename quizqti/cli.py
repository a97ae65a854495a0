#!/usr/bin/env python3
"""
Convert plain-text quizzes to QTI 1.2 packages for Canvas and other LMSs.

Usage:
  quizqti generate quiz.txt [--out build/quiz.zip] [--canvas] [--xml-only]
                            [--skip-validation] [--no-pretty] [--config quiz.yaml]
  quizqti validate build/quiz.xml
  quizqti parse quiz.txt          # dump the parsed quiz as YAML
  quizqti example                 # show the authoring syntax

Exit codes: 0 ok, 1 parse/validation failure, 2 usage or I/O problem.
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import List, Optional

from quizqti.common import dump_assessment_yaml, sanitize_identifier
from quizqti.config import QuizConfig, apply_assessment_settings, load_config
from quizqti.errors import ConfigError, QtiError
from quizqti.exporter import export_to_zip
from quizqti.generator import build_and_validate
from quizqti.model import Assessment
from quizqti.parser import parse
from quizqti.validator import parse_xml, validate_completeness, validate_tree

EXAMPLE = """\
title: Sample Quiz

1. What is 2 + 2?
a) 3
*b) 4
c) 5
d) 6
feedback: Great job!

2. Select all prime numbers:
[*] 2
[*] 3
[ ] 4
[*] 5
[ ] 6

3. What is the capital of France?
* Paris
* paris

4. What is pi to 2 decimal places?
= 3.14 ± 0.01

5. Explain the theory of relativity.
___

6. Upload your assignment.
^^^
"""

LEGEND = """\
Legend:
-------
*x)            - Correct choice (multiple choice)
x)             - Incorrect choice
[*]            - Correct choice (multiple answer)
[ ]            - Incorrect choice (multiple answer)
* answer       - Acceptable answer (short answer)
= num ± margin - Numerical answer with margin
___            - Essay question
^^^            - File upload
feedback: / correct: / incorrect: / solution:  - optional lines after a question
"""


def read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        sys.stderr.write(f"[error] Cannot read {path}: {e}\n")
        return None


def load_assessment(input_path: Path, config: QuizConfig) -> Optional[Assessment]:
    text = read_text(input_path)
    if text is None:
        return None
    assessment = parse(text)
    # The input file name is the default identifier; the config file may override it.
    assessment = dataclasses.replace(assessment, identifier=sanitize_identifier(input_path.stem))
    return apply_assessment_settings(assessment, config.assessment)


# -------------------- Commands --------------------

def cmd_generate(args: argparse.Namespace) -> int:
    config = load_config(Path(args.config)) if args.config else QuizConfig()
    options = config.export.merged(
        canvas_extensions=True if args.canvas else None,
        skip_validation=True if args.skip_validation else None,
        pretty_print=False if args.no_pretty else None,
    )

    input_path = Path(args.input)
    print(f"Reading input file: {input_path}")
    assessment = load_assessment(input_path, config)
    if assessment is None:
        return 2
    print(f"Parsed {len(assessment.questions)} questions")

    package = build_and_validate(assessment, options)
    if args.xml_only:
        out = Path(args.out) if args.out else input_path.with_suffix(".xml")
        label = "QTI XML"
    else:
        out = Path(args.out) if args.out else input_path.with_suffix(".zip")
        label = "QTI package"
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        if args.xml_only:
            out.write_text(package.assessment_xml, encoding="utf-8")
        else:
            export_to_zip(package, out)
    except OSError as e:
        sys.stderr.write(f"[error] Cannot write {out}: {e}\n")
        return 2
    print(f"Generated {label}: {out}")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    path = Path(args.file)
    print(f"Validating file: {path}")
    text = read_text(path)
    if text is None:
        return 2
    root = parse_xml(text)
    validate_tree(root)
    print("OK  valid QTI XML")
    validate_completeness(root)
    print("OK  all required elements present")
    return 0


def cmd_parse(args: argparse.Namespace) -> int:
    config = load_config(Path(args.config)) if args.config else QuizConfig()
    assessment = load_assessment(Path(args.input), config)
    if assessment is None:
        return 2
    sys.stdout.write(dump_assessment_yaml(assessment))
    return 0


def cmd_example(args: argparse.Namespace) -> int:
    print("QTI Generator - Example Input Format")
    print("====================================\n")
    print(EXAMPLE)
    print(LEGEND)
    return 0


# -------------------- Orchestration --------------------

def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="quizqti", description="Plain-text quiz to QTI 1.2 converter")
    sub = ap.add_subparsers(dest="command", required=True)

    g = sub.add_parser("generate", help="Parse a text file and generate a QTI package")
    g.add_argument("input", help="Input text file")
    g.add_argument("--out", default=None, help="Output path (default: input name with .zip or .xml)")
    g.add_argument("--canvas", action="store_true", help="Include Canvas-specific metadata")
    g.add_argument("--xml-only", action="store_true", help="Write the assessment XML only, no zip")
    g.add_argument("--skip-validation", action="store_true", help="Do not validate the generated XML")
    g.add_argument("--no-pretty", action="store_true", help="Do not indent the XML")
    g.add_argument("--config", default=None, help="YAML configuration file")
    g.set_defaults(func=cmd_generate)

    v = sub.add_parser("validate", help="Validate an existing QTI 1.2 XML file")
    v.add_argument("file", help="XML file to validate")
    v.set_defaults(func=cmd_validate)

    p = sub.add_parser("parse", help="Parse a text file and print it as YAML")
    p.add_argument("input", help="Input text file")
    p.add_argument("--config", default=None, help="YAML configuration file")
    p.set_defaults(func=cmd_parse)

    e = sub.add_parser("example", help="Show the authoring syntax")
    e.set_defaults(func=cmd_example)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    try:
        return args.func(args)
    except ConfigError as e:
        sys.stderr.write(f"[error] {e}\n")
        return 2
    except QtiError as e:
        sys.stderr.write(f"[error] {e}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
