"""
Export options and the optional YAML configuration file.

  export:
    canvas_extensions: true
    skip_validation: false
    pretty_print: true
  assessment:
    title: Week 3 quiz
    identifier: week3_quiz
    time_limit: 30
    shuffle_answers: true

The file is validated against schemas/export-config.schema.json with
jsonschema; every problem is reported in a single ConfigError.
"""

from __future__ import annotations
import dataclasses
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from jsonschema import Draft202012Validator

from quizqti.errors import ConfigError
from quizqti.model import Assessment

SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "export-config.schema.json"

METADATA_KEYS = ("author", "course", "shuffle_questions", "shuffle_answers", "show_feedback", "allow_review")
ASSESSMENT_KEYS = ("title", "identifier", "description", "time_limit")


@dataclass(frozen=True)
class ExportOptions:
    canvas_extensions: bool = False
    skip_validation: bool = False
    pretty_print: bool = True

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ExportOptions":
        data = dict(data or {})
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown export option(s): {', '.join(unknown)}")
        for k, v in data.items():
            if not isinstance(v, bool):
                raise ConfigError(f"Export option '{k}' must be true or false, got {v!r}")
        return cls(**data)

    def merged(self, **overrides: Optional[bool]) -> "ExportOptions":
        """Copy with every non-None override applied (CLI flags over file values)."""
        return dataclasses.replace(self, **{k: v for k, v in overrides.items() if v is not None})


@dataclass(frozen=True)
class QuizConfig:
    export: ExportOptions = ExportOptions()
    assessment: Mapping[str, Any] = dataclasses.field(default_factory=dict)


# ---------------- Schema loading ----------------

def load_schema(path: Path = SCHEMA_PATH) -> dict:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(f"Schema not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Schema JSON is invalid: {path}\n{e}") from e


def validate_config_data(data: Any, schema: Optional[dict] = None) -> None:
    validator = Draft202012Validator(schema or load_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: (list(map(str, e.path)), e.message))
    if errors:
        lines = []
        for err in errors:
            loc = ".".join(str(p) for p in err.path) or "(root)"
            lines.append(f"  - {loc}: {err.message}")
        raise ConfigError("Invalid configuration:\n" + "\n".join(lines))


# ---------------- YAML loading ----------------

def parse_config(text: str) -> QuizConfig:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML parse error: {e}") from e
    if data is None:
        data = {}
    validate_config_data(data)
    return QuizConfig(
        export=ExportOptions.from_mapping(data.get("export")),
        assessment=dict(data.get("assessment") or {}),
    )


def load_config(path: Path) -> QuizConfig:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    return parse_config(text)


def apply_assessment_settings(assessment: Assessment, settings: Mapping[str, Any]) -> Assessment:
    """Return a copy of `assessment` with the config's assessment section applied."""
    top = {k: settings[k] for k in ASSESSMENT_KEYS if k in settings}
    meta = {k: settings[k] for k in METADATA_KEYS if k in settings}
    if meta:
        top["metadata"] = dataclasses.replace(assessment.metadata, **meta)
    return dataclasses.replace(assessment, **top) if top else assessment
