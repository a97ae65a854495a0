# tests/test_config.py
from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from quizqti.config import (
    SCHEMA_PATH, ExportOptions, QuizConfig, apply_assessment_settings, load_config,
    load_schema, parse_config,
)
from quizqti.errors import ConfigError
from quizqti.parser import parse

FULL_CONFIG = """
export:
  canvas_extensions: true
  pretty_print: false
assessment:
  title: Week 3 quiz
  identifier: week3_quiz
  time_limit: 30
  author: A. Instructor
  shuffle_answers: true
"""


def test_bundled_schema_loads():
    assert SCHEMA_PATH.is_file()
    schema = load_schema()
    assert set(schema["properties"]) == {"export", "assessment"}


def test_parse_full_config():
    cfg = parse_config(FULL_CONFIG)
    assert cfg.export == ExportOptions(canvas_extensions=True, skip_validation=False, pretty_print=False)
    assert cfg.assessment["time_limit"] == 30


def test_empty_config_gives_defaults():
    cfg = parse_config("")
    assert cfg == QuizConfig()
    assert cfg.export.pretty_print is True


def test_unknown_key_is_reported():
    with pytest.raises(ConfigError) as exc:
        parse_config("export:\n  bogus: true\n")
    assert "bogus" in str(exc.value)
    assert "export" in str(exc.value)


def test_all_schema_violations_are_reported_together():
    with pytest.raises(ConfigError) as exc:
        parse_config("assessment:\n  time_limit: thirty\n  identifier: '9 bad id'\n")
    msg = str(exc.value)
    assert "assessment.time_limit" in msg
    assert "assessment.identifier" in msg


def test_yaml_syntax_error():
    with pytest.raises(ConfigError, match="YAML parse error"):
        parse_config("export: [unclosed\n")


def test_top_level_must_be_a_mapping():
    with pytest.raises(ConfigError):
        parse_config("- just\n- a list\n")


def test_missing_config_file(tmp_path: Path):
    with pytest.raises(ConfigError, match="Cannot read config file"):
        load_config(tmp_path / "nope.yaml")


def test_load_config_from_file(tmp_path: Path):
    p = tmp_path / "quiz.yaml"
    p.write_text(FULL_CONFIG, encoding="utf-8")
    assert load_config(p).export.canvas_extensions is True


def test_export_options_from_mapping():
    assert ExportOptions.from_mapping(None) == ExportOptions()
    assert ExportOptions.from_mapping({"skip_validation": True}).skip_validation is True
    with pytest.raises(ConfigError, match="Unknown export option"):
        ExportOptions.from_mapping({"canvas": True})
    with pytest.raises(ConfigError, match="must be true or false"):
        ExportOptions.from_mapping({"pretty_print": "yes"})


def test_merged_overrides_skip_none():
    base = ExportOptions(canvas_extensions=False, pretty_print=True)
    merged = base.merged(canvas_extensions=True, skip_validation=None, pretty_print=None)
    assert merged == ExportOptions(canvas_extensions=True, skip_validation=False, pretty_print=True)


def test_apply_assessment_settings_returns_new_record():
    original = parse("title: Parsed\n1. Q\n* a")
    cfg = parse_config(FULL_CONFIG)
    updated = apply_assessment_settings(original, cfg.assessment)
    assert updated.title == "Week 3 quiz"
    assert updated.identifier == "week3_quiz"
    assert updated.time_limit == 30
    assert updated.metadata.author == "A. Instructor"
    assert updated.metadata.shuffle_answers is True
    assert updated.metadata.shuffle_questions is False
    assert updated.questions == original.questions
    assert original.title == "Parsed" and original.time_limit is None


def test_apply_empty_settings_is_identity():
    a = parse("1. Q\n* a")
    assert apply_assessment_settings(a, {}) is a
