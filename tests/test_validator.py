"""Tests for the template validator and the validation report."""

import json

import pytest

from cursor_templates.errors import TemplateParseError
from cursor_templates.models.template import Template
from cursor_templates.store.template_store import StoreEntry
from cursor_templates.validation import summarize_validation, write_validation_report
from cursor_templates.validation.validator import validate_entry, validate_template


def _validate(data: dict):
    return validate_template(Template.from_dict(data))


def test_complete_template_is_clean(make_template):
    result = _validate(make_template())
    assert result.passed
    assert result.errors == []
    assert result.warnings == []


def test_version_format(make_template):
    assert _validate(make_template(version="1.0.0")).passed

    result = _validate(make_template(version="1.0"))
    assert result.errors == ["Invalid version format. Use semantic versioning (x.y.z)"]

    assert not _validate(make_template(version="1.0.0-beta")).passed
    assert not _validate(make_template(version="v1.0.0")).passed


def test_missing_required_fields():
    result = _validate({})
    assert result.errors == [
        "Missing required field: name",
        "Missing required field: description",
        "Missing required field: version",
        "Missing required field: rules",
    ]


def test_empty_string_counts_as_missing(make_template):
    result = _validate(make_template(description=""))
    assert "Missing required field: description" in result.errors


def test_missing_rules_context_warns(make_template):
    data = make_template()
    del data["rules"]["context"]
    result = _validate(data)
    assert result.passed
    assert result.warnings == ["Missing rules.context"]


def test_empty_rules_object_warns_for_each_field(make_template):
    result = _validate(make_template(rules={}))
    assert result.passed
    assert result.warnings == [
        "Missing rules.context",
        "Missing rules.style",
        "Missing rules.restrictions",
        "Missing rules.preferences",
    ]


def test_tags_files_and_commands_warnings(make_template):
    result = _validate(make_template(tags=[], files=None, commands=None))
    assert result.passed
    assert "No tags specified" in result.warnings
    assert "No files specified" in result.warnings
    assert "No commands specified" in result.warnings


def test_empty_commands_warn_for_install_and_dev(make_template):
    result = _validate(make_template(commands={"build": "make"}))
    assert result.warnings == ["No install command specified", "No dev command specified"]


def test_invalid_file_entry(make_template):
    result = _validate(make_template(files=[{"path": "src/a.txt"}]))
    assert result.errors == [f"Invalid file entry: {json.dumps({'path': 'src/a.txt'})}"]
    assert result.issues[0].path == "files[0]"


def test_short_cursorrules_warns(make_template):
    result = _validate(make_template(files=[{"path": ".cursorrules", "content": "Be nice."}]))
    assert result.passed
    assert result.warnings == [".cursorrules file seems too short"]


def test_parse_failure_is_single_error(tmp_path):
    error = TemplateParseError(tmp_path / "template.json", "Expecting value")
    entry = StoreEntry(directory="broken", path=tmp_path / "template.json", error=error)

    result = validate_entry(entry)

    assert result.name == "broken"
    assert result.errors == ["Failed to parse template: Expecting value"]


def test_summary_counts(make_template):
    results = [
        _validate(make_template()),
        _validate(make_template(tags=[])),
        _validate(make_template(version="1.0")),
    ]
    summary = summarize_validation(results)
    assert (summary.total, summary.valid, summary.warnings, summary.invalid) == (3, 1, 1, 1)
    assert not summary.passed


def test_write_validation_report(tmp_path, make_template):
    path = tmp_path / "template-test-report.json"
    summary = write_validation_report(path, [_validate(make_template())])

    report = json.loads(path.read_text(encoding="utf-8"))
    assert summary.passed
    assert report["summary"] == {"total": 1, "valid": 1, "warnings": 0, "invalid": 0}
    assert report["results"][0]["name"] == "react-typescript-vite"
    assert report["timestamp"].endswith("Z")


@pytest.mark.parametrize("path", ["/etc/passwd", "../outside.txt", "src/../../outside.txt"])
def test_file_path_outside_project_is_an_error(make_template, path):
    result = _validate(make_template(files=[{"path": path, "content": "x"}]))
    assert result.errors == [f"File path must stay inside the project: {path}"]
    assert result.issues[0].path == "files[0].path"
