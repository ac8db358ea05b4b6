"""Tests for the file-based template store."""

import json
import logging

import pytest

from cursor_templates.errors import StoreError, TemplateNotFoundError, TemplateParseError
from cursor_templates.models.template import Template
from cursor_templates.store.template_store import TemplateStore


def test_load_all_in_directory_order(home, make_template, write_template):
    write_template(make_template(name="vue-vite"))
    write_template(make_template(name="angular-app"))
    store = TemplateStore(home / "templates")

    names = [t.name for t in store.load_all()]
    assert names == ["angular-app", "vue-vite"]


def test_corrupt_descriptor_is_skipped(home, make_template, write_template, caplog, monkeypatch):
    monkeypatch.setattr(logging.getLogger("cursor_templates"), "propagate", True)
    write_template(make_template(name="good"))
    write_template("{not json", directory="broken")
    store = TemplateStore(home / "templates")

    with caplog.at_level(logging.WARNING):
        templates = store.load_all()

    assert [t.name for t in templates] == ["good"]
    assert "Skipping invalid template in broken" in caplog.text


def test_load_entries_keeps_parse_failures(home, make_template, write_template):
    write_template(make_template(name="good"))
    write_template(json.dumps([1, 2]), directory="array")
    entries = TemplateStore(home / "templates").load_entries()

    assert [e.directory for e in entries] == ["array", "good"]
    assert isinstance(entries[0].error, TemplateParseError)
    assert entries[1].loaded
    assert entries[1].template.directory == "good"


def test_directory_without_descriptor_is_ignored(home, make_template, write_template):
    write_template(make_template(name="good"))
    (home / "templates" / "empty").mkdir()
    assert len(TemplateStore(home / "templates").load_entries()) == 1


def test_get(home, make_template, write_template):
    write_template(make_template(name="vue-vite"), directory="vue")
    store = TemplateStore(home / "templates")

    assert store.get("vue-vite").directory == "vue"
    with pytest.raises(TemplateNotFoundError, match='Template "missing" not found'):
        store.get("missing")


def test_exists_and_names(home, make_template, write_template):
    write_template(make_template(name="vue-vite"))
    store = TemplateStore(home / "templates")
    assert store.exists("vue-vite")
    assert not store.exists("react")
    assert store.names() == {"vue-vite"}


def test_missing_templates_directory(tmp_path):
    store = TemplateStore(tmp_path / "nowhere")
    with pytest.raises(StoreError):
        store.load_all()


def test_save_writes_pretty_json(home, make_template):
    store = TemplateStore(home / "templates")
    template = Template.from_dict(make_template(name="new-one"))

    path = store.save(template)

    assert path == home / "templates" / "new-one" / "template.json"
    text = path.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    assert text.startswith('{\n  "name": "new-one"')
    assert store.get("new-one").description == template.description


def test_save_requires_name(home):
    with pytest.raises(StoreError):
        TemplateStore(home / "templates").save(Template(description="x"))


def test_load_file_records_path(home, make_template, write_template):
    path = write_template(make_template())
    template = TemplateStore(home / "templates").load_file(path)
    assert template.path == path


def test_non_string_file_path_is_a_parse_failure(home, make_template, write_template):
    write_template(make_template(name="numeric-path", files=[{"path": 5, "content": "y"}]))
    entries = TemplateStore(home / "templates").load_entries()

    assert entries[0].error is not None
    assert "files[0].path must be a string" in entries[0].error.reason


@pytest.mark.parametrize("name", [".", "..", "../x", "a/b", "a\\b"])
def test_save_rejects_names_outside_the_store(home, name):
    store = TemplateStore(home / "templates")
    with pytest.raises(StoreError, match="Invalid template name"):
        store.save(Template(name=name, description="x"))

    assert not (home / "template.json").exists()
    assert not (home / "x").exists()
