"""Tests for registry persistence, discovery and import."""

import json

import pytest

from cursor_templates.errors import CategoryError, ImportSourceError, StoreError
from cursor_templates.models.template import Template
from cursor_templates.ratings.models import RatingRecord, RatingsDocument
from cursor_templates.registry.discovery import (
    category_counts,
    featured,
    filter_templates,
    import_external,
    parse_source,
    recommend,
    register_import,
    search,
    trending,
)
from cursor_templates.registry.models import DEFAULT_CATEGORIES, RegistryDocument
from cursor_templates.registry.repository import RegistryRepository
from cursor_templates.store.template_store import TemplateStore


def _templates(*specs) -> list[Template]:
    return [Template(name=name, description=desc, tags=tags) for name, desc, tags in specs]


@pytest.fixture
def vite_pair():
    return _templates(
        ("react-typescript-vite", "React with TypeScript and Vite", ["react", "typescript", "vite"]),
        ("vue-vite", "Vue 3 with Vite", ["vue", "vite"]),
    )


# ── Repository ───────────────────────────────────────────────────────


def test_load_creates_default_document(tmp_path):
    path = tmp_path / "registry.json"
    doc = RegistryRepository(path).load()

    assert doc.categories == DEFAULT_CATEGORIES
    assert doc.templates == []
    assert json.loads(path.read_text(encoding="utf-8"))["categories"]["frontend"] == [
        "react", "vue", "angular", "svelte",
    ]


def test_load_existing_document(tmp_path):
    path = tmp_path / "registry.json"
    path.write_text(json.dumps({"categories": {"cli": ["cli"]}, "featured": ["a"]}), encoding="utf-8")
    doc = RegistryRepository(path).load()
    assert doc.categories == {"cli": ["cli"]}
    assert doc.featured == ["a"]


# ── Search and categories ────────────────────────────────────────────


def test_search_by_name(vite_pair):
    results = search(vite_pair, "react", DEFAULT_CATEGORIES)
    assert [t.name for t in results] == ["react-typescript-vite"]


def test_search_with_category(vite_pair):
    results = search(vite_pair, "vite", DEFAULT_CATEGORIES, category="frontend")
    assert [t.name for t in results] == ["react-typescript-vite", "vue-vite"]
    assert search(vite_pair, "vite", DEFAULT_CATEGORIES, category="backend") == []


def test_search_exact_name_first(vite_pair):
    results = search(vite_pair, "VUE-VITE", DEFAULT_CATEGORIES)
    assert [t.name for t in results] == ["vue-vite"]

    results = search(vite_pair + _templates(("vite", "Plain Vite", ["vite"])), "vite", DEFAULT_CATEGORIES)
    assert [t.name for t in results] == ["vite", "react-typescript-vite", "vue-vite"]


def test_search_matches_tags_and_description(vite_pair):
    assert [t.name for t in search(vite_pair, "typescript", DEFAULT_CATEGORIES)] == ["react-typescript-vite"]
    assert [t.name for t in search(vite_pair, "vue 3", DEFAULT_CATEGORIES)] == ["vue-vite"]


def test_unknown_category(vite_pair):
    with pytest.raises(CategoryError):
        search(vite_pair, "vite", DEFAULT_CATEGORIES, category="embedded")


def test_category_counts_are_non_exclusive():
    templates = _templates(
        ("rn", "", ["react-native"]),
        ("django", "", ["python", "django"]),
        ("plain", "", ["shell"]),
    )
    counts = category_counts(templates, DEFAULT_CATEGORIES)
    # react-native contains both "react" and "react-native"
    assert counts["frontend"] == 1
    assert counts["mobile"] == 1
    assert counts["backend"] == 1
    assert counts["Other"] == 1
    assert counts["desktop"] == 0


def test_filter_templates(vite_pair):
    assert [t.name for t in filter_templates(vite_pair, DEFAULT_CATEGORIES, tag="VUE")] == ["vue-vite"]
    assert len(filter_templates(vite_pair, DEFAULT_CATEGORIES, category="frontend")) == 2


# ── Curated lists ────────────────────────────────────────────────────


def test_featured_and_trending_order():
    templates = _templates(("a", "", []), ("b", "", []), ("c", "", []))
    registry = RegistryDocument(featured=["b", "missing"], trending=["c"])
    ratings = RatingsDocument(featured=["a", "b"], trending=["a"])

    assert [t.name for t in featured(templates, registry, ratings)] == ["b", "a"]
    assert [t.name for t in trending(templates, registry, ratings)] == ["c", "a"]
    assert featured(templates, RegistryDocument()) == []


def test_recommend():
    templates = _templates(
        ("a", "", ["react"]),
        ("b", "", ["vue"]),
        ("c", "", []),
        ("d", "", []),
        ("e", "", []),
        ("f", "", []),
        ("g", "", []),
    )
    registry = RegistryDocument(featured=["g"])
    ratings = RatingsDocument(
        templates={
            "c": RatingRecord(rating=3.0, votes=1),
            "d": RatingRecord(rating=4.5, votes=2),
            "e": RatingRecord(rating=4.0, votes=1),
            "f": RatingRecord(rating=1.0, votes=1),
        }
    )

    results = recommend(templates, registry, ratings, current_tags=["Vue"])
    assert [t.name for t in results] == ["g", "b", "d", "e", "c"]


# ── Import ───────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "identifier, owner, repo",
    [
        ("acme/widget", "acme", "widget"),
        ("https://github.com/acme/widget", "acme", "widget"),
        ("https://github.com/acme/widget.git", "acme", "widget"),
        ("git@github.com:acme/widget.git", "acme", "widget"),
    ],
)
def test_parse_source(identifier, owner, repo):
    source = parse_source(identifier)
    assert (source.owner, source.repo) == (owner, repo)


def test_parse_source_rejects_garbage():
    with pytest.raises(ImportSourceError):
        parse_source("not a repository")
    with pytest.raises(ImportSourceError):
        parse_source("https://gitlab.com/acme/widget")


def test_template_name_strips_suffix():
    assert parse_source("acme/react-template").template_name == "react"


def test_register_import_leaves_input_untouched():
    registry = RegistryDocument()
    template = Template(name="widget", description="d", version="1.0.0", tags=["external"])

    updated = register_import(registry, template)

    assert registry.templates == []
    assert updated.is_imported("widget")
    assert register_import(updated, template).templates == updated.templates


def test_import_external(home):
    store = TemplateStore(home / "templates")
    repository = RegistryRepository(home / "registry.json")

    template = import_external("https://github.com/acme/widget-template", store, repository)

    assert template.name == "widget"
    saved = store.get("widget")
    assert saved.author == "acme"
    assert saved.source == "https://github.com/acme/widget-template"
    assert saved.tags == ["external", "github"]
    assert repository.load().is_imported("widget")


def test_import_refuses_existing_template(home):
    store = TemplateStore(home / "templates")
    repository = RegistryRepository(home / "registry.json")
    import_external("acme/widget", store, repository)

    with pytest.raises(ImportSourceError, match="already exists"):
        import_external("other/widget", store, repository)


@pytest.mark.parametrize("identifier", ["owner/..", "owner/.", "../widget", "owner/..-template", "https://github.com/acme/.."])
def test_parse_source_rejects_dot_segments(identifier):
    with pytest.raises(ImportSourceError):
        parse_source(identifier)


@pytest.mark.parametrize(
    "document",
    [
        {"templates": [{"description": "no name"}]},
        {"categories": ["frontend"]},
    ],
)
def test_load_rejects_malformed_document(tmp_path, document):
    path = tmp_path / "registry.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    with pytest.raises(StoreError, match="Malformed registry document"):
        RegistryRepository(path).load()
