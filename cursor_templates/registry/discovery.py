"""Discovery — search, categorization and curated lists over the template store.

Category membership is derived from tags: a template belongs to a category
when one of its tags, lowercased, contains one of the category's seed
keywords. A template can belong to several categories at once.
"""

from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass
from datetime import datetime

from cursor_templates.errors import CategoryError, ImportSourceError
from cursor_templates.models.template import Rules, Template
from cursor_templates.ratings.models import RatingsDocument
from cursor_templates.registry.models import OTHER_CATEGORY, ImportedEntry, RegistryDocument
from cursor_templates.registry.repository import RegistryRepository
from cursor_templates.store.template_store import TemplateStore
from cursor_templates.utils.json_io import isoformat, utc_now

logger = logging.getLogger(__name__)

RECOMMENDATION_LIMIT = 5

_GITHUB_URL_RE = re.compile(r"github\.com[/:]([^/\s]+)/([^/\s?#]+)")
_SHORTHAND_RE = re.compile(r"([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+)/?")


@dataclass
class ImportSource:
    """An external repository a template is imported from."""

    owner: str
    repo: str
    url: str

    @property
    def template_name(self) -> str:
        return re.sub(r"-template$", "", self.repo)


# ── Categories ───────────────────────────────────────────────────────


def in_category(template: Template, keywords: list[str]) -> bool:
    tags = [t.lower() for t in template.tag_list]
    return any(keyword in tag for tag in tags for keyword in keywords)


def category_keywords(categories: dict[str, list[str]], category: str) -> list[str]:
    if category not in categories:
        known = ", ".join(sorted(categories))
        raise CategoryError(f'Unknown category "{category}"', details=f"Known categories: {known}")
    return [k.lower() for k in categories[category]]


def category_counts(templates: list[Template], categories: dict[str, list[str]]) -> dict[str, int]:
    """Count templates per category; ``Other`` takes templates in no category."""
    counts = {name: 0 for name in categories}
    counts[OTHER_CATEGORY] = 0

    for template in templates:
        matched = False
        for name, keywords in categories.items():
            if in_category(template, [k.lower() for k in keywords]):
                counts[name] += 1
                matched = True
        if not matched:
            counts[OTHER_CATEGORY] += 1

    return counts


# ── Search and filtering ─────────────────────────────────────────────


def matches_query(template: Template, query: str) -> bool:
    term = query.lower()
    return (
        term in (template.name or "").lower()
        or term in (template.description or "").lower()
        or any(term in tag.lower() for tag in template.tag_list)
    )


def search(
    templates: list[Template],
    query: str,
    categories: dict[str, list[str]],
    category: str | None = None,
) -> list[Template]:
    """Case-insensitive search over name, description and tags.

    Exact name matches sort first; everything else keeps store order.
    """
    results = [t for t in templates if matches_query(t, query)]

    if category:
        keywords = category_keywords(categories, category)
        results = [t for t in results if in_category(t, keywords)]

    term = query.lower()
    return sorted(results, key=lambda t: (t.name or "").lower() != term)


def filter_templates(
    templates: list[Template],
    categories: dict[str, list[str]],
    category: str | None = None,
    tag: str | None = None,
) -> list[Template]:
    """Restrict a listing to a category and/or an exact (case-insensitive) tag."""
    results = list(templates)
    if category:
        keywords = category_keywords(categories, category)
        results = [t for t in results if in_category(t, keywords)]
    if tag:
        wanted = tag.lower()
        results = [t for t in results if wanted in (x.lower() for x in t.tag_list)]
    return results


# ── Curated lists ────────────────────────────────────────────────────


def _named(templates: list[Template], names: list[str]) -> list[Template]:
    by_name = {t.name: t for t in templates}
    seen: set[str] = set()
    picked = []
    for name in names:
        if name in by_name and name not in seen:
            picked.append(by_name[name])
            seen.add(name)
    return picked


def featured(
    templates: list[Template],
    registry: RegistryDocument,
    ratings: RatingsDocument | None = None,
) -> list[Template]:
    """Templates listed as featured in the registry, then in the rating document."""
    names = registry.featured + (ratings.featured if ratings else [])
    return _named(templates, names)


def trending(
    templates: list[Template],
    registry: RegistryDocument,
    ratings: RatingsDocument | None = None,
) -> list[Template]:
    names = registry.trending + (ratings.trending if ratings else [])
    return _named(templates, names)


def recommend(
    templates: list[Template],
    registry: RegistryDocument,
    ratings: RatingsDocument | None = None,
    current_tags: list[str] | None = None,
    limit: int = RECOMMENDATION_LIMIT,
) -> list[Template]:
    """Featured templates, then tag-related ones, then the best rated."""
    candidates = featured(templates, registry, ratings)

    if current_tags:
        wanted = {t.lower() for t in current_tags}
        candidates += [t for t in templates if wanted & {x.lower() for x in t.tag_list}]

    if ratings:
        rated = [t for t in templates if t.name in ratings.templates]
        rated.sort(key=lambda t: ratings.templates[t.name].rating, reverse=True)
        candidates += rated

    unique: dict[str, Template] = {}
    for template in candidates:
        unique.setdefault(template.name, template)
    return list(unique.values())[:limit]


# ── Import ───────────────────────────────────────────────────────────


def parse_source(identifier: str) -> ImportSource:
    """Parse ``owner/repo`` or a GitHub URL into its components."""
    text = identifier.strip()
    match = _GITHUB_URL_RE.search(text)
    if match is None and "://" not in text and not text.startswith("git@"):
        match = _SHORTHAND_RE.fullmatch(text)
    if match is None:
        raise ImportSourceError(f"Invalid GitHub URL: {identifier}", details="Expected owner/repo or a github.com URL")

    owner, repo = match.group(1), match.group(2)
    repo = re.sub(r"\.git$", "", repo)
    name = re.sub(r"-template$", "", repo)
    if owner in ("", ".", "..") or name in ("", ".", ".."):
        raise ImportSourceError(f"Invalid GitHub URL: {identifier}")

    url = text if "github.com" in text else f"https://github.com/{owner}/{repo}"
    return ImportSource(owner=owner, repo=repo, url=url)


def build_imported_template(source: ImportSource) -> Template:
    """Synthesize the placeholder template recorded for an import."""
    return Template(
        name=source.template_name,
        description=f"Template from {source.owner}/{source.repo}",
        version="1.0.0",
        author=source.owner,
        tags=["external", "github"],
        source=source.url,
        rules=Rules(context="Imported from GitHub", style={}, restrictions=[], preferences=[]),
    )


def register_import(
    registry: RegistryDocument,
    template: Template,
    now: datetime | None = None,
) -> RegistryDocument:
    """Return a copy of *registry* with *template* in its import index."""
    updated = copy.deepcopy(registry)
    if updated.is_imported(template.name):
        return updated

    updated.templates.append(
        ImportedEntry(
            name=template.name,
            description=template.description or "",
            version=template.version or "",
            author=template.author or "",
            tags=list(template.tag_list),
            source=template.source or "",
            added_at=isoformat(now or utc_now()),
        )
    )
    return updated


def import_external(
    identifier: str,
    store: TemplateStore,
    repository: RegistryRepository,
    now: datetime | None = None,
) -> Template:
    """Import a template placeholder from an external repository.

    Writes the descriptor into the store and records it in the registry.
    Refuses to overwrite an existing template of the same name.
    """
    source = parse_source(identifier)
    template = build_imported_template(source)

    if store.templates_dir.is_dir() and store.exists(template.name):
        raise ImportSourceError(f'Template "{template.name}" already exists')

    store.save(template)
    registry = repository.load()
    repository.save(register_import(registry, template, now=now))

    logger.info("Imported %s from %s", template.name, source.url)
    return template
