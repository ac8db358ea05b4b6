"""Registry data models — category taxonomy, curated lists and imported templates."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_CATEGORIES: dict[str, list[str]] = {
    "frontend": ["react", "vue", "angular", "svelte"],
    "backend": ["express", "fastapi", "django", "node", "python"],
    "mobile": ["react-native", "flutter", "mobile", "ios", "android"],
    "desktop": ["electron", "tauri", "desktop"],
    "fullstack": ["nextjs", "t3", "remix", "nuxt", "fullstack", "ssr"],
}

OTHER_CATEGORY = "Other"


@dataclass
class ImportedEntry:
    """Index record for a template imported from an external source."""

    name: str
    description: str = ""
    version: str = ""
    author: str = ""
    tags: list[str] = field(default_factory=list)
    source: str = ""
    added_at: str = ""  # ISO 8601

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "author": self.author,
            "tags": self.tags,
            "source": self.source,
            "addedAt": self.added_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ImportedEntry:
        return cls(
            name=data["name"],
            description=data.get("description") or "",
            version=data.get("version") or "",
            author=data.get("author") or "",
            tags=list(data.get("tags") or []),
            source=data.get("source") or "",
            added_at=data.get("addedAt") or "",
        )


@dataclass
class RegistryDocument:
    """The persisted registry layered over the template store."""

    templates: list[ImportedEntry] = field(default_factory=list)
    categories: dict[str, list[str]] = field(default_factory=lambda: {k: list(v) for k, v in DEFAULT_CATEGORIES.items()})
    featured: list[str] = field(default_factory=list)
    trending: list[str] = field(default_factory=list)

    def is_imported(self, name: str) -> bool:
        return any(entry.name == name for entry in self.templates)

    def to_dict(self) -> dict:
        return {
            "templates": [entry.to_dict() for entry in self.templates],
            "categories": self.categories,
            "featured": self.featured,
            "trending": self.trending,
        }

    @classmethod
    def from_dict(cls, data: dict) -> RegistryDocument:
        doc = cls(
            templates=[ImportedEntry.from_dict(d) for d in data.get("templates") or []],
            featured=list(data.get("featured") or []),
            trending=list(data.get("trending") or []),
        )
        if data.get("categories"):
            doc.categories = {k: list(v) for k, v in data["categories"].items()}
        return doc
