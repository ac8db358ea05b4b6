"""File-based template store.

Templates live one per subdirectory of a root directory, each described by
a ``template.json``. A corrupt descriptor is skipped with a warning so that
one bad template never hides the rest.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from cursor_templates.errors import StoreError, TemplateNotFoundError, TemplateParseError
from cursor_templates.models.template import Template
from cursor_templates.utils.json_io import write_json

logger = logging.getLogger(__name__)


def is_safe_name(name: str) -> bool:
    """Whether *name* maps to exactly one subdirectory of the store."""
    return name not in (".", "..") and "/" not in name and "\\" not in name


@dataclass
class StoreEntry:
    """One subdirectory of the store and what loading it produced."""

    directory: str
    path: Path
    template: Template | None = None
    error: TemplateParseError | None = None

    @property
    def loaded(self) -> bool:
        return self.template is not None


class TemplateStore:
    """Directory-of-descriptors template store."""

    DESCRIPTOR_FILE = "template.json"

    def __init__(self, templates_dir: str | Path):
        self.templates_dir = Path(templates_dir)

    def load_entries(self) -> list[StoreEntry]:
        """Load every subdirectory holding a descriptor, keeping parse failures."""
        entries = []
        for directory in self._subdirectories():
            path = directory / self.DESCRIPTOR_FILE
            if not path.is_file():
                continue
            try:
                template = self.load_file(path)
            except TemplateParseError as e:
                entries.append(StoreEntry(directory=directory.name, path=path, error=e))
                continue
            template.directory = directory.name
            entries.append(StoreEntry(directory=directory.name, path=path, template=template))
        return entries

    def load_all(self) -> list[Template]:
        """Load every well-formed template, in directory-name order."""
        templates = []
        for entry in self.load_entries():
            if entry.error is not None:
                logger.warning("Skipping invalid template in %s: %s", entry.directory, entry.error.reason)
                continue
            templates.append(entry.template)
        return templates

    def load_file(self, path: str | Path) -> Template:
        """Parse a single descriptor file."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise TemplateParseError(path, str(e)) from e

        try:
            template = Template.from_json(text)
        except (json.JSONDecodeError, ValueError) as e:
            raise TemplateParseError(path, str(e)) from e

        template.path = path
        return template

    def get(self, name: str) -> Template:
        for template in self.load_all():
            if template.name == name:
                return template
        raise TemplateNotFoundError(name)

    def exists(self, name: str) -> bool:
        return any(t.name == name for t in self.load_all())

    def names(self) -> set[str]:
        return {t.name for t in self.load_all() if t.name}

    def save(self, template: Template) -> Path:
        """Write a template to ``<root>/<name>/template.json``."""
        if not template.name:
            raise StoreError("Cannot save a template without a name", self.templates_dir)
        if not is_safe_name(template.name):
            raise StoreError(
                f'Invalid template name "{template.name}"',
                self.templates_dir,
                details="Names cannot be . or .. or contain path separators",
            )

        path = self.templates_dir / template.name / self.DESCRIPTOR_FILE
        try:
            write_json(path, template.to_dict())
        except OSError as e:
            raise StoreError("Could not write template", path, details=str(e)) from e

        template.path = path
        template.directory = template.name
        logger.info("Saved template %s to %s", template.name, path)
        return path

    def _subdirectories(self) -> list[Path]:
        if not self.templates_dir.is_dir():
            raise StoreError("Templates directory not found", self.templates_dir)
        try:
            return sorted(p for p in self.templates_dir.iterdir() if p.is_dir())
        except OSError as e:
            raise StoreError("Could not read templates directory", self.templates_dir, details=str(e)) from e
