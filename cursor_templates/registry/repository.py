"""Persistence for the registry document.

The repository only loads and saves whole documents. Operations that change
the registry take a snapshot and return a new one; the caller owns the
load, change, save sequence.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from cursor_templates.errors import StoreError
from cursor_templates.registry.models import RegistryDocument
from cursor_templates.utils.json_io import read_json, write_json

logger = logging.getLogger(__name__)


class RegistryRepository:
    """File-backed registry document."""

    def __init__(self, registry_file: str | Path):
        self.registry_file = Path(registry_file)

    def load(self) -> RegistryDocument:
        """Load the document, creating it with the default taxonomy on first access."""
        if not self.registry_file.exists():
            doc = RegistryDocument()
            self.save(doc)
            logger.info("Created registry at %s", self.registry_file)
            return doc

        try:
            data = read_json(self.registry_file)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError("Could not read registry", self.registry_file, details=str(e)) from e

        if not isinstance(data, dict):
            raise StoreError("Registry must be a JSON object", self.registry_file)
        try:
            return RegistryDocument.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StoreError("Malformed registry document", self.registry_file, details=repr(e)) from e

    def save(self, doc: RegistryDocument) -> None:
        try:
            write_json(self.registry_file, doc.to_dict())
        except OSError as e:
            raise StoreError("Could not write registry", self.registry_file, details=str(e)) from e
