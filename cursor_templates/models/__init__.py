"""Data models shared across the store, analyzers and CLI."""

from cursor_templates.models.template import (
    CURSORRULES_PATH,
    Rules,
    Template,
    TemplateFile,
    is_present,
)

__all__ = [
    "CURSORRULES_PATH",
    "Rules",
    "Template",
    "TemplateFile",
    "is_present",
]
