"""Exception hierarchy for cursor-templates.

Every error raised by the core carries a short user-facing message and,
optionally, technical details. The CLI turns any ``TemplateError`` into a
red message and a non-zero exit status.
"""

from __future__ import annotations

from pathlib import Path


class TemplateError(Exception):
    """Base exception for all cursor-templates errors."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\n  Details: {self.details}"
        return self.message


class ConfigurationError(TemplateError):
    """Raised when the configuration file cannot be read or parsed."""


class TemplateParseError(TemplateError):
    """Raised when a descriptor is not well-formed structured data."""

    def __init__(self, path: str | Path, reason: str):
        super().__init__(f"Could not parse template descriptor {path}", details=reason)
        self.path = Path(path)
        self.reason = reason


class TemplateNotFoundError(TemplateError):
    """Raised when a template name does not resolve to a stored template."""

    def __init__(self, name: str):
        super().__init__(f'Template "{name}" not found')
        self.name = name


class StoreError(TemplateError):
    """Raised when the template directory itself cannot be read or written."""

    def __init__(self, message: str, path: str | Path, details: str | None = None):
        super().__init__(f"{message}: {path}", details=details)
        self.path = Path(path)


class RatingError(TemplateError):
    """Raised when a rating is out of range or targets an unknown template."""


class CategoryError(TemplateError):
    """Raised when a search or listing names an unknown category."""


class ImportSourceError(TemplateError):
    """Raised when an import identifier cannot be split into owner and repo."""


class MaterializeError(TemplateError):
    """Raised when writing a template file into a project fails."""

    def __init__(self, path: str | Path, reason: str):
        super().__init__(f"Failed to write {path}", details=reason)
        self.path = Path(path)


class MarkerError(TemplateError):
    """Raised when a project's template marker is missing or malformed."""
