"""Validator — check template descriptors for required structure.

Errors make a template invalid; warnings are advisory and never change the
pass/fail outcome. Callers use ``passed`` to decide the exit status.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import Enum

from cursor_templates.models.template import Template, is_present
from cursor_templates.store.template_store import StoreEntry

SEMVER_PATTERN = re.compile(r"\d+\.\d+\.\d+")

REQUIRED_FIELDS = ("name", "description", "version", "rules")
RULES_FIELDS = ("context", "style", "restrictions", "preferences")
MIN_CURSORRULES_LENGTH = 100


class Severity(Enum):
    ERROR = "error"  # Makes the template invalid
    WARNING = "warning"  # Should fix but not blocking


@dataclass
class ValidationIssue:
    """A single finding, with the descriptor location it refers to."""

    severity: Severity
    message: str
    path: str = ""  # e.g. "rules.context", "files[2]"


@dataclass
class ValidationResult:
    """Result of validating one template."""

    name: str = ""
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[str]:
        return [i.message for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[str]:
        return [i.message for i in self.issues if i.severity == Severity.WARNING]

    @property
    def passed(self) -> bool:
        return not self.errors

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def summary(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return f"[{status}] {len(self.errors)} error(s), {len(self.warnings)} warning(s)"

    def to_dict(self) -> dict:
        return {"name": self.name, "errors": self.errors, "warnings": self.warnings}

    def _error(self, message: str, path: str = "") -> None:
        self.issues.append(ValidationIssue(Severity.ERROR, message, path))

    def _warn(self, message: str, path: str = "") -> None:
        self.issues.append(ValidationIssue(Severity.WARNING, message, path))


def validate_template(template: Template, name: str = "") -> ValidationResult:
    """Validate a parsed template."""
    result = ValidationResult(name=name or template.name or "")

    _check_required_fields(template, result)
    _check_version(template, result)
    _check_rules(template, result)
    _check_tags(template, result)
    _check_files(template, result)
    _check_commands(template, result)

    return result


def validate_entry(entry: StoreEntry) -> ValidationResult:
    """Validate a store entry, reporting a parse failure as a single error."""
    if entry.error is not None:
        result = ValidationResult(name=entry.directory)
        result._error(f"Failed to parse template: {entry.error.reason}")
        return result
    return validate_template(entry.template, name=entry.directory)


def _check_required_fields(template: Template, result: ValidationResult) -> None:
    for field_name in REQUIRED_FIELDS:
        if not template.has(field_name):
            result._error(f"Missing required field: {field_name}", field_name)


def _check_version(template: Template, result: ValidationResult) -> None:
    if template.has("version") and not SEMVER_PATTERN.fullmatch(template.version):
        result._error("Invalid version format. Use semantic versioning (x.y.z)", "version")


def _check_rules(template: Template, result: ValidationResult) -> None:
    if template.rules is None:
        return
    for field_name in RULES_FIELDS:
        if not is_present(getattr(template.rules, field_name)):
            result._warn(f"Missing rules.{field_name}", f"rules.{field_name}")


def _check_tags(template: Template, result: ValidationResult) -> None:
    if not template.tags:
        result._warn("No tags specified", "tags")


def _check_files(template: Template, result: ValidationResult) -> None:
    if template.files is None:
        result._warn("No files specified", "files")
        return

    for i, entry in enumerate(template.files):
        if not entry.is_complete:
            result._error(f"Invalid file entry: {json.dumps(entry.to_dict())}", f"files[{i}]")
        elif not entry.stays_inside:
            result._error(f"File path must stay inside the project: {entry.path}", f"files[{i}].path")

        if entry.is_cursorrules and len(entry.content or "") < MIN_CURSORRULES_LENGTH:
            result._warn(".cursorrules file seems too short", f"files[{i}].content")


def _check_commands(template: Template, result: ValidationResult) -> None:
    if template.commands is None:
        result._warn("No commands specified", "commands")
        return

    if not is_present(template.commands.get("install")):
        result._warn("No install command specified", "commands.install")
    if not is_present(template.commands.get("dev")):
        result._warn("No dev command specified", "commands.dev")
