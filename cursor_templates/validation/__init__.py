"""Validator — structural checks on template descriptors."""

from cursor_templates.validation.report import (
    ValidationSummary,
    summarize_validation,
    write_validation_report,
)
from cursor_templates.validation.validator import (
    Severity,
    ValidationIssue,
    ValidationResult,
    validate_entry,
    validate_template,
)

__all__ = [
    "Severity",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSummary",
    "summarize_validation",
    "validate_entry",
    "validate_template",
    "write_validation_report",
]
