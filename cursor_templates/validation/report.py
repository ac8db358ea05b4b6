"""Validation report document for tooling and CI consumption."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from cursor_templates.utils.json_io import isoformat, utc_now, write_json
from cursor_templates.validation.validator import ValidationResult


@dataclass
class ValidationSummary:
    """Counts across a validate-all run.

    ``valid`` counts templates with neither errors nor warnings;
    ``warnings`` counts templates that pass but carry warnings.
    """

    total: int = 0
    valid: int = 0
    warnings: int = 0
    invalid: int = 0

    @property
    def passed(self) -> bool:
        return self.invalid == 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "valid": self.valid,
            "warnings": self.warnings,
            "invalid": self.invalid,
        }


def summarize_validation(results: list[ValidationResult]) -> ValidationSummary:
    summary = ValidationSummary(total=len(results))
    for result in results:
        if not result.passed:
            summary.invalid += 1
        elif result.has_warnings:
            summary.warnings += 1
        else:
            summary.valid += 1
    return summary


def write_validation_report(
    path: str | Path,
    results: list[ValidationResult],
    now: datetime | None = None,
) -> ValidationSummary:
    """Write the report document and return its summary."""
    summary = summarize_validation(results)
    write_json(
        path,
        {
            "timestamp": isoformat(now or utc_now()),
            "summary": summary.to_dict(),
            "results": [r.to_dict() for r in results],
        },
    )
    return summary
