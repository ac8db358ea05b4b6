"""Aggregate quality metrics across every template in the store."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from cursor_templates.quality.scorer import QualityReport, score_template
from cursor_templates.store.template_store import StoreEntry
from cursor_templates.utils.json_io import isoformat, utc_now, write_json

TOP_N = 5


@dataclass
class QualitySummary:
    """Roll-up of many quality reports."""

    total: int = 0
    analyzed: int = 0
    average_score: int = 0
    grade_distribution: dict[str, int] = field(default_factory=dict)
    top_issues: list[tuple[str, int]] = field(default_factory=list)
    top_recommendations: list[tuple[str, int]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "analyzed": self.analyzed,
            "averageScore": self.average_score,
            "gradeDistribution": self.grade_distribution,
            "topIssues": [{"issue": text, "count": n} for text, n in self.top_issues],
            "topRecommendations": [
                {"recommendation": text, "count": n} for text, n in self.top_recommendations
            ],
        }


def score_entry(entry: StoreEntry) -> QualityReport:
    """Score a store entry; a corrupt descriptor yields an F report with the error."""
    if entry.error is not None:
        return QualityReport(name=entry.directory, score=0, grade="F", error=entry.error.reason)
    return score_template(entry.template, name=entry.directory)


def summarize(reports: list[QualityReport]) -> QualitySummary:
    """Summarize reports. Reports with a parse error count toward ``total`` only."""
    analyzed = [r for r in reports if not r.error]
    summary = QualitySummary(total=len(reports), analyzed=len(analyzed))
    if not analyzed:
        return summary

    # Round half up
    summary.average_score = int(sum(r.score for r in analyzed) / len(analyzed) + 0.5)

    for report in analyzed:
        summary.grade_distribution[report.grade] = summary.grade_distribution.get(report.grade, 0) + 1

    summary.top_issues = _most_frequent(issue for r in analyzed for issue in r.issues)
    summary.top_recommendations = _most_frequent(rec for r in analyzed for rec in r.recommendations)
    return summary


def write_quality_report(
    path: str | Path,
    reports: list[QualityReport],
    now: datetime | None = None,
) -> QualitySummary:
    """Write ``{timestamp, summary, templates}`` and return the summary."""
    summary = summarize(reports)
    write_json(
        path,
        {
            "timestamp": isoformat(now or utc_now()),
            "summary": summary.to_dict(),
            "templates": [r.to_dict() for r in reports],
        },
    )
    return summary


def _most_frequent(items) -> list[tuple[str, int]]:
    # Ties keep first-seen order
    return Counter(items).most_common(TOP_N)
