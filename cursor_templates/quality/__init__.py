"""Quality Scorer — weighted quality scores, grades and aggregate metrics."""

from cursor_templates.quality.metrics import (
    QualitySummary,
    score_entry,
    summarize,
    write_quality_report,
)
from cursor_templates.quality.scorer import (
    DimensionScore,
    QualityReport,
    calculate_grade,
    score_template,
)

__all__ = [
    "DimensionScore",
    "QualityReport",
    "QualitySummary",
    "calculate_grade",
    "score_entry",
    "score_template",
    "summarize",
    "write_quality_report",
]
