"""Scorer — computes the 4-dimension quality score of a template.

Dimensions and their maximum points:
1. Completeness (30)
2. Documentation (25)
3. Best practices (25)
4. Usability (20)

Unlike the validator, the scorer never rejects a template: missing fields
simply earn fewer points and produce issues or recommendations.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from cursor_templates.models.template import Template, is_present

SEMVER_PATTERN = re.compile(r"\d+\.\d+\.\d+")
KEBAB_PATTERN = re.compile(r"[a-z0-9-]+")

COMPLETENESS_FIELDS = ("name", "description", "version", "rules", "files")
FRAMEWORKS = ("react", "vue", "angular", "svelte", "nextjs", "nuxt", "flutter", "django", "express")

GRADE_BANDS = (
    (90, "A+"),
    (85, "A"),
    (80, "A-"),
    (75, "B+"),
    (70, "B"),
    (65, "B-"),
    (60, "C+"),
    (55, "C"),
    (50, "C-"),
    (40, "D"),
)


@dataclass
class DimensionScore:
    """Points earned in one dimension, with the reasons points were lost."""

    name: str
    max_score: int
    score: int = 0
    issues: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "maxScore": self.max_score,
            "issues": self.issues,
            "recommendations": self.recommendations,
        }


@dataclass
class QualityReport:
    """Full explainable quality score for a template."""

    name: str
    score: int = 0
    grade: str = "F"
    breakdown: dict[str, DimensionScore] = field(default_factory=dict)
    error: str = ""  # Set when the descriptor could not be parsed

    @property
    def issues(self) -> list[str]:
        return [i for d in self.breakdown.values() for i in d.issues]

    @property
    def recommendations(self) -> list[str]:
        return [r for d in self.breakdown.values() for r in d.recommendations]

    def to_dict(self) -> dict:
        data = {"name": self.name, "score": self.score, "grade": self.grade}
        if self.error:
            data["error"] = self.error
            return data
        data["issues"] = self.issues
        data["recommendations"] = self.recommendations
        data["analysis"] = {key: dim.to_dict() for key, dim in self.breakdown.items()}
        return data


def default_dimensions() -> dict[str, DimensionScore]:
    """Create the 4 scoring dimensions with their point budgets."""
    return {
        "completeness": DimensionScore(name="completeness", max_score=30),
        "documentation": DimensionScore(name="documentation", max_score=25),
        "bestPractices": DimensionScore(name="bestPractices", max_score=25),
        "usability": DimensionScore(name="usability", max_score=20),
    }


def calculate_grade(score: int) -> str:
    for threshold, grade in GRADE_BANDS:
        if score >= threshold:
            return grade
    return "F"


def score_template(template: Template, name: str = "") -> QualityReport:
    """Compute the quality report for a template."""
    dims = default_dimensions()

    _score_completeness(template, dims["completeness"])
    _score_documentation(template, dims["documentation"])
    _score_best_practices(template, dims["bestPractices"])
    _score_usability(template, dims["usability"])

    total = sum(d.score for d in dims.values())
    return QualityReport(
        name=name or template.name or "",
        score=total,
        grade=calculate_grade(total),
        breakdown=dims,
    )


def _score_completeness(template: Template, dim: DimensionScore) -> None:
    """Required fields (15), template files (10), commands (5)."""
    missing = [f for f in COMPLETENESS_FIELDS if not template.has(f)]
    if missing:
        dim.score += max(0, 15 - len(missing) * 3)
        dim.issues.append(f"Missing required fields: {', '.join(missing)}")
    else:
        dim.score += 15

    if template.files:
        if template.cursorrules is not None:
            dim.score += 10
        else:
            dim.score += 5
            dim.issues.append("Missing .cursorrules file")
    else:
        dim.issues.append("No template files defined")

    if template.commands is None:
        dim.issues.append("No commands defined")
        return

    has_install = is_present(template.commands.get("install"))
    has_dev = is_present(template.commands.get("dev"))
    if has_install and has_dev:
        dim.score += 5
    elif has_install or has_dev:
        dim.score += 3

    if not has_install:
        dim.recommendations.append("Add install command")
    if not has_dev:
        dim.recommendations.append("Add dev command")


def _score_documentation(template: Template, dim: DimensionScore) -> None:
    """Description length (10) and .cursorrules depth (15).

    The section checks on .cursorrules only add recommendations; they never
    cost points beyond the length banding.
    """
    if template.has("description"):
        length = len(template.description)
        if length > 50:
            dim.score += 10
        elif length > 20:
            dim.score += 7
        else:
            dim.score += 4
            dim.recommendations.append("Expand template description")
    else:
        dim.issues.append("Missing description")

    rules_file = template.cursorrules
    if rules_file is None:
        return

    content = rules_file.content or ""
    if len(content) > 500:
        dim.score += 15
    elif len(content) > 200:
        dim.score += 10
        dim.recommendations.append("Expand .cursorrules with more guidance")
    else:
        dim.score += 5
        dim.issues.append(".cursorrules content is too brief")

    if "context" not in content and "You are" not in content:
        dim.recommendations.append("Add context section to .cursorrules")
    if "```" not in content and "Example" not in content:
        dim.recommendations.append("Add code examples to .cursorrules")
    if "Best Practices" not in content and "## " not in content:
        dim.recommendations.append("Add best practices section to .cursorrules")


def _score_best_practices(template: Template, dim: DimensionScore) -> None:
    """Semantic version (5), tags (5), rules structure (15)."""
    if template.has("version") and SEMVER_PATTERN.fullmatch(template.version):
        dim.score += 5
    else:
        dim.issues.append("Invalid or missing semantic version")

    if template.tags:
        dim.score += 5
        if len(template.tags) < 3:
            dim.recommendations.append("Add more descriptive tags")
    else:
        dim.issues.append("No tags specified")

    rules = template.rules
    if rules is None:
        dim.issues.append("Missing rules object")
        return

    if is_present(rules.context):
        dim.score += 4
    else:
        dim.issues.append("Missing rules context")

    if is_present(rules.style):
        dim.score += 4
    else:
        dim.issues.append("Missing rules style")

    if rules.restrictions:
        dim.score += 3
    else:
        dim.recommendations.append("Add restrictions to rules")

    if rules.preferences:
        dim.score += 4
    else:
        dim.recommendations.append("Add preferences to rules")


def _score_usability(template: Template, dim: DimensionScore) -> None:
    """Name style (5), author (5), framework alignment (10)."""
    if template.has("name"):
        if KEBAB_PATTERN.fullmatch(template.name):
            dim.score += 5
        else:
            dim.score += 3
            dim.recommendations.append("Use kebab-case for template name")

    if template.has("author"):
        dim.score += 5
    else:
        dim.recommendations.append("Add author information")

    # Only judged for templates that carry both tags and rules
    if template.tags is None or template.rules is None:
        return

    name = (template.name or "").lower()
    tags = [t.lower() for t in template.tag_list]
    if any(fw in name or any(fw in tag for tag in tags) for fw in FRAMEWORKS):
        dim.score += 10
    else:
        dim.score += 5
        dim.recommendations.append("Specify target framework in tags")
