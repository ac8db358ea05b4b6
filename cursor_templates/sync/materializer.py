"""Materializer — writes a template's files and marker into a project.

Partial-failure policy: writing stops at the first file that cannot be
written. Files written before the failure stay on disk, the remaining files
are skipped, and the marker is not written, so an interrupted project is
never recorded as installed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from cursor_templates.errors import MaterializeError
from cursor_templates.models.template import Template, TemplateFile
from cursor_templates.sync.marker import ProjectMarker, write_marker
from cursor_templates.utils.json_io import isoformat, utc_now

logger = logging.getLogger(__name__)


@dataclass
class MaterializeResult:
    """What a materialize call put on disk."""

    target: Path
    written: list[Path] = field(default_factory=list)
    marker_path: Path | None = None


def materialize(
    template: Template,
    target: str | Path,
    project_name: str | None = None,
    now: datetime | None = None,
) -> MaterializeResult:
    """Write every template file under *target*, then the project marker.

    Existing files are overwritten. Raises ``MaterializeError`` naming the
    path that failed.
    """
    target = Path(target)
    result = MaterializeResult(target=target)

    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise MaterializeError(target, str(e)) from e

    for entry in template.files or []:
        result.written.append(write_file(target, entry))

    marker = ProjectMarker(
        template=template.name,
        version=template.version,
        installed_at=isoformat(now or utc_now()),
        project_name=project_name or target.resolve().name,
    )
    try:
        result.marker_path = write_marker(target, marker)
    except OSError as e:
        raise MaterializeError(target, str(e)) from e

    logger.info("Materialized %s into %s (%d files)", template.name, target, len(result.written))
    return result


def destination_for(target: Path, entry: TemplateFile) -> Path:
    """Where *entry* lands below *target*; raises when it would land anywhere else."""
    if not entry.path:
        raise MaterializeError(target, "file entry has no path")

    destination = target / entry.path
    root = target.resolve()
    if not entry.stays_inside or not destination.resolve().is_relative_to(root):
        raise MaterializeError(destination, f"path escapes the project directory {root}")
    return destination


def write_file(target: Path, entry: TemplateFile) -> Path:
    """Write one template file below *target*, creating parent directories."""
    destination = destination_for(target, entry)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(entry.content or "", encoding="utf-8")
    except OSError as e:
        raise MaterializeError(destination, str(e)) from e

    logger.debug("Wrote %s", destination)
    return destination
