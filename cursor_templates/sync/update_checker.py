"""Update checker — compare a project's marker against the template store.

A project is up to date when its marker version equals the store version,
has an update available when the store version is strictly newer, and is
ahead when the marker records a newer version than the store holds.
Versions compare by semver precedence, not as strings.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from packaging.version import InvalidVersion, Version

from cursor_templates.errors import MarkerError, MaterializeError, TemplateError
from cursor_templates.models.template import Template
from cursor_templates.sync.marker import ProjectMarker, write_marker
from cursor_templates.sync.materializer import destination_for, write_file
from cursor_templates.utils.json_io import isoformat, utc_now

logger = logging.getLogger(__name__)

UP_TO_DATE = "up-to-date"
UPDATE_AVAILABLE = "update-available"
AHEAD = "ahead"


@dataclass
class UpdateCheckResult:
    """Result of comparing a project marker with the store."""

    template: str
    installed_version: str
    available_version: str
    status: str = UP_TO_DATE  # up-to-date | update-available | ahead

    @property
    def has_update(self) -> bool:
        return self.status == UPDATE_AVAILABLE

    @property
    def summary(self) -> str:
        if self.status == UPDATE_AVAILABLE:
            return f"Update available for {self.template}: {self.installed_version} -> {self.available_version}"
        if self.status == AHEAD:
            return (
                f"Project records {self.template} {self.installed_version}, "
                f"newer than the store's {self.available_version}"
            )
        return f"{self.template} is up to date ({self.installed_version})"


@dataclass
class UpdateResult:
    """What an update run changed on disk."""

    check: UpdateCheckResult
    applied: bool = False
    written: list[Path] = field(default_factory=list)
    backups: list[Path] = field(default_factory=list)
    marker: ProjectMarker | None = None


def parse_version(value: str) -> Version:
    try:
        return Version(value)
    except (InvalidVersion, TypeError) as e:
        raise TemplateError(f"Invalid version {value!r}", details=str(e)) from e


def check_for_update(marker: ProjectMarker, template: Template) -> UpdateCheckResult:
    """Compare the marker's version with the template's current version."""
    if marker.template != template.name:
        raise MarkerError(f'Project uses template "{marker.template}", not "{template.name}"')

    installed = parse_version(marker.version)
    available = parse_version(template.version)

    result = UpdateCheckResult(
        template=template.name,
        installed_version=marker.version,
        available_version=template.version,
    )
    if available > installed:
        result.status = UPDATE_AVAILABLE
    elif available < installed:
        result.status = AHEAD
    return result


def backup_path(path: Path, now: datetime) -> Path:
    """A not-yet-existing sibling of *path* stamped with the UTC time in milliseconds.

    A numeric suffix is added when a backup with the same stamp already exists.
    """
    stamp = now.strftime("%Y%m%dT%H%M%S") + f".{now.microsecond // 1000:03d}Z"
    candidate = path.with_name(f"{path.name}.backup-{stamp}")
    counter = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.name}.backup-{stamp}-{counter}")
        counter += 1
    return candidate


def apply_update(
    template: Template,
    target: str | Path,
    marker: ProjectMarker,
    force: bool = False,
    now: datetime | None = None,
) -> UpdateResult:
    """Rewrite the project's template files when the store is newer, or when forced.

    Every existing file is copied to a timestamped backup before it is
    overwritten. Stops at the first failure without touching the marker.
    """
    target = Path(target)
    now = now or utc_now()
    check = check_for_update(marker, template)
    result = UpdateResult(check=check)

    if not check.has_update and not force:
        logger.info("Nothing to update: %s", check.summary)
        return result

    for entry in template.files or []:
        destination = destination_for(target, entry)
        if destination.is_file():
            backup = backup_path(destination, now)
            try:
                shutil.copy2(destination, backup)
            except OSError as e:
                raise MaterializeError(backup, str(e)) from e
            result.backups.append(backup)
        result.written.append(write_file(target, entry))

    updated = ProjectMarker(
        template=template.name,
        version=template.version,
        installed_at=marker.installed_at,
        project_name=marker.project_name,
        updated_at=isoformat(now),
    )
    try:
        write_marker(target, updated)
    except OSError as e:
        raise MaterializeError(target, str(e)) from e

    result.applied = True
    result.marker = updated
    logger.info("Updated %s to %s (%d backups)", template.name, template.version, len(result.backups))
    return result
