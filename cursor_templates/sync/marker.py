"""Project marker — records which template and version a project was built from.

The marker lets ``update`` compare a project against the store later.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from cursor_templates.errors import MarkerError
from cursor_templates.utils.json_io import read_json, write_json

MARKER_FILE = ".cursor-template.json"


@dataclass
class ProjectMarker:
    """Auditable record of a template applied to a project."""

    template: str
    version: str
    installed_at: str = ""  # ISO 8601
    project_name: str = ""
    updated_at: str = ""  # ISO 8601, set by update

    def to_dict(self) -> dict:
        data = {
            "template": self.template,
            "version": self.version,
            "installedAt": self.installed_at,
            "projectName": self.project_name,
        }
        if self.updated_at:
            data["updatedAt"] = self.updated_at
        return data

    @classmethod
    def from_dict(cls, data: dict) -> ProjectMarker:
        return cls(
            template=data["template"],
            version=data["version"],
            installed_at=data.get("installedAt", ""),
            project_name=data.get("projectName", ""),
            updated_at=data.get("updatedAt", ""),
        )


def marker_path(project_dir: str | Path) -> Path:
    return Path(project_dir) / MARKER_FILE


def read_marker(project_dir: str | Path) -> ProjectMarker:
    path = marker_path(project_dir)
    if not path.exists():
        raise MarkerError(f"No template marker found at {path}", details="Run 'init' in this project first")

    try:
        data = read_json(path)
        return ProjectMarker.from_dict(data)
    except (OSError, json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
        raise MarkerError(f"Malformed template marker at {path}", details=str(e)) from e


def write_marker(project_dir: str | Path, marker: ProjectMarker) -> Path:
    path = marker_path(project_dir)
    write_json(path, marker.to_dict())
    return path
