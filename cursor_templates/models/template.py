"""Template data model.

A template descriptor is a JSON object. The model keeps every field
optional so that the validator and the scorer can judge incomplete
descriptors instead of failing on them; only structurally wrong data
(a list where an object belongs, and so on) is rejected at parse time.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Any

CURSORRULES_PATH = ".cursorrules"

# Keys of rules.style that the tool understands. Anything else is kept as-is.
STYLE_KEYS = ("language", "framework", "conventions")

_KNOWN_FIELDS = ("name", "description", "version", "author", "tags", "rules", "files", "commands", "source")


def is_present(value: Any) -> bool:
    """A descriptor value counts as present unless absent, null, empty text or false."""
    return value is not None and value is not False and value != ""


@dataclass
class TemplateFile:
    """A file the template writes into a project."""

    path: str | None = None
    content: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.path) and bool(self.content)

    @property
    def is_cursorrules(self) -> bool:
        return self.path == CURSORRULES_PATH

    @property
    def stays_inside(self) -> bool:
        """Whether the path is relative and never climbs above the project root."""
        if not self.path:
            return True
        parts = PurePosixPath(self.path.replace("\\", "/"))
        return not parts.is_absolute() and not PureWindowsPath(self.path).drive and ".." not in parts.parts

    def to_dict(self) -> dict:
        data = {}
        if self.path is not None:
            data["path"] = self.path
        if self.content is not None:
            data["content"] = self.content
        return data


@dataclass
class Rules:
    """AI-assistant configuration carried by a template."""

    context: str | None = None
    style: dict[str, Any] | None = None
    restrictions: list[str] | None = None
    preferences: list[str] | None = None

    @property
    def language(self) -> str:
        return (self.style or {}).get("language", "")

    @property
    def framework(self) -> str:
        return (self.style or {}).get("framework", "")

    @property
    def conventions(self) -> list:
        return (self.style or {}).get("conventions", [])

    def to_dict(self) -> dict:
        data: dict[str, Any] = {}
        if self.context is not None:
            data["context"] = self.context
        if self.style is not None:
            data["style"] = self.style
        if self.restrictions is not None:
            data["restrictions"] = self.restrictions
        if self.preferences is not None:
            data["preferences"] = self.preferences
        return data


@dataclass
class Template:
    """A named, versioned project template."""

    name: str | None = None
    description: str | None = None
    version: str | None = None
    author: str | None = None
    tags: list[str] | None = None
    rules: Rules | None = None
    files: list[TemplateFile] | None = None
    commands: dict[str, str] | None = None
    source: str | None = None

    # Unknown descriptor keys, preserved on save
    extra: dict[str, Any] = field(default_factory=dict)

    # Where the descriptor was loaded from (not persisted)
    path: Path | None = field(default=None, compare=False)
    directory: str | None = field(default=None, compare=False)

    @property
    def cursorrules(self) -> TemplateFile | None:
        """The first ``.cursorrules`` entry, if the template ships one."""
        for f in self.files or []:
            if f.is_cursorrules:
                return f
        return None

    @property
    def tag_list(self) -> list[str]:
        return [t for t in self.tags or [] if isinstance(t, str)]

    def has(self, field_name: str) -> bool:
        """Whether a top-level descriptor field counts as present."""
        return is_present(getattr(self, field_name))

    @classmethod
    def from_dict(cls, data: Any) -> Template:
        """Build a Template from decoded descriptor data.

        Raises ``ValueError`` when the data is structurally wrong.
        """
        if not isinstance(data, dict):
            raise ValueError("descriptor must be a JSON object")

        for key in ("name", "description", "version", "author", "source"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"'{key}' must be a string")

        tags = data.get("tags")
        if tags is not None and not isinstance(tags, list):
            raise ValueError("'tags' must be a list")

        commands = data.get("commands")
        if commands is not None and not isinstance(commands, dict):
            raise ValueError("'commands' must be an object")

        return cls(
            name=data.get("name"),
            description=data.get("description"),
            version=data.get("version"),
            author=data.get("author"),
            tags=tags,
            rules=_parse_rules(data.get("rules")),
            files=_parse_files(data.get("files")),
            commands=commands,
            source=data.get("source"),
            extra={k: v for k, v in data.items() if k not in _KNOWN_FIELDS},
        )

    @classmethod
    def from_json(cls, text: str) -> Template:
        return cls.from_dict(json.loads(text))

    def to_dict(self) -> dict:
        """Serialize back to descriptor form, omitting absent fields."""
        data: dict[str, Any] = {}
        for key in ("name", "description", "version", "author", "tags"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.source is not None:
            data["source"] = self.source
        if self.rules is not None:
            data["rules"] = self.rules.to_dict()
        if self.files is not None:
            data["files"] = [f.to_dict() for f in self.files]
        if self.commands is not None:
            data["commands"] = self.commands
        data.update(self.extra)
        return data


def _parse_rules(value: Any) -> Rules | None:
    if value is None or value is False or value == "":
        return None
    if not isinstance(value, dict):
        raise ValueError("'rules' must be an object")

    style = value.get("style")
    if style is not None and not isinstance(style, dict):
        raise ValueError("'rules.style' must be an object")

    for key in ("restrictions", "preferences"):
        item = value.get(key)
        if item is not None and not isinstance(item, list):
            raise ValueError(f"'rules.{key}' must be a list")

    return Rules(
        context=value.get("context"),
        style=style,
        restrictions=value.get("restrictions"),
        preferences=value.get("preferences"),
    )


def _parse_files(value: Any) -> list[TemplateFile] | None:
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValueError("'files' must be a list")

    files = []
    for i, entry in enumerate(value):
        if not isinstance(entry, dict):
            raise ValueError(f"files[{i}] must be an object")
        path = entry.get("path")
        if path is not None and not isinstance(path, str):
            raise ValueError(f"files[{i}].path must be a string")
        content = entry.get("content")
        if content is not None and not isinstance(content, str):
            raise ValueError(f"files[{i}].content must be a string")
        files.append(TemplateFile(path=path, content=content))
    return files
