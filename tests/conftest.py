"""Shared fixtures for the cursor-templates test suite."""

import copy
import json
from pathlib import Path

import pytest

CURSORRULES = (
    "You are an expert React developer.\n\n"
    "## Best Practices\n\n"
    + "- Prefer functional components with hooks.\n" * 14
    + "\n```tsx\nexport const App = () => <div />;\n```\n"
)

FULL_TEMPLATE = {
    "name": "react-typescript-vite",
    "description": "React 18 with TypeScript, Vite, Tailwind CSS and a tested component setup",
    "version": "1.0.0",
    "author": "cursor-templates",
    "tags": ["react", "typescript", "vite"],
    "rules": {
        "context": "Modern React application with TypeScript",
        "style": {
            "language": "typescript",
            "framework": "react",
            "conventions": ["Use functional components"],
        },
        "restrictions": ["No class components"],
        "preferences": ["Prefer composition"],
    },
    "files": [
        {"path": ".cursorrules", "content": CURSORRULES},
        {"path": "src/App.tsx", "content": "export const App = () => null;\n"},
    ],
    "commands": {"install": "npm install", "dev": "npm run dev", "build": "npm run build"},
}


@pytest.fixture
def make_template():
    """Factory returning a complete descriptor dict with overrides applied.

    An override value of ``None`` removes the key.
    """

    def _make(**overrides) -> dict:
        data = copy.deepcopy(FULL_TEMPLATE)
        for key, value in overrides.items():
            if value is None:
                data.pop(key, None)
            else:
                data[key] = value
        return data

    return _make


@pytest.fixture
def home(tmp_path) -> Path:
    """An installation root with an empty templates directory."""
    (tmp_path / "templates").mkdir()
    return tmp_path


@pytest.fixture
def write_template(home):
    """Write a descriptor into ``<home>/templates/<directory>/template.json``."""

    def _write(data, directory: str | None = None) -> Path:
        directory = directory or data.get("name") or "unnamed"
        path = home / "templates" / directory / "template.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    return _write
