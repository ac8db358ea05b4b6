"""Resolution of ``init`` inputs.

The template, project name and target path come either from command-line
flags or from interactive prompts. Resolution produces a single
``InitRequest`` for the materializer, so the core never talks to the user
directly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from cursor_templates.errors import TemplateError, TemplateNotFoundError
from cursor_templates.models.template import Template

PROJECT_NAME_PATTERN = re.compile(r"[a-zA-Z0-9._-]+")
DEFAULT_PROJECT_NAME = "my-project"


class ResolutionSource(Enum):
    FLAGS = "flags"  # Every input came from the command line
    PROMPT = "prompt"  # At least one input was asked for interactively


class Prompter(Protocol):
    """Asks the user for whatever the flags did not provide."""

    def choose_template(self, templates: list[Template]) -> Template: ...

    def ask_project_name(self, default: str) -> str: ...


@dataclass
class InitRequest:
    template: Template
    project_name: str
    target: Path
    source: ResolutionSource


def validate_project_name(name: str) -> str:
    """Return the stripped name, or raise when it is empty or has odd characters."""
    name = name.strip()
    if not name:
        raise TemplateError("Project name is required")
    if not PROJECT_NAME_PATTERN.fullmatch(name):
        raise TemplateError(
            f'Invalid project name "{name}"',
            details="Project name can only contain letters, numbers, dots, underscores, and hyphens",
        )
    return name


def resolve_init_request(
    templates: list[Template],
    template_name: str | None = None,
    project_name: str | None = None,
    path: str | Path | None = None,
    prompter: Prompter | None = None,
) -> InitRequest:
    """Resolve flags and prompts into a single request.

    Without a prompter, every missing input is an error. The target defaults
    to ``./<project_name>``; with an explicit path and no project name, the
    name defaults to the target directory's name.
    """
    source = ResolutionSource.FLAGS

    if template_name:
        template = next((t for t in templates if t.name == template_name), None)
        if template is None:
            raise TemplateNotFoundError(template_name)
    else:
        if prompter is None:
            raise TemplateError("No template selected", details="Pass --template or run interactively")
        if not templates:
            raise TemplateError("No templates available")
        template = prompter.choose_template(templates)
        source = ResolutionSource.PROMPT

    if project_name:
        name = validate_project_name(project_name)
    elif path is not None:
        name = validate_project_name(Path(path).resolve().name)
    else:
        if prompter is None:
            raise TemplateError("No project name given", details="Pass --name or --path")
        name = validate_project_name(prompter.ask_project_name(DEFAULT_PROJECT_NAME))
        source = ResolutionSource.PROMPT

    target = Path(path) if path is not None else Path(name)
    return InitRequest(template=template, project_name=name, target=target.resolve(), source=source)
