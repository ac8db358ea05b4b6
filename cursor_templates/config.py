"""Settings for a cursor-templates installation.

Paths resolve against an installation *home*: the ``--home`` option, else
the ``CURSOR_TEMPLATES_HOME`` environment variable, else the current working
directory. An optional ``cursor-templates.yaml`` in the home overrides the
default file locations.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from cursor_templates.errors import ConfigurationError

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "CURSOR_TEMPLATES_HOME"
CONFIG_FILE = "cursor-templates.yaml"

DEFAULT_PATHS = {
    "templates_dir": "templates",
    "registry_file": "registry.json",
    "ratings_file": "ratings.json",
    "quality_report": "quality-metrics.json",
    "validation_report": "template-test-report.json",
}


@dataclass
class Settings:
    """Resolved filesystem locations used by every command."""

    home: Path
    templates_dir: Path
    registry_file: Path
    ratings_file: Path
    quality_report: Path
    validation_report: Path


def load_settings(home: str | Path | None = None) -> Settings:
    """Resolve settings from the explicit home, the environment and the config file."""
    root = Path(home or os.environ.get(HOME_ENV_VAR) or Path.cwd()).expanduser().resolve()

    values = dict(DEFAULT_PATHS)
    overrides = _read_config_file(root / CONFIG_FILE)
    for key, value in overrides.items():
        if key not in DEFAULT_PATHS:
            logger.warning("Ignoring unknown setting %r in %s", key, CONFIG_FILE)
            continue
        values[key] = str(value)

    resolved = {key: _resolve(root, value) for key, value in values.items()}
    return Settings(home=root, **resolved)


def _read_config_file(path: Path) -> dict:
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Could not read {path}", details=str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping of settings")

    logger.debug("Loaded settings from %s", path)
    return data


def _resolve(root: Path, value: str) -> Path:
    candidate = Path(value).expanduser()
    return candidate if candidate.is_absolute() else root / candidate
