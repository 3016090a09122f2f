"""Project loader with YAML parsing and template rendering."""

from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError as PydanticValidationError

from schemasync.core.exceptions import ConfigError
from schemasync.models.project import Project
from schemasync.models.templates import render_templates


def load_project(path: str, cli_vars: Dict[str, str] | None = None) -> Project:
    """
    Load a project from a YAML file.

    Args:
        path: Path to project YAML file
        cli_vars: Variables passed via CLI (e.g., --vars key=value)

    Returns:
        Validated Project instance

    Raises:
        ConfigError: If file not found, invalid YAML, a template variable is
            missing, or model validation fails
    """
    project_path = Path(path)
    if not project_path.exists():
        raise ConfigError(f"Project file not found: {path}")

    project_dict = _read_yaml(project_path)
    project_dict = render_templates(project_dict, cli_vars)

    try:
        return Project.from_dict(project_dict)
    except PydanticValidationError as e:
        raise ConfigError(
            f"Project validation failed: {e}", context={"path": str(path)}
        ) from e


def _read_yaml(project_path: Path) -> Dict[str, Any]:
    try:
        with open(project_path, "r", encoding="utf-8") as f:
            project_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML in project file: {e}", context={"path": str(project_path)}
        ) from e

    if not isinstance(project_dict, dict):
        raise ConfigError(
            "Project file must contain a YAML dictionary",
            context={"path": str(project_path)},
        )
    return project_dict
