"""Template rendering for project values with Jinja2-style syntax."""

import os
import re
from typing import Any, Dict

from schemasync.core.exceptions import ConfigError


def render_templates(
    project_dict: Dict[str, Any], cli_vars: Dict[str, str] | None = None
) -> Dict[str, Any]:
    """
    Render Jinja2-style templates in a project dictionary.

    Supports:
    - {{ env_var('VAR_NAME') }} - environment variable lookup
    - {{ var('VAR_NAME') }} - CLI variable lookup
    - {{ project.name }} - project metadata

    Args:
        project_dict: Project dictionary (may contain template expressions)
        cli_vars: Variables passed via CLI (e.g., --vars key=value)

    Returns:
        Project dictionary with templates rendered
    """
    context = {
        "project": {"name": project_dict.get("name", "")},
        "env_var": _get_env_var,
        "var": lambda key: _get_cli_var(key, cli_vars or {}),
    }

    return _render_dict(project_dict, context)


def _get_env_var(key: str) -> str:
    value = os.environ.get(key)
    if value is None:
        raise ConfigError(
            f"Environment variable '{key}' not found",
            context={"key": key},
        )
    return value


def _get_cli_var(key: str, cli_vars: Dict[str, str]) -> str:
    if key not in cli_vars:
        raise ConfigError(
            f"CLI variable '{key}' not provided",
            context={"key": key, "available": list(cli_vars.keys())},
        )
    return cli_vars[key]


def _render_dict(data: Dict[str, Any], context: Dict[str, Any]) -> Dict[str, Any]:
    return {key: _render_value(value, context) for key, value in data.items()}


def _render_value(value: Any, context: Dict[str, Any]) -> Any:
    if isinstance(value, dict):
        return _render_dict(value, context)
    elif isinstance(value, list):
        return [_render_value(item, context) for item in value]
    elif isinstance(value, str):
        return _render_string(value, context)
    else:
        return value


def _render_string(text: str, context: Dict[str, Any]) -> str:
    pattern = r"\{\{\s*([^}]+)\s*\}\}"

    def replace(match):
        expr = match.group(1).strip()
        try:
            func_match = re.match(r"(\w+)\(['\"]([^'\"]+)['\"]\)", expr)
            if func_match:
                func_name, arg = func_match.group(1), func_match.group(2)
                if func_name in context and callable(context[func_name]):
                    return str(context[func_name](arg))
                raise ConfigError(
                    f"Unknown function: {func_name}",
                    context={"expression": expr, "available": list(context.keys())},
                )

            result = context
            for part in expr.split("."):
                result = result[part]
            return str(result)
        except (KeyError, TypeError) as e:
            raise ConfigError(
                f"Template rendering failed: {expr}",
                context={"expression": expr, "error": str(e)},
            ) from e

    return re.sub(pattern, replace, text)
