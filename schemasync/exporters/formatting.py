"""Value formatting shared by the exporters."""

from typing import Any


def format_number(value: Any) -> str:
    """Render a number without a trailing ``.0`` for whole floats."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
