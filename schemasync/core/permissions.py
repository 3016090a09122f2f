"""Conversion of declared table roles to store permission strings."""

from typing import Any, Optional

DEFAULT_PERMISSIONS = ['read("any")']

PUBLIC_ROLES = ("any", "public")


def role_to_permissions(role: Optional[dict[str, Any]]) -> list[str]:
    """Convert a role mapping to permission strings.

    ``{"read": "any", "write": ["team:1", "user:2"]}`` becomes
    ``['read("any")', 'write("team:1")', 'write("user:2")']``. Tables without
    a role (or whose role yields nothing) get public read access.
    """
    if not role:
        return list(DEFAULT_PERMISSIONS)

    permissions: list[str] = []
    for action, value in role.items():
        if value in PUBLIC_ROLES:
            permissions.append(f'{action}("any")')
        elif isinstance(value, str):
            permissions.append(f'{action}("{value}")')
        elif isinstance(value, (list, tuple)):
            permissions.extend(f'{action}("{v}")' for v in value)

    return permissions or list(DEFAULT_PERMISSIONS)
