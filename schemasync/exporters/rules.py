"""Security-rules exporter for a realtime hierarchical store.

Produces a JSON rule tree: one node per collection with ``.read`` /
``.write`` expressions derived from the table permissions, and a
``$itemId`` wildcard node holding per-field ``.validate`` expressions.
"""

import json
import re
from typing import Any, Optional

from schemasync.core.validation import validate_descriptor
from schemasync.exporters.formatting import format_number
from schemasync.models.schema import FieldSpec, LogicalType, SchemaDescriptor, TableSpec

AUTHENTICATED = "auth != null"
WRITE_ACTIONS = ("write", "create", "update", "delete")

_REGEX_SPECIAL = re.compile(r"[.*+?^${}()|\[\]\\]")

TYPE_RULES = {
    LogicalType.STRING: "newData.isString()",
    LogicalType.ENUM: "newData.isString()",
    LogicalType.DATETIME: "newData.isString()",
    LogicalType.INTEGER: "newData.isNumber() && newData.val() === Math.floor(newData.val())",
    LogicalType.FLOAT: "newData.isNumber()",
    LogicalType.BOOLEAN: "newData.isBoolean()",
}


def export_rules(descriptor: SchemaDescriptor) -> str:
    """Render ``descriptor`` as an indented JSON rules document.

    Raises:
        ValidationError: The descriptor is malformed.
    """
    validate_descriptor(descriptor)
    rules = {table.collection_id: _collection_rules(table) for table in descriptor.tables}
    return json.dumps({"rules": rules}, indent=2)


def _collection_rules(table: TableSpec) -> dict[str, Any]:
    read, write = _access_rules(table.permissions)

    document: dict[str, Any] = {}
    required = [name for name, field in table.fields.items() if field.required]
    if required:
        names = ", ".join(f"'{name}'" for name in required)
        document[".validate"] = f"newData.hasChildren([{names}])"
    for name, field in table.fields.items():
        document[name] = _field_rules(field)

    return {".read": read, ".write": write, "$itemId": document}


def _access_rules(permissions: Optional[dict[str, Any]]) -> tuple[str, str]:
    if not permissions:
        return AUTHENTICATED, AUTHENTICATED

    read_rules = []
    write_rules = []
    for action, roles in permissions.items():
        expression = _auth_expression(roles)
        if action == "read":
            read_rules.append(expression)
        elif action in WRITE_ACTIONS:
            write_rules.append(expression)

    return (
        " || ".join(read_rules) or AUTHENTICATED,
        " || ".join(write_rules) or AUTHENTICATED,
    )


def _auth_expression(roles: Any) -> str:
    if roles in ("any", "public"):
        return "true"
    if isinstance(roles, str):
        return f"auth != null && auth.token.role == '{roles}'"
    if isinstance(roles, list):
        checks = " || ".join(f"auth.token.role == '{role}'" for role in roles)
        return f"auth != null && ({checks})"
    return AUTHENTICATED


def _field_rules(field: FieldSpec) -> dict[str, str]:
    if field.array:
        # list values are plain child nodes and are not validated
        return {}

    rules = [TYPE_RULES[field.type]]
    if field.type == LogicalType.STRING and field.size is not None:
        rules.append(f"newData.val().length <= {field.size}")
    if field.is_numeric:
        if field.min is not None:
            rules.append(f"newData.val() >= {format_number(field.min)}")
        if field.max is not None:
            rules.append(f"newData.val() <= {format_number(field.max)}")
    if field.type == LogicalType.ENUM and field.enum_values:
        pattern = "|".join(_REGEX_SPECIAL.sub(r"\\\g<0>", v) for v in field.enum_values)
        rules.append(f"newData.val().matches(/^({pattern})$/)")

    return {".validate": " && ".join(rules)}
