"""Plain-text schema report."""

from typing import Any

from schemasync.core.validation import validate_descriptor
from schemasync.exporters.formatting import format_number
from schemasync.models.schema import FieldSpec, LogicalType, SchemaDescriptor, TableSpec

HEADER = "Database Schema\n==============="
EMPTY_TEXT = f"{HEADER}\n\nNo tables defined.\n"


def export_text(descriptor: SchemaDescriptor) -> str:
    """Render ``descriptor`` as a human-readable report.

    Raises:
        ValidationError: The descriptor is malformed.
    """
    validate_descriptor(descriptor)
    if not descriptor.tables:
        return EMPTY_TEXT
    sections = [_table_text(table) for table in descriptor.tables]
    return f"{HEADER}\n\n" + "\n\n".join(sections) + "\n"


def _table_text(table: TableSpec) -> str:
    name = table.collection_id
    lines = [
        f"Collection: {name}",
        "-" * (len(name) + 12),
        "Fields:",
        "  - $id (string, primary key)",
    ]
    lines.extend(_field_line(key, field) for key, field in table.fields.items())

    if table.indexes:
        lines.append("")
        lines.append("Indexes:")
        for index in table.indexes:
            lines.append(
                f"  - {index.key} ({index.kind.value}): {', '.join(index.attributes)}"
            )
    return "\n".join(lines)


def _field_line(key: str, field: FieldSpec) -> str:
    attributes = [_type_description(field)]
    if field.required:
        attributes.append("required")
    if field.array:
        attributes.append("array")
    if field.type == LogicalType.STRING and field.size is not None:
        attributes.append(f"max length: {field.size}")
    if field.min is not None:
        attributes.append(f"min: {format_number(field.min)}")
    if field.max is not None:
        attributes.append(f"max: {format_number(field.max)}")
    if field.default_value is not None:
        attributes.append(f"default: {_display_value(field.default_value)}")
    return f"  - {key} ({', '.join(attributes)})"


def _type_description(field: FieldSpec) -> str:
    if field.type == LogicalType.ENUM:
        if field.enum_values:
            return f"enum: {', '.join(field.enum_values)}"
        return "enum"
    return field.type.value


def _display_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)
