"""SQL DDL exporter.

Renders one SQLite-compatible ``CREATE TABLE`` statement per table. Every
table gets a ``$id`` primary key column for the store's document id.
"""

from typing import Any

from schemasync.core.type_mapping import to_sql_type
from schemasync.core.validation import validate_descriptor
from schemasync.exporters.formatting import format_number
from schemasync.models.schema import (
    FieldSpec,
    IndexKind,
    LogicalType,
    SchemaDescriptor,
    TableSpec,
)

EMPTY_SQL = "-- No tables defined\n"


def export_sql(descriptor: SchemaDescriptor) -> str:
    """Render ``descriptor`` as SQL DDL.

    Raises:
        ValidationError: The descriptor is malformed.
    """
    validate_descriptor(descriptor)
    if not descriptor.tables:
        return EMPTY_SQL
    return "\n\n".join(_table_sql(table) for table in descriptor.tables)


def _table_sql(table: TableSpec) -> str:
    columns = ["  $id VARCHAR(255) PRIMARY KEY"]
    columns.extend(f"  {_column_sql(name, field)}" for name, field in table.fields.items())
    columns.extend(_constraints(table))
    body = ",\n".join(columns)
    return f"CREATE TABLE {table.collection_id} (\n{body}\n);"


def _column_sql(name: str, field: FieldSpec) -> str:
    parts = [name, to_sql_type(field)]
    if field.required:
        parts.append("NOT NULL")
    if field.default_value is not None:
        parts.append(f"DEFAULT {_sql_literal(field.default_value)}")
    return " ".join(parts)


def _constraints(table: TableSpec) -> list[str]:
    constraints = [
        f"  UNIQUE ({', '.join(index.attributes)})"
        for index in table.indexes
        if index.kind == IndexKind.UNIQUE and index.attributes
    ]
    for name, field in table.fields.items():
        constraints.extend(_check_constraints(name, field))
    return constraints


def _check_constraints(name: str, field: FieldSpec) -> list[str]:
    if field.array:
        return []

    if field.is_numeric:
        if field.min is not None and field.max is not None:
            return [
                f"  CHECK ({name} >= {format_number(field.min)} "
                f"AND {name} <= {format_number(field.max)})"
            ]
        if field.min is not None:
            return [f"  CHECK ({name} >= {format_number(field.min)})"]
        if field.max is not None:
            return [f"  CHECK ({name} <= {format_number(field.max)})"]
    elif field.type == LogicalType.BOOLEAN:
        return [f"  CHECK ({name} IN (0, 1))"]
    elif field.type == LogicalType.ENUM and field.enum_values:
        values = ", ".join(f"'{_escape(v)}'" for v in field.enum_values)
        return [f"  CHECK ({name} IN ({values}))"]
    return []


def _sql_literal(value: Any) -> str:
    # bool first: it is a subclass of int
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return format_number(value)
    return f"'{_escape(str(value))}'"


def _escape(value: str) -> str:
    return value.replace("'", "''")
