"""Shared type mapping utilities.

Centralizes the mapping from declared logical types to the remote store's
field types and to the generic SQL types used by the exporters.
"""

from schemasync.models.remote import StoreType
from schemasync.models.schema import FieldSpec, LogicalType

LOGICAL_TO_STORE_TYPE: dict[LogicalType, StoreType] = {
    LogicalType.STRING: StoreType.STRING,
    LogicalType.INTEGER: StoreType.INTEGER,
    LogicalType.FLOAT: StoreType.FLOAT,
    LogicalType.BOOLEAN: StoreType.BOOLEAN,
    LogicalType.DATETIME: StoreType.DATETIME,
    LogicalType.ENUM: StoreType.ENUM,
}

# String formats the store reports as plain string fields
STRING_FORMATS = frozenset({"email", "ip", "url"})

DEFAULT_STRING_SIZE = 255


def to_store_type(logical_type: LogicalType) -> StoreType:
    """Convert a declared logical type to the store's field type.

    Raises:
        ValueError: If the logical type has no store equivalent
    """
    try:
        return LOGICAL_TO_STORE_TYPE[logical_type]
    except KeyError:
        raise ValueError(f"Unsupported logical type: {logical_type}") from None


def parse_store_type(type_name: str, format_name: str | None = None) -> StoreType:
    """Convert a store-reported type (and optional format) to StoreType.

    Enum fields are reported by some stores as strings with an ``enum``
    format; formatted strings (email, url, ip) are plain strings. Types with
    no StoreType equivalent (relationship, point, ...) map to ``UNSUPPORTED``.
    """
    if format_name == "enum":
        return StoreType.ENUM
    if type_name in STRING_FORMATS or format_name in STRING_FORMATS:
        return StoreType.STRING
    if type_name == "double":
        return StoreType.FLOAT
    try:
        return StoreType(type_name)
    except ValueError:
        return StoreType.UNSUPPORTED


def declared_size(field: FieldSpec) -> int | None:
    """Size submitted for a field; strings default to 255 characters."""
    if field.type != LogicalType.STRING:
        return None
    return field.size or DEFAULT_STRING_SIZE


def to_sql_type(field: FieldSpec) -> str:
    """Generic (SQLite-compatible) SQL column type for a declared field."""
    if field.array:
        # stored as JSON text
        return "TEXT"
    if field.type in (LogicalType.STRING, LogicalType.ENUM):
        return f"VARCHAR({field.size or DEFAULT_STRING_SIZE})"
    if field.type == LogicalType.INTEGER:
        return "INTEGER"
    if field.type == LogicalType.FLOAT:
        return "REAL"
    if field.type == LogicalType.BOOLEAN:
        return "INTEGER"
    if field.type == LogicalType.DATETIME:
        return "TEXT"
    raise ValueError(f"Unsupported field type '{field.type}' for SQL export")
