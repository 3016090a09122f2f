"""Field create/update payloads.

The store rejects a default value on a required field, so every payload
built here drops the default whenever the declaration is required.
"""

from schemasync.core.type_mapping import declared_size, to_store_type
from schemasync.models.schema import FieldSpec, LogicalType
from schemasync.stores.base import FieldDefinition, FieldUpdate


def build_field_definition(field: FieldSpec) -> FieldDefinition:
    """Constraints for creating ``field``."""
    numeric = field.is_numeric
    return FieldDefinition(
        store_type=to_store_type(field.type),
        required=field.required,
        array=field.array,
        size=declared_size(field),
        min=field.min if numeric else None,
        max=field.max if numeric else None,
        default=field.effective_default,
        enum_values=list(field.enum_values or [])
        if field.type == LogicalType.ENUM
        else None,
    )


def build_field_update(field: FieldSpec) -> FieldUpdate:
    """Mutable constraints for updating ``field`` in place."""
    numeric = field.is_numeric
    return FieldUpdate(
        store_type=to_store_type(field.type),
        required=field.required,
        default=field.effective_default,
        min=field.min if numeric else None,
        max=field.max if numeric else None,
        enum_values=list(field.enum_values or [])
        if field.type == LogicalType.ENUM
        else None,
    )
