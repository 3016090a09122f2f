"""Structural pre-flight check for schema descriptors.

Shared by the migration engine and the exporters. Runs before any remote
I/O; a failure is never retried.
"""

from schemasync.core.exceptions import ValidationError
from schemasync.models.schema import LogicalType, SchemaDescriptor


def validate_descriptor(descriptor: SchemaDescriptor) -> None:
    """Validate the structure of a schema descriptor.

    Args:
        descriptor: Descriptor to check. An empty descriptor is valid.

    Raises:
        ValidationError: Naming the offending table index
    """
    seen_ids: dict[str, int] = {}

    for i, table in enumerate(descriptor.tables):
        if not table.name or not table.name.strip():
            raise ValidationError(
                f"Invalid table definition at index {i}: missing or invalid 'name' field",
                context={"table_index": i},
            )

        if not table.fields:
            raise ValidationError(
                f"Invalid table definition '{table.name}': schema must contain at least one field",
                context={"table_index": i, "table": table.name},
            )

        collection_id = table.collection_id
        if collection_id in seen_ids:
            raise ValidationError(
                f"Invalid table definition '{table.name}': collection id "
                f"'{collection_id}' is already used by table at index {seen_ids[collection_id]}",
                context={"table_index": i, "table": table.name},
            )
        seen_ids[collection_id] = i

        for field_name, field in table.fields.items():
            if not field_name:
                raise ValidationError(
                    f"Invalid table definition '{table.name}': empty field name",
                    context={"table_index": i, "table": table.name},
                )
            if field.type == LogicalType.ENUM and not field.enum_values:
                raise ValidationError(
                    f"Enum field {field_name} must have an enum array",
                    context={"table_index": i, "table": table.name, "field": field_name},
                )
