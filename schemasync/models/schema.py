"""Schema descriptor models.

The descriptor is the declarative, in-application description of the
collections a project expects: named tables, typed fields with constraints
and named indexes. It is immutable input to both the migration engine and
the exporters.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class LogicalType(str, Enum):
    """Logical field type as declared by the application."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    ENUM = "enum"


# Accepted spellings for declared types
TYPE_ALIASES = {
    "string": LogicalType.STRING,
    "integer": LogicalType.INTEGER,
    "number": LogicalType.INTEGER,
    "float": LogicalType.FLOAT,
    "boolean": LogicalType.BOOLEAN,
    "datetime": LogicalType.DATETIME,
    "date": LogicalType.DATETIME,
    "Date": LogicalType.DATETIME,
    "enum": LogicalType.ENUM,
}


class IndexKind(str, Enum):
    UNIQUE = "unique"
    KEY = "key"
    FULLTEXT = "fulltext"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


Number = Union[int, float]


class FieldSpec(BaseModel):
    """Declared field on a table."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: LogicalType = Field(description="Logical field type")
    required: bool = Field(default=False, description="Whether a value is required")
    array: bool = Field(default=False, description="Whether the field holds a list")
    size: Optional[int] = Field(
        default=None, description="Maximum length (string fields only)", gt=0
    )
    min: Optional[Number] = Field(default=None, description="Minimum (numeric only)")
    max: Optional[Number] = Field(default=None, description="Maximum (numeric only)")
    enum_values: Optional[List[str]] = Field(
        default=None,
        description="Allowed values (enum fields only)",
        validation_alias=AliasChoices("enum_values", "enum", "elements"),
    )
    default_value: Any = Field(
        default=None,
        description="Default value; null means no default",
        validation_alias=AliasChoices("default_value", "default"),
    )

    @model_validator(mode="before")
    @classmethod
    def _normalize_type(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        declared = data.get("type")
        if isinstance(declared, (list, tuple)):
            data["type"] = LogicalType.ENUM
            if not any(k in data for k in ("enum", "enum_values", "elements")):
                data["enum_values"] = list(declared)
        elif isinstance(declared, str) and declared in TYPE_ALIASES:
            data["type"] = TYPE_ALIASES[declared]
        return data

    @property
    def is_numeric(self) -> bool:
        return self.type in (LogicalType.INTEGER, LogicalType.FLOAT)

    @property
    def effective_default(self) -> Any:
        """Default that may be submitted to the store.

        Required fields never carry a default.
        """
        if self.required:
            return None
        return self.default_value


class IndexSpec(BaseModel):
    """Declared index on a table."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str = Field(description="Unique index identifier")
    kind: IndexKind = Field(
        description="Index kind", validation_alias=AliasChoices("kind", "type")
    )
    attributes: List[str] = Field(description="Ordered field names")
    orders: Optional[List[SortOrder]] = Field(
        default=None, description="Sort order per attribute"
    )


class TableSpec(BaseModel):
    """Declared collection."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = Field(
        default=None, description="Collection id (defaults to name)"
    )
    name: str = Field(default="", description="Table name")
    fields: dict[str, FieldSpec] = Field(
        default_factory=dict,
        description="Field name to field spec, in declaration order",
        validation_alias=AliasChoices("fields", "schema"),
    )
    indexes: List[IndexSpec] = Field(default_factory=list)
    permissions: Optional[dict[str, Any]] = Field(
        default=None,
        description="Action to role(s) map; public read when omitted",
        validation_alias=AliasChoices("permissions", "role"),
    )

    @property
    def collection_id(self) -> str:
        return self.id or self.name


class SchemaDescriptor(BaseModel):
    """Ordered list of declared tables."""

    model_config = ConfigDict(frozen=True)

    tables: List[TableSpec] = Field(default_factory=list)

    def collection_id_for(self, name: str) -> str:
        """Resolve a table name to the collection id used against the store."""
        for table in self.tables:
            if table.name == name:
                return table.collection_id
        raise KeyError(name)

    def get_table(self, name_or_id: str) -> Optional[TableSpec]:
        for table in self.tables:
            if name_or_id in (table.name, table.collection_id):
                return table
        return None

    @classmethod
    def from_tables(cls, tables: list[dict] | list[TableSpec]) -> "SchemaDescriptor":
        return cls(tables=list(tables))
