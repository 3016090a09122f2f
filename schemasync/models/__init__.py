"""Models for schema descriptors, remote state and project configuration."""

from schemasync.models.config import MigrationSettings, StoreConfig
from schemasync.models.loader import load_project
from schemasync.models.project import Project
from schemasync.models.remote import (
    FieldStatus,
    RemoteCollection,
    RemoteField,
    RemoteIndex,
    StoreType,
)
from schemasync.models.schema import (
    FieldSpec,
    IndexKind,
    IndexSpec,
    LogicalType,
    SchemaDescriptor,
    SortOrder,
    TableSpec,
)

__all__ = [
    "FieldSpec",
    "IndexKind",
    "IndexSpec",
    "LogicalType",
    "SchemaDescriptor",
    "SortOrder",
    "TableSpec",
    "FieldStatus",
    "RemoteCollection",
    "RemoteField",
    "RemoteIndex",
    "StoreType",
    "StoreConfig",
    "MigrationSettings",
    "Project",
    "load_project",
]
