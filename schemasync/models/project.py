"""Project model combining store configuration, migration settings and tables."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from schemasync.models.config import MigrationSettings, StoreConfig
from schemasync.models.schema import SchemaDescriptor, TableSpec


class Project(BaseModel):
    """Complete project definition for a schema migration."""

    model_config = ConfigDict(protected_namespaces=(), populate_by_name=True)

    name: str = Field(default="schemasync", description="Project name")
    store: StoreConfig = Field(description="Remote store configuration")
    migration: MigrationSettings = Field(
        default_factory=MigrationSettings, description="Migration run settings"
    )
    tables: List[TableSpec] = Field(
        default_factory=list, description="Declared tables, in migration order"
    )

    @property
    def descriptor(self) -> SchemaDescriptor:
        return SchemaDescriptor(tables=self.tables)

    @classmethod
    def from_dict(cls, data: dict) -> "Project":
        """Create Project from dictionary (after template rendering)."""
        return cls(**data)
