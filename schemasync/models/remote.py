"""Observed remote state.

These models decouple the reconciler from any one store's response shape.
They are built fresh by the store on every fetch and never cached.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from schemasync.models.schema import Number


class StoreType(str, Enum):
    """Field type as stored by the remote store."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    ENUM = "enum"
    # relationship, geometry and other types this package does not model
    UNSUPPORTED = "unsupported"


class FieldStatus(str, Enum):
    """Provisioning status of a remote field."""

    PENDING = "pending"
    AVAILABLE = "available"
    FAILED = "failed"

    @classmethod
    def from_store(cls, value: Optional[str]) -> "FieldStatus":
        """Map a store-specific status string onto the three known states.

        Unknown or transitional states ("processing", "deleting") count as
        pending so that they are polled rather than trusted.
        """
        if value is None:
            return cls.PENDING
        lowered = value.lower()
        if lowered == "available":
            return cls.AVAILABLE
        if lowered in ("failed", "stuck"):
            return cls.FAILED
        return cls.PENDING


class RemoteField(BaseModel):
    key: str
    store_type: StoreType
    required: bool = False
    array: bool = False
    size: Optional[int] = None
    min: Optional[Number] = None
    max: Optional[Number] = None
    default: Any = None
    enum_values: Optional[List[str]] = None
    status: FieldStatus = FieldStatus.AVAILABLE


class RemoteIndex(BaseModel):
    key: str
    kind: str
    attributes: List[str] = Field(default_factory=list)
    orders: Optional[List[Optional[str]]] = None
    status: FieldStatus = FieldStatus.AVAILABLE


class RemoteCollection(BaseModel):
    id: str
    name: Optional[str] = None
    fields: List[RemoteField] = Field(default_factory=list)
    indexes: List[RemoteIndex] = Field(default_factory=list)

    def get_field(self, key: str) -> Optional[RemoteField]:
        for remote_field in self.fields:
            if remote_field.key == key:
                return remote_field
        return None

    def index_keys(self) -> set[str]:
        return {index.key for index in self.indexes}
