"""Schema store protocol.

This module defines the narrow surface the migration engine needs from a
remote, collection-oriented store. Implementations translate these calls to
their own wire format and translate responses into the observed-state
models in ``schemasync.models.remote``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, runtime_checkable

from schemasync.models.remote import RemoteCollection, RemoteIndex, StoreType


@dataclass(frozen=True)
class FieldDefinition:
    """Constraints submitted when creating a field."""

    store_type: StoreType
    required: bool = False
    array: bool = False
    size: Optional[int] = None
    min: Optional[float] = None
    max: Optional[float] = None
    default: Any = None
    enum_values: Optional[List[str]] = None


@dataclass(frozen=True)
class FieldUpdate:
    """Mutable constraints submitted when updating a field in place.

    ``default`` is always explicit: ``None`` means "no default", which is the
    only value allowed when ``required`` is true.
    """

    store_type: StoreType
    required: bool
    default: Any = None
    min: Optional[float] = None
    max: Optional[float] = None
    enum_values: Optional[List[str]] = None


@runtime_checkable
class SchemaStore(Protocol):
    """Remote schema store operations used by the migration engine.

    Every method raises ``RemoteOperationError`` on failure. Only
    ``get_database`` and ``get_collection`` report absence by returning a
    falsy value instead of raising.
    """

    def get_database(self, database_id: str) -> Optional[dict]:
        ...

    def create_database(self, database_id: str, name: str) -> dict:
        ...

    def get_collection(
        self, database_id: str, collection_id: str
    ) -> Optional[RemoteCollection]:
        ...

    def create_collection(
        self,
        database_id: str,
        collection_id: str,
        name: str,
        permissions: List[str],
    ) -> RemoteCollection:
        ...

    def create_field(
        self,
        database_id: str,
        collection_id: str,
        key: str,
        definition: FieldDefinition,
    ) -> None:
        ...

    def update_field(
        self,
        database_id: str,
        collection_id: str,
        key: str,
        update: FieldUpdate,
    ) -> None:
        ...

    def create_index(
        self,
        database_id: str,
        collection_id: str,
        key: str,
        kind: str,
        attributes: List[str],
        orders: Optional[List[str]] = None,
    ) -> None:
        ...

    def list_indexes(self, database_id: str, collection_id: str) -> List[RemoteIndex]:
        ...

    def delete_index(self, database_id: str, collection_id: str, key: str) -> None:
        ...
