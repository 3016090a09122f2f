"""In-memory schema store.

Keeps databases, collections, fields and indexes in process memory and
mimics the behavior the engine relies on from a real store: asynchronous
field provisioning, "already exists" errors with structured codes, and the
required/default exclusivity rule. Used for tests, dry experiments and the
``memory`` store type.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List, Optional

from schemasync.core.exceptions import RemoteOperationError
from schemasync.models.config import StoreConfig
from schemasync.models.remote import (
    FieldStatus,
    RemoteCollection,
    RemoteField,
    RemoteIndex,
    StoreType,
)
from schemasync.stores.base import FieldDefinition, FieldUpdate
from schemasync.stores.registry import register_store

logger = logging.getLogger(__name__)

WRITE_OPERATIONS = frozenset(
    {
        "create_database",
        "create_collection",
        "create_field",
        "update_field",
        "create_index",
        "delete_index",
    }
)


class InMemorySchemaStore:
    """Schema store backed by dictionaries.

    Args:
        provisioning_polls: Number of ``get_collection`` calls a new field
            stays ``pending`` before it becomes ``available``.
    """

    def __init__(self, provisioning_polls: int = 0) -> None:
        self.provisioning_polls = provisioning_polls
        # keys that stay pending forever / end up failed
        self.never_available: set[str] = set()
        self.failing: set[str] = set()
        # called as on_write(operation, collection_id, key) before every write
        self.on_write: Optional[Callable[[str, Optional[str], Optional[str]], None]] = None
        self.calls: list[tuple[str, Optional[str], Optional[str]]] = []

        self._lock = threading.Lock()
        self._databases: dict[str, dict[str, Any]] = {}
        self._collections: dict[tuple[str, str], RemoteCollection] = {}
        self._countdown: dict[tuple[str, str, str], int] = {}
        self._errors: dict[str, list[RemoteOperationError]] = {}

    # Test helpers

    def fail_next(self, operation: str, error: RemoteOperationError) -> None:
        """Make the next call to ``operation`` raise ``error``."""
        self._errors.setdefault(operation, []).append(error)

    def add_field(
        self, database_id: str, collection_id: str, remote: RemoteField
    ) -> None:
        """Seed a field on an existing collection, as a concurrent run would."""
        collection = self._collections[(database_id, collection_id)]
        collection.fields.append(remote.model_copy(deep=True))

    def writes(self) -> list[tuple[str, Optional[str], Optional[str]]]:
        return [call for call in self.calls if call[0] in WRITE_OPERATIONS]

    def add_collection(
        self, database_id: str, collection: RemoteCollection
    ) -> None:
        """Seed a collection directly, without recording a call."""
        self._databases.setdefault(database_id, {"$id": database_id, "name": database_id})
        self._collections[(database_id, collection.id)] = collection.model_copy(deep=True)

    # SchemaStore

    def get_database(self, database_id: str) -> Optional[dict]:
        self._record("get_database")
        database = self._databases.get(database_id)
        return dict(database) if database else None

    def create_database(self, database_id: str, name: str) -> dict:
        self._record("create_database")
        with self._lock:
            if database_id in self._databases:
                raise RemoteOperationError(
                    f"Database with the requested ID '{database_id}' already exists",
                    code="database_already_exists",
                    status_code=409,
                )
            self._databases[database_id] = {"$id": database_id, "name": name}
            return dict(self._databases[database_id])

    def get_collection(
        self, database_id: str, collection_id: str
    ) -> Optional[RemoteCollection]:
        self._record("get_collection", collection_id)
        with self._lock:
            collection = self._collections.get((database_id, collection_id))
            if collection is None:
                return None
            self._advance_provisioning(database_id, collection)
            return collection.model_copy(deep=True)

    def create_collection(
        self,
        database_id: str,
        collection_id: str,
        name: str,
        permissions: List[str],
    ) -> RemoteCollection:
        self._record("create_collection", collection_id)
        with self._lock:
            self._require_database(database_id)
            if (database_id, collection_id) in self._collections:
                raise RemoteOperationError(
                    "Collection with the requested ID already exists",
                    code="collection_already_exists",
                    status_code=409,
                )
            collection = RemoteCollection(id=collection_id, name=name)
            self._collections[(database_id, collection_id)] = collection
            return collection.model_copy(deep=True)

    def create_field(
        self,
        database_id: str,
        collection_id: str,
        key: str,
        definition: FieldDefinition,
    ) -> None:
        self._record("create_field", collection_id, key)
        with self._lock:
            collection = self._require_collection(database_id, collection_id)
            if collection.get_field(key) is not None:
                raise RemoteOperationError(
                    "Attribute with the requested key already exists",
                    code="attribute_already_exists",
                    status_code=409,
                )
            self._check_default(definition.required, definition.default)
            if definition.store_type == StoreType.ENUM and not definition.enum_values:
                raise RemoteOperationError(
                    "Enum attribute requires elements",
                    code="attribute_value_invalid",
                    status_code=400,
                )
            collection.fields.append(
                RemoteField(
                    key=key,
                    store_type=definition.store_type,
                    required=definition.required,
                    array=definition.array,
                    size=definition.size,
                    min=definition.min,
                    max=definition.max,
                    default=definition.default,
                    enum_values=definition.enum_values,
                    status=FieldStatus.PENDING,
                )
            )
            self._countdown[(database_id, collection_id, key)] = self.provisioning_polls

    def update_field(
        self,
        database_id: str,
        collection_id: str,
        key: str,
        update: FieldUpdate,
    ) -> None:
        self._record("update_field", collection_id, key)
        with self._lock:
            collection = self._require_collection(database_id, collection_id)
            remote = collection.get_field(key)
            if remote is None:
                raise RemoteOperationError(
                    "Attribute with the requested key could not be found",
                    code="attribute_not_found",
                    status_code=404,
                )
            if remote.store_type != update.store_type:
                raise RemoteOperationError(
                    "Attribute type does not match",
                    code="attribute_type_invalid",
                    status_code=400,
                )
            self._check_default(update.required, update.default)
            remote.required = update.required
            remote.default = update.default
            if update.min is not None:
                remote.min = update.min
            if update.max is not None:
                remote.max = update.max

    def create_index(
        self,
        database_id: str,
        collection_id: str,
        key: str,
        kind: str,
        attributes: List[str],
        orders: Optional[List[str]] = None,
    ) -> None:
        self._record("create_index", collection_id, key)
        with self._lock:
            collection = self._require_collection(database_id, collection_id)
            if key in collection.index_keys():
                raise RemoteOperationError(
                    "Index with the requested key already exists",
                    code="index_already_exists",
                    status_code=409,
                )
            for attribute in attributes:
                remote = collection.get_field(attribute)
                if remote is None:
                    raise RemoteOperationError(
                        f"Unknown attribute: {attribute}",
                        code="attribute_unknown",
                        status_code=400,
                    )
                if remote.status != FieldStatus.AVAILABLE:
                    raise RemoteOperationError(
                        f"Attribute not available: {attribute}",
                        code="attribute_not_available",
                        status_code=400,
                    )
            collection.indexes.append(
                RemoteIndex(
                    key=key,
                    kind=kind,
                    attributes=list(attributes),
                    orders=list(orders) if orders else None,
                )
            )

    def list_indexes(self, database_id: str, collection_id: str) -> List[RemoteIndex]:
        self._record("list_indexes", collection_id)
        with self._lock:
            collection = self._require_collection(database_id, collection_id)
            return [index.model_copy(deep=True) for index in collection.indexes]

    def delete_index(self, database_id: str, collection_id: str, key: str) -> None:
        self._record("delete_index", collection_id, key)
        with self._lock:
            collection = self._require_collection(database_id, collection_id)
            if key not in collection.index_keys():
                raise RemoteOperationError(
                    "Index with the requested key could not be found",
                    code="index_not_found",
                    status_code=404,
                )
            collection.indexes = [i for i in collection.indexes if i.key != key]

    # Internals

    def _record(
        self, operation: str, collection_id: Optional[str] = None, key: Optional[str] = None
    ) -> None:
        self.calls.append((operation, collection_id, key))
        if operation in WRITE_OPERATIONS and self.on_write is not None:
            self.on_write(operation, collection_id, key)
        queued = self._errors.get(operation)
        if queued:
            raise queued.pop(0)

    def _require_database(self, database_id: str) -> None:
        if database_id not in self._databases:
            raise RemoteOperationError(
                "Database not found", code="database_not_found", status_code=404
            )

    def _require_collection(
        self, database_id: str, collection_id: str
    ) -> RemoteCollection:
        self._require_database(database_id)
        collection = self._collections.get((database_id, collection_id))
        if collection is None:
            raise RemoteOperationError(
                "Collection with the requested ID could not be found",
                code="collection_not_found",
                status_code=404,
            )
        return collection

    def _check_default(self, required: bool, default: Any) -> None:
        if required and default is not None:
            raise RemoteOperationError(
                "Cannot set default value for required attribute",
                code="attribute_default_unsupported",
                status_code=400,
            )

    def _advance_provisioning(
        self, database_id: str, collection: RemoteCollection
    ) -> None:
        for remote in collection.fields:
            if remote.status != FieldStatus.PENDING:
                continue
            if remote.key in self.never_available:
                continue
            countdown_key = (database_id, collection.id, remote.key)
            remaining = self._countdown.get(countdown_key, 0)
            if remaining > 0:
                self._countdown[countdown_key] = remaining - 1
                continue
            remote.status = (
                FieldStatus.FAILED if remote.key in self.failing else FieldStatus.AVAILABLE
            )
            self._countdown.pop(countdown_key, None)


@register_store("memory")
def create_memory_store(config: StoreConfig) -> InMemorySchemaStore:
    """Factory function for the in-memory store."""
    logger.debug(f"Using in-memory store for database {config.database_id}")
    return InMemorySchemaStore()
