"""Appwrite schema store.

Maps the engine's store operations onto the Appwrite databases REST API and
converts collection, attribute and index payloads into the observed-state
models.
"""

import logging
from typing import Any, List, Optional
from urllib.parse import quote

from schemasync.core.exceptions import RemoteOperationError
from schemasync.core.type_mapping import parse_store_type
from schemasync.models.config import StoreConfig
from schemasync.models.remote import (
    FieldStatus,
    RemoteCollection,
    RemoteField,
    RemoteIndex,
    StoreType,
)
from schemasync.stores.appwrite.client import AppwriteClient
from schemasync.stores.base import FieldDefinition, FieldUpdate
from schemasync.stores.registry import register_store

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = frozenset({"database_not_found", "collection_not_found"})


def parse_attribute(payload: dict[str, Any]) -> RemoteField:
    """Convert an attribute payload into a RemoteField."""
    store_type = parse_store_type(payload.get("type", ""), payload.get("format"))
    return RemoteField(
        key=payload["key"],
        store_type=store_type,
        required=bool(payload.get("required", False)),
        array=bool(payload.get("array", False)),
        size=payload.get("size"),
        min=payload.get("min"),
        max=payload.get("max"),
        default=payload.get("default"),
        enum_values=payload.get("elements") if store_type == StoreType.ENUM else None,
        status=FieldStatus.from_store(payload.get("status")),
    )


def parse_index(payload: dict[str, Any]) -> RemoteIndex:
    return RemoteIndex(
        key=payload["key"],
        kind=payload.get("type", ""),
        attributes=list(payload.get("attributes") or []),
        orders=payload.get("orders"),
        status=FieldStatus.from_store(payload.get("status")),
    )


def parse_collection(payload: dict[str, Any]) -> RemoteCollection:
    return RemoteCollection(
        id=payload["$id"],
        name=payload.get("name"),
        fields=[parse_attribute(a) for a in payload.get("attributes") or []],
        indexes=[parse_index(i) for i in payload.get("indexes") or []],
    )


class AppwriteSchemaStore:
    """Schema store talking to an Appwrite server."""

    def __init__(self, config: StoreConfig, client: Optional[AppwriteClient] = None):
        self._config = config
        self._client = client or AppwriteClient(config)

    def get_database(self, database_id: str) -> Optional[dict]:
        try:
            return self._client.get(f"/databases/{_segment(database_id)}")
        except RemoteOperationError as e:
            if _is_not_found(e):
                return None
            raise

    def create_database(self, database_id: str, name: str) -> dict:
        return self._client.post(
            "/databases", {"databaseId": database_id, "name": name}
        )

    def get_collection(
        self, database_id: str, collection_id: str
    ) -> Optional[RemoteCollection]:
        try:
            payload = self._client.get(_collection_path(database_id, collection_id))
        except RemoteOperationError as e:
            if _is_not_found(e):
                return None
            raise
        return parse_collection(payload)

    def create_collection(
        self,
        database_id: str,
        collection_id: str,
        name: str,
        permissions: List[str],
    ) -> RemoteCollection:
        payload = self._client.post(
            f"/databases/{_segment(database_id)}/collections",
            {
                "collectionId": collection_id,
                "name": name or collection_id,
                "permissions": list(permissions),
            },
        )
        return parse_collection(payload)

    def create_field(
        self,
        database_id: str,
        collection_id: str,
        key: str,
        definition: FieldDefinition,
    ) -> None:
        body: dict[str, Any] = {
            "key": key,
            "required": definition.required,
            "array": definition.array,
        }
        if definition.default is not None:
            body["default"] = definition.default
        if definition.store_type == StoreType.STRING:
            body["size"] = definition.size
        elif definition.store_type in (StoreType.INTEGER, StoreType.FLOAT):
            if definition.min is not None:
                body["min"] = definition.min
            if definition.max is not None:
                body["max"] = definition.max
        elif definition.store_type == StoreType.ENUM:
            body["elements"] = list(definition.enum_values or [])

        path = _collection_path(database_id, collection_id)
        self._client.post(f"{path}/attributes/{definition.store_type.value}", body)

    def update_field(
        self,
        database_id: str,
        collection_id: str,
        key: str,
        update: FieldUpdate,
    ) -> None:
        # default is always sent; null clears it (and is mandatory when required)
        body: dict[str, Any] = {"required": update.required, "default": update.default}
        if update.store_type in (StoreType.INTEGER, StoreType.FLOAT):
            if update.min is not None:
                body["min"] = update.min
            if update.max is not None:
                body["max"] = update.max
        elif update.store_type == StoreType.ENUM:
            body["elements"] = list(update.enum_values or [])

        path = _collection_path(database_id, collection_id)
        self._client.patch(
            f"{path}/attributes/{update.store_type.value}/{_segment(key)}", body
        )

    def create_index(
        self,
        database_id: str,
        collection_id: str,
        key: str,
        kind: str,
        attributes: List[str],
        orders: Optional[List[str]] = None,
    ) -> None:
        body: dict[str, Any] = {"key": key, "type": kind, "attributes": list(attributes)}
        if orders:
            body["orders"] = list(orders)
        self._client.post(f"{_collection_path(database_id, collection_id)}/indexes", body)

    def list_indexes(self, database_id: str, collection_id: str) -> List[RemoteIndex]:
        payload = self._client.get(f"{_collection_path(database_id, collection_id)}/indexes")
        return [parse_index(i) for i in (payload or {}).get("indexes") or []]

    def delete_index(self, database_id: str, collection_id: str, key: str) -> None:
        self._client.delete(
            f"{_collection_path(database_id, collection_id)}/indexes/{_segment(key)}"
        )


def _segment(value: str) -> str:
    return quote(value, safe="")


def _collection_path(database_id: str, collection_id: str) -> str:
    return f"/databases/{_segment(database_id)}/collections/{_segment(collection_id)}"


def _is_not_found(error: RemoteOperationError) -> bool:
    if error.code:
        return error.code in NOT_FOUND_CODES
    return error.status_code == 404


@register_store("appwrite")
def create_appwrite_store(config: StoreConfig) -> AppwriteSchemaStore:
    """Factory function for the Appwrite store."""
    logger.debug(f"Connecting to {config.endpoint} (project {config.project_id})")
    return AppwriteSchemaStore(config)
