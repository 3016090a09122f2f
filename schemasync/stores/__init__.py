"""Schema store protocol and registry.

This module exposes:
- SchemaStore: protocol the migration engine drives
- Registry functions: register_store, get_store, list_store_types
- Built-in stores: InMemorySchemaStore ("memory"), AppwriteSchemaStore ("appwrite")
"""

from schemasync.stores.base import FieldDefinition, FieldUpdate, SchemaStore

# Registry must be imported first (store modules use decorators on import)
from schemasync.stores.registry import (
    StoreFactory,
    clear_registries,
    get_store,
    list_store_types,
    register_store,
)

from schemasync.stores.appwrite.store import AppwriteSchemaStore, create_appwrite_store
from schemasync.stores.memory.store import InMemorySchemaStore, create_memory_store


def reregister_builtins() -> None:
    """Re-register built-in stores after the registry is cleared.

    Intended for tests that call clear_registries() but need the built-in
    stores available afterwards.
    """
    current = list_store_types()
    if "appwrite" not in current:
        register_store("appwrite", create_appwrite_store)
    if "memory" not in current:
        register_store("memory", create_memory_store)


__all__ = [
    "SchemaStore",
    "FieldDefinition",
    "FieldUpdate",
    "StoreFactory",
    "register_store",
    "get_store",
    "list_store_types",
    "clear_registries",
    "reregister_builtins",
    "AppwriteSchemaStore",
    "InMemorySchemaStore",
    "create_appwrite_store",
    "create_memory_store",
]
