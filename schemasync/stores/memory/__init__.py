"""In-memory store module."""

from schemasync.stores.memory.store import InMemorySchemaStore, create_memory_store

__all__ = ["InMemorySchemaStore", "create_memory_store"]
