"""Store registry for managing schema store factories.

Store implementations register a factory under a type name; the engine
resolves the configured ``store.type`` through this registry.
"""

from __future__ import annotations

from typing import Callable, overload

from schemasync.core.exceptions import StoreError
from schemasync.models.config import StoreConfig
from schemasync.stores.base import SchemaStore

StoreFactory = Callable[[StoreConfig], SchemaStore]

# Global registry
_store_registry: dict[str, StoreFactory] = {}


@overload
def register_store(store_type: str) -> Callable[[StoreFactory], StoreFactory]: ...


@overload
def register_store(store_type: str, factory: StoreFactory) -> None: ...


def register_store(
    store_type: str,
    factory: StoreFactory | None = None,
) -> Callable[[StoreFactory], StoreFactory] | None:
    """Register a store factory.

    Can be used as a decorator or called directly:

        @register_store("appwrite")
        def create_appwrite_store(config):
            return AppwriteSchemaStore(config)

        register_store("appwrite", create_appwrite_store)

    Raises:
        StoreError: If a store with the same type is already registered.
    """

    def _register(f: StoreFactory) -> StoreFactory:
        if store_type in _store_registry:
            raise StoreError(
                f"Store '{store_type}' is already registered",
                context={"store_type": store_type},
            )
        _store_registry[store_type] = f
        return f

    if factory is not None:
        _register(factory)
        return None

    return _register


def get_store(config: StoreConfig) -> SchemaStore:
    """Create a store instance for ``config.type``.

    Raises:
        StoreError: If the store type is not registered.
    """
    factory = _store_registry.get(config.type)
    if factory is None:
        available = ", ".join(sorted(_store_registry.keys())) or "(none)"
        raise StoreError(
            f"Unknown store type: '{config.type}'",
            context={"store_type": config.type, "available_types": available},
        )
    return factory(config)


def list_store_types() -> list[str]:
    """Return a list of all registered store types."""
    return sorted(_store_registry.keys())


def clear_registries() -> None:
    """Clear all registered stores. Intended for testing only."""
    _store_registry.clear()
