"""Appwrite store module."""

from schemasync.stores.appwrite.client import AppwriteClient
from schemasync.stores.appwrite.store import AppwriteSchemaStore, create_appwrite_store

__all__ = ["AppwriteClient", "AppwriteSchemaStore", "create_appwrite_store"]
