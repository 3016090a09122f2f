"""Pytest configuration and shared fixtures."""

import tempfile
from pathlib import Path

import pytest

from schemasync.core.deadline import Deadline
from schemasync.core.provisioning import ProvisioningWaiter
from schemasync.models.config import MigrationSettings
from schemasync.models.remote import RemoteCollection, RemoteField, StoreType
from schemasync.models.schema import SchemaDescriptor, TableSpec
from schemasync.stores.memory.store import InMemorySchemaStore

DATABASE_ID = "main"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def project_dir(temp_dir):
    """Create a projects subdirectory in temp_dir."""
    projects_dir = temp_dir / "projects"
    projects_dir.mkdir()
    return projects_dir


@pytest.fixture
def env_vars(monkeypatch):
    """Fixture to set environment variables for testing."""
    test_vars = {
        "TEST_ENDPOINT": "https://appwrite.example.com/v1",
        "TEST_PROJECT": "test-project",
        "TEST_API_KEY": "secret-key",
    }
    for key, value in test_vars.items():
        monkeypatch.setenv(key, value)
    return test_vars


@pytest.fixture
def store():
    """In-memory store whose fields become available on the first poll."""
    return InMemorySchemaStore()


@pytest.fixture
def seeded_store(store):
    """In-memory store holding a ``users`` collection with an ``email`` field."""
    store.add_collection(
        DATABASE_ID,
        RemoteCollection(
            id="users",
            name="users",
            fields=[
                RemoteField(key="email", store_type=StoreType.STRING, size=100),
            ],
        ),
    )
    store.calls.clear()
    return store


@pytest.fixture
def fast_settings():
    """Migration settings that never sleep."""
    return MigrationSettings(provisioning_max_attempts=5, provisioning_delay=0)


@pytest.fixture
def waiter_factory():
    """Build a ProvisioningWaiter with no delay between polls."""

    def _build(store, max_attempts=5, deadline=None):
        return ProvisioningWaiter(
            store,
            DATABASE_ID,
            max_attempts=max_attempts,
            delay=0,
            deadline=deadline or Deadline(),
        )

    return _build


@pytest.fixture
def make_table():
    """Build a TableSpec from plain dictionaries."""

    def _build(name="users", fields=None, indexes=None, **kwargs) -> TableSpec:
        return TableSpec(
            name=name,
            fields=fields or {"email": {"type": "string", "size": 100}},
            indexes=indexes or [],
            **kwargs,
        )

    return _build


@pytest.fixture
def make_descriptor():
    def _build(*tables: TableSpec) -> SchemaDescriptor:
        return SchemaDescriptor(tables=list(tables))

    return _build
