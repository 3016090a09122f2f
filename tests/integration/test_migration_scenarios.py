"""End-to-end migrations against the in-memory store."""

import pytest

from schemasync import (
    ImmutableDiffError,
    MigrationEngine,
    ProvisioningTimeoutError,
    export_text,
)
from schemasync.models.config import MigrationSettings
from schemasync.models.remote import FieldStatus, RemoteField, StoreType
from schemasync.stores.memory.store import InMemorySchemaStore

DATABASE_ID = "main"


@pytest.fixture
def engine_factory(fast_settings):
    def _build(store):
        return MigrationEngine(store, DATABASE_ID, settings=fast_settings)

    return _build


def test_empty_descriptor(store, engine_factory, make_descriptor):
    descriptor = make_descriptor()

    assert export_text(descriptor) == "Database Schema\n===============\n\nNo tables defined.\n"

    report = engine_factory(store).migrate(descriptor)

    assert report.created_database
    assert report.tables == []
    assert [call[0] for call in store.calls] == ["get_database", "create_database"]


def test_new_table_with_required_string(store, engine_factory, make_descriptor, make_table):
    table = make_table(fields={"email": {"type": "string", "size": 100, "required": True}})

    engine_factory(store).migrate(make_descriptor(table))

    assert store.writes() == [
        ("create_database", None, None),
        ("create_collection", "users", None),
        ("create_field", "users", "email"),
    ]
    remote = store.get_collection(DATABASE_ID, "users").get_field("email")
    assert remote.store_type == StoreType.STRING
    assert remote.size == 100
    assert remote.required is True
    assert remote.default is None


def test_required_flag_only_change(seeded_store, engine_factory, make_descriptor, make_table):
    table = make_table(fields={"email": {"type": "string", "size": 100, "required": True}})

    report = engine_factory(seeded_store).migrate(make_descriptor(table))

    assert seeded_store.writes() == [("update_field", "users", "email")]
    assert report.get_table("users").updated_fields == ["email"]
    assert seeded_store.get_collection(DATABASE_ID, "users").get_field("email").required


def test_size_change_is_refused(seeded_store, engine_factory, make_descriptor, make_table):
    table = make_table(fields={"email": {"type": "string", "size": 200}})

    with pytest.raises(ImmutableDiffError) as exc_info:
        engine_factory(seeded_store).migrate(make_descriptor(table))

    assert exc_info.value.field == "email"
    assert exc_info.value.changes == ["size"]
    assert seeded_store.writes() == []


def test_index_waits_for_new_field(engine_factory, make_descriptor, make_table):
    store = InMemorySchemaStore(provisioning_polls=2)
    table = make_table(
        fields={"email": {"type": "string", "size": 100}},
        indexes=[{"key": "idx_email", "type": "unique", "attributes": ["email"]}],
    )

    report = engine_factory(store).migrate(make_descriptor(table))

    operations = [call[0] for call in store.calls]
    field_at = operations.index("create_field")
    index_at = operations.index("create_index")
    assert operations[field_at + 1 : index_at].count("get_collection") == 3
    assert report.get_table("users").created_indexes == ["idx_email"]


def test_index_skipped_when_field_never_available(
    engine_factory, make_descriptor, make_table
):
    store = InMemorySchemaStore()
    store.never_available.add("email")
    table = make_table(
        indexes=[{"key": "idx_email", "type": "key", "attributes": ["email"]}],
    )

    with pytest.raises(ProvisioningTimeoutError) as exc_info:
        engine_factory(store).migrate(make_descriptor(table))

    assert exc_info.value.pending == ["email"]
    assert [call for call in store.calls if call[0] == "create_index"] == []


def test_second_run_issues_no_writes(store, engine_factory, make_descriptor, make_table):
    descriptor = make_descriptor(
        make_table(
            fields={
                "email": {"type": "string", "size": 100, "required": True},
                "age": {"type": "integer", "min": 0, "max": 150},
                "role": {"type": ["admin", "user"], "default": "user"},
            },
            indexes=[{"key": "idx_email", "type": "unique", "attributes": ["email"]}],
        ),
        make_table(name="posts", fields={"title": {"type": "string", "size": 200}}),
    )
    engine = engine_factory(store)
    engine.migrate(descriptor)
    store.calls.clear()

    report = engine.migrate(descriptor)

    assert store.writes() == []
    assert report.write_count == 0
    assert engine.plan(descriptor).is_converged


def test_concurrent_field_creation_converges(
    store, engine_factory, make_descriptor, make_table
):
    def race(operation, collection_id, key):
        if operation == "create_field" and key == "email":
            store.on_write = None
            store.add_field(
                DATABASE_ID,
                collection_id,
                RemoteField(
                    key="email",
                    store_type=StoreType.STRING,
                    size=100,
                    status=FieldStatus.AVAILABLE,
                ),
            )

    store.on_write = race
    table = make_table(
        indexes=[{"key": "idx_email", "type": "key", "attributes": ["email"]}],
    )

    report = engine_factory(store).migrate(make_descriptor(table))

    result = report.get_table("users")
    assert result.created_fields == []
    assert result.converged_fields == ["email"]
    assert result.created_indexes == ["idx_email"]


def test_failure_stops_later_tables(seeded_store, engine_factory, make_descriptor, make_table):
    descriptor = make_descriptor(
        make_table(name="posts", fields={"title": {"type": "string", "size": 200}}),
        make_table(fields={"email": {"type": "integer"}}),
        make_table(name="comments", fields={"body": {"type": "string", "size": 500}}),
    )

    with pytest.raises(ImmutableDiffError) as exc_info:
        engine_factory(seeded_store).migrate(descriptor)

    assert exc_info.value.context["completed_tables"] == ["posts"]
    assert ("get_collection", "comments", None) not in seeded_store.calls


def test_retry_after_provisioning_timeout_creates_index(make_descriptor, make_table):
    store = InMemorySchemaStore(provisioning_polls=4)
    descriptor = make_descriptor(
        make_table(
            indexes=[{"key": "idx_email", "type": "unique", "attributes": ["email"]}],
        )
    )
    impatient = MigrationSettings(provisioning_max_attempts=2, provisioning_delay=0)
    with pytest.raises(ProvisioningTimeoutError):
        MigrationEngine(store, DATABASE_ID, settings=impatient).migrate(descriptor)
    store.calls.clear()

    patient = MigrationSettings(provisioning_max_attempts=10, provisioning_delay=0)
    report = MigrationEngine(store, DATABASE_ID, settings=patient).migrate(descriptor)

    result = report.get_table("users")
    assert result.created_fields == []
    assert result.provisioned_fields == ["email"]
    assert result.created_indexes == ["idx_email"]
    assert store.writes() == [("create_index", "users", "idx_email")]
