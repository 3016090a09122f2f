"""Tests for per-table reconciliation."""

import pytest

from schemasync.core.collection import CollectionReconciler
from schemasync.core.exceptions import ImmutableDiffError, RemoteOperationError
from schemasync.models.remote import FieldStatus, RemoteCollection, RemoteField, StoreType


@pytest.fixture
def reconciler(store, waiter_factory):
    store.create_database("main", "Main")
    store.calls.clear()
    return CollectionReconciler(store, "main", waiter_factory(store))


def write_calls(store, operation):
    return [call for call in store.writes() if call[0] == operation]


class TestCollectionReconciler:
    def test_creates_collection_and_fields(self, reconciler, store, make_table):
        table = make_table(
            fields={
                "email": {"type": "string", "size": 100, "required": True},
                "age": {"type": "integer", "min": 0},
            }
        )

        result = reconciler.reconcile(table)

        assert result.created_collection is True
        assert result.created_fields == ["email", "age"]
        assert [c[0] for c in store.writes()] == [
            "create_collection",
            "create_field",
            "create_field",
        ]
        remote = store.get_collection("main", "users")
        email = remote.get_field("email")
        assert (email.size, email.required, email.default) == (100, True, None)
        assert remote.get_field("age").min == 0

    def test_second_run_issues_no_writes(self, reconciler, store, make_table):
        table = make_table(
            fields={"email": {"type": "string", "required": True}},
            indexes=[{"key": "idx_email", "type": "unique", "attributes": ["email"]}],
        )
        reconciler.reconcile(table)
        store.calls.clear()

        result = reconciler.reconcile(table)

        assert store.writes() == []
        assert result.write_count == 0

    def test_collection_uses_declared_permissions(self, reconciler, store, make_table):
        created = []
        original = store.create_collection

        def capture(database_id, collection_id, name, permissions):
            created.append(permissions)
            return original(database_id, collection_id, name, permissions)

        store.create_collection = capture
        reconciler.reconcile(make_table(permissions={"read": "any", "write": ["admins"]}))
        assert created == [['read("any")', 'write("admins")']]

    def test_collection_create_race(self, reconciler, store, make_table):
        def concurrent(operation, collection_id, key):
            if operation == "create_collection":
                store.add_collection("main", RemoteCollection(id="users", name="users"))

        store.on_write = concurrent
        result = reconciler.reconcile(make_table())

        assert result.created_collection is False
        assert result.created_fields == ["email"]

    def test_mutable_diff_updates_in_place(self, seeded_store, store, waiter_factory, make_table):
        reconciler = CollectionReconciler(store, "main", waiter_factory(store))
        table = make_table(fields={"email": {"type": "string", "size": 100, "required": True}})

        result = reconciler.reconcile(table)

        assert result.updated_fields == ["email"]
        assert [c[0] for c in store.writes()] == ["update_field"]
        assert store.get_collection("main", "users").get_field("email").required is True

    def test_immutable_diff_writes_nothing(self, seeded_store, store, waiter_factory, make_table):
        reconciler = CollectionReconciler(store, "main", waiter_factory(store))
        table = make_table(
            fields={
                "name": {"type": "string"},
                "email": {"type": "string", "size": 200},
            }
        )

        with pytest.raises(ImmutableDiffError) as exc_info:
            reconciler.reconcile(table)

        assert exc_info.value.field == "email"
        assert exc_info.value.table == "users"
        assert exc_info.value.changes == ["size"]
        assert store.writes() == []

    def test_field_create_race_converges(self, reconciler, store, make_table):
        table = make_table(fields={"email": {"type": "string", "size": 100}})

        def concurrent(operation, collection_id, key):
            if operation == "create_field":
                store.add_field(
                    "main",
                    "users",
                    RemoteField(key="email", store_type=StoreType.STRING, size=100),
                )

        store.on_write = concurrent
        result = reconciler.reconcile(table)

        assert result.created_fields == []
        assert result.converged_fields == ["email"]

    def test_field_create_race_with_conflict_propagates(self, reconciler, store, make_table):
        table = make_table(fields={"email": {"type": "string", "size": 100}})

        def concurrent(operation, collection_id, key):
            if operation == "create_field":
                store.add_field(
                    "main",
                    "users",
                    RemoteField(key="email", store_type=StoreType.STRING, size=40),
                )

        store.on_write = concurrent
        with pytest.raises(RemoteOperationError) as exc_info:
            reconciler.reconcile(table)

        assert exc_info.value.is_already_exists()
        assert exc_info.value.context["table"] == "users"
        assert exc_info.value.context["field"] == "email"

    def test_other_create_errors_propagate(self, reconciler, store, make_table):
        store.fail_next(
            "create_field",
            RemoteOperationError("Rate limit exceeded", code="general_rate_limit_exceeded"),
        )
        with pytest.raises(RemoteOperationError) as exc_info:
            reconciler.reconcile(make_table())
        assert exc_info.value.code == "general_rate_limit_exceeded"
        assert exc_info.value.context["field"] == "email"

    def test_indexes_wait_for_new_fields(self, store, waiter_factory, make_table):
        store.provisioning_polls = 2
        store.create_database("main", "Main")
        reconciler = CollectionReconciler(store, "main", waiter_factory(store))
        table = make_table(
            indexes=[{"key": "idx_email", "type": "unique", "attributes": ["email"]}]
        )

        result = reconciler.reconcile(table)

        assert result.provisioned_fields == ["email"]
        assert result.created_indexes == ["idx_email"]
        operations = [c[0] for c in store.calls]
        assert operations.index("create_index") > operations.index("create_field")
        assert operations[-2] == "get_collection"

    def test_no_wait_without_indexes(self, reconciler, store, make_table):
        store.never_available.add("email")
        result = reconciler.reconcile(make_table())
        assert result.provisioned_fields == []

    def test_existing_index_is_left_alone(self, reconciler, store, make_table):
        table = make_table(
            indexes=[{"key": "idx_email", "type": "key", "attributes": ["email"]}]
        )
        reconciler.reconcile(table)
        changed = make_table(
            indexes=[{"key": "idx_email", "type": "unique", "attributes": ["email"]}]
        )
        store.calls.clear()

        result = reconciler.reconcile(changed)

        assert result.created_indexes == []
        assert write_calls(store, "create_index") == []
        assert store.list_indexes("main", "users")[0].kind == "key"

    def test_field_statuses_are_tracked(self, reconciler, store, make_table):
        reconciler.reconcile(make_table())
        remote = store.get_collection("main", "users").get_field("email")
        assert remote.status == FieldStatus.AVAILABLE
