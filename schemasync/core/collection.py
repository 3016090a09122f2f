"""Per-table reconciliation.

For one declared table the reconciler:

1. fetches the remote collection, creating it when absent;
2. classifies every declared field against the fetched state, in
   declaration order, and refuses the whole table if any field has an
   immutable difference (nothing is written in that case);
3. creates missing fields and updates fields with mutable differences;
4. when the table declares indexes, waits until the fields created in this
   run are provisioned, then creates the missing indexes.

Fields are never deleted and recreated to force a match.
"""

import logging
import time
from typing import Optional

from schemasync.core.classifier import Classification, FieldDiff, classify_field
from schemasync.core.exceptions import ImmutableDiffError, RemoteOperationError
from schemasync.core.fields import build_field_definition, build_field_update
from schemasync.core.indexes import IndexReconciler
from schemasync.core.permissions import role_to_permissions
from schemasync.core.provisioning import ProvisioningWaiter
from schemasync.core.report import TableResult
from schemasync.models.remote import FieldStatus, RemoteCollection
from schemasync.models.schema import FieldSpec, TableSpec
from schemasync.stores.base import SchemaStore

logger = logging.getLogger(__name__)


class CollectionReconciler:
    def __init__(
        self,
        store: SchemaStore,
        database_id: str,
        waiter: ProvisioningWaiter,
        index_reconciler: Optional[IndexReconciler] = None,
    ) -> None:
        self.store = store
        self.database_id = database_id
        self.waiter = waiter
        self.index_reconciler = index_reconciler or IndexReconciler(store, database_id)

    def reconcile(self, table: TableSpec) -> TableResult:
        """Bring one remote collection in line with ``table``.

        Raises:
            ImmutableDiffError: A field differs in an immutable property.
            ProvisioningTimeoutError: New fields did not become available.
            RemoteOperationError: Any other store failure.
        """
        started = time.time()
        collection_id = table.collection_id
        result = TableResult(collection_id=collection_id)

        collection = self._ensure_collection(table, result)

        diffs = self.classify(table, collection)
        for diff in diffs:
            if diff.classification == Classification.IMMUTABLE_DIFF:
                raise ImmutableDiffError(
                    f"Immutable properties ({', '.join(diff.changes)}) of field "
                    f"{diff.key} differ from the existing attribute; changing them "
                    "would destroy existing data",
                    table=collection_id,
                    field=diff.key,
                    changes=diff.changes,
                )

        for diff in diffs:
            self._apply(table, table.fields[diff.key], diff, result)

        if table.indexes:
            # fields left pending by an earlier run are waited on as well
            unsettled = [
                diff.key
                for diff in diffs
                if diff.remote is not None and diff.remote.status != FieldStatus.AVAILABLE
            ]
            wait_keys = list(
                dict.fromkeys(result.created_fields + result.converged_fields + unsettled)
            )
            settled = self.waiter.wait(collection_id, wait_keys)
            result.provisioned_fields = list(wait_keys)
            existing = (settled or collection).index_keys()
            result.created_indexes = self.index_reconciler.reconcile(
                collection_id, table.indexes, existing
            )

        result.duration = time.time() - started
        return result

    def classify(self, table: TableSpec, collection: RemoteCollection) -> list[FieldDiff]:
        return [
            classify_field(key, declared, collection.get_field(key))
            for key, declared in table.fields.items()
        ]

    def _ensure_collection(self, table: TableSpec, result: TableResult) -> RemoteCollection:
        collection_id = table.collection_id
        collection = self.store.get_collection(self.database_id, collection_id)
        if collection is not None:
            return collection

        permissions = role_to_permissions(table.permissions)
        try:
            collection = self.store.create_collection(
                self.database_id, collection_id, table.name, permissions
            )
        except RemoteOperationError as e:
            if not e.is_already_exists():
                raise
            existing = self.store.get_collection(self.database_id, collection_id)
            if existing is None:
                raise
            logger.info(
                "Collection was created concurrently", extra={"table": collection_id}
            )
            return existing

        logger.info(
            f"Created collection with permissions {permissions}",
            extra={"table": collection_id},
        )
        result.created_collection = True
        return collection

    def _apply(
        self,
        table: TableSpec,
        declared: FieldSpec,
        diff: FieldDiff,
        result: TableResult,
    ) -> None:
        collection_id = table.collection_id
        if diff.classification == Classification.MISSING:
            if self._create_field(collection_id, diff.key, declared):
                result.created_fields.append(diff.key)
            else:
                result.converged_fields.append(diff.key)
        elif diff.classification == Classification.MUTABLE_DIFF:
            try:
                self.store.update_field(
                    self.database_id,
                    collection_id,
                    diff.key,
                    build_field_update(declared),
                )
            except RemoteOperationError as e:
                raise e.add_context(table=collection_id, field=diff.key)
            logger.info(
                f"Updated field ({', '.join(diff.changes)})",
                extra={"table": collection_id, "field": diff.key},
            )
            result.updated_fields.append(diff.key)
        else:
            logger.debug("Field matches", extra={"table": collection_id, "field": diff.key})

    def _create_field(self, collection_id: str, key: str, declared: FieldSpec) -> bool:
        """Create a field; return False when a concurrent run already created it."""
        try:
            self.store.create_field(
                self.database_id, collection_id, key, build_field_definition(declared)
            )
        except RemoteOperationError as e:
            if e.is_already_exists() and self._converged(collection_id, key, declared):
                logger.info(
                    "Field was created concurrently with a matching definition",
                    extra={"table": collection_id, "field": key},
                )
                return False
            raise e.add_context(table=collection_id, field=key)

        logger.info(
            f"Created {declared.type.value} field",
            extra={"table": collection_id, "field": key},
        )
        return True

    def _converged(self, collection_id: str, key: str, declared: FieldSpec) -> bool:
        try:
            collection = self.store.get_collection(self.database_id, collection_id)
        except RemoteOperationError:
            return False
        remote = collection.get_field(key) if collection else None
        diff = classify_field(key, declared, remote)
        return diff.classification == Classification.MATCHING
