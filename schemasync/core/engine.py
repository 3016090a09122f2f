"""Migration engine.

Reconciles a schema descriptor against the remote store:

1. Validate the descriptor (no I/O on failure)
2. Resolve the database, creating it when absent
3. Reconcile each table strictly in order; the first failing table aborts
   the run and later tables are not attempted

Migrations are forward-only: nothing already applied is rolled back.
"""

import logging
from typing import List, Optional

from schemasync.core.classifier import Classification, FieldDiff
from schemasync.core.collection import CollectionReconciler
from schemasync.core.deadline import Deadline
from schemasync.core.exceptions import RemoteOperationError, SchemaSyncError
from schemasync.core.indexes import IndexReconciler
from schemasync.core.plan import MigrationPlan, TablePlan
from schemasync.core.provisioning import ProvisioningWaiter
from schemasync.core.report import MigrationReport
from schemasync.core.validation import validate_descriptor
from schemasync.models.config import MigrationSettings
from schemasync.models.remote import RemoteIndex
from schemasync.models.schema import SchemaDescriptor, TableSpec
from schemasync.stores.base import SchemaStore

logger = logging.getLogger(__name__)


class MigrationEngine:
    """Runs migrations and plans against one database of a schema store."""

    def __init__(
        self,
        store: SchemaStore,
        database_id: str,
        database_name: str = "Schema Database",
        settings: Optional[MigrationSettings] = None,
    ) -> None:
        self.store = store
        self.database_id = database_id
        self.database_name = database_name
        self.settings = settings or MigrationSettings()
        self._deadline: Optional[Deadline] = None

    def cancel(self) -> None:
        """Interrupt a running migration at its next wait or table boundary."""
        if self._deadline is not None:
            self._deadline.cancel()

    def migrate(self, descriptor: SchemaDescriptor) -> MigrationReport:
        """Reconcile every table of ``descriptor``.

        Returns:
            Report of the changes applied.

        Raises:
            ValidationError: The descriptor is malformed (nothing was called).
            ImmutableDiffError: A declared field conflicts with a remote one.
            ProvisioningTimeoutError: New fields were not provisioned in time.
            RunTimeoutError: The run deadline expired.
            RemoteOperationError: Any other store failure.
        """
        validate_descriptor(descriptor)

        self._deadline = Deadline(self.settings.run_timeout)
        report = MigrationReport(database_id=self.database_id)
        reconciler = self._build_reconciler(self._deadline)

        logger.info(
            f"Starting migration of {len(descriptor.tables)} table(s) "
            f"into database {self.database_id}"
        )

        current: Optional[str] = None
        try:
            report.created_database = self._ensure_database()

            for table in descriptor.tables:
                current = table.collection_id
                self._deadline.check(f"table {table.collection_id}")
                result = reconciler.reconcile(table)
                report.record_table(result)
                logger.info(
                    f"Reconciled with {result.write_count} change(s)",
                    extra={"table": result.collection_id},
                )
        except SchemaSyncError as e:
            e.add_context(table=current, completed_tables=report.completed_tables)
            report.record_error(e, {"table": current} if current else None)
            report.finish()
            logger.error(f"Migration failed: {e}", extra={"table": current})
            raise
        finally:
            self._deadline = None

        report.finish()
        logger.info(f"Completed migration: {report.get_summary()}")
        return report

    def plan(self, descriptor: SchemaDescriptor) -> MigrationPlan:
        """Classify every declared field and index without writing anything."""
        validate_descriptor(descriptor)

        database_missing = not self.store.get_database(self.database_id)
        plan = MigrationPlan(database_id=self.database_id, database_missing=database_missing)
        index_reconciler = IndexReconciler(self.store, self.database_id)
        reconciler = self._build_reconciler(Deadline(self.settings.run_timeout))

        for table in descriptor.tables:
            collection = (
                None
                if database_missing
                else self.store.get_collection(self.database_id, table.collection_id)
            )
            if collection is None:
                plan.tables.append(
                    TablePlan(
                        collection_id=table.collection_id,
                        collection_missing=True,
                        fields=[
                            FieldDiff(key=key, classification=Classification.MISSING)
                            for key in table.fields
                        ],
                        missing_indexes=[index.key for index in table.indexes],
                    )
                )
                continue

            plan.tables.append(
                TablePlan(
                    collection_id=table.collection_id,
                    fields=reconciler.classify(table, collection),
                    missing_indexes=[
                        index.key
                        for index in index_reconciler.missing(
                            table.indexes, collection.index_keys()
                        )
                    ],
                )
            )

        return plan

    def list_indexes(self, table: TableSpec) -> List[RemoteIndex]:
        return IndexReconciler(self.store, self.database_id).list_indexes(
            table.collection_id
        )

    def drop_index(self, table: TableSpec, key: str) -> None:
        IndexReconciler(self.store, self.database_id).drop_index(table.collection_id, key)

    def _build_reconciler(self, deadline: Deadline) -> CollectionReconciler:
        waiter = ProvisioningWaiter(
            self.store,
            self.database_id,
            max_attempts=self.settings.provisioning_max_attempts,
            delay=self.settings.provisioning_delay,
            deadline=deadline,
        )
        return CollectionReconciler(self.store, self.database_id, waiter)

    def _ensure_database(self) -> bool:
        """Create the database if it does not exist; return True if created."""
        if self.store.get_database(self.database_id):
            return False
        try:
            self.store.create_database(self.database_id, self.database_name)
        except RemoteOperationError as e:
            if e.is_already_exists():
                return False
            raise
        logger.info(f"Created database {self.database_id}")
        return True


def migrate(
    descriptor: SchemaDescriptor,
    store: SchemaStore,
    database_id: str,
    settings: Optional[MigrationSettings] = None,
) -> MigrationReport:
    """Reconcile ``descriptor`` against ``store`` (see MigrationEngine.migrate)."""
    return MigrationEngine(store, database_id, settings=settings).migrate(descriptor)
