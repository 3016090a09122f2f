"""Index reconciliation and maintenance."""

import logging
from typing import Iterable, List

from schemasync.core.exceptions import RemoteOperationError
from schemasync.models.remote import RemoteIndex
from schemasync.models.schema import IndexSpec
from schemasync.stores.base import SchemaStore

logger = logging.getLogger(__name__)


class IndexReconciler:
    """Creates declared indexes that are absent remotely.

    Existing indexes are never updated or deleted by reconciliation; the
    maintenance helpers ``list_indexes`` / ``drop_index`` exist for operators.
    """

    def __init__(self, store: SchemaStore, database_id: str) -> None:
        self.store = store
        self.database_id = database_id

    def missing(
        self, declared: Iterable[IndexSpec], existing_keys: set[str]
    ) -> List[IndexSpec]:
        return [index for index in declared if index.key not in existing_keys]

    def reconcile(
        self,
        collection_id: str,
        declared: Iterable[IndexSpec],
        existing_keys: set[str],
    ) -> List[str]:
        """Create missing indexes in declaration order.

        Returns:
            Keys of the indexes created by this call.
        """
        created = []
        for index in self.missing(declared, existing_keys):
            try:
                self.store.create_index(
                    self.database_id,
                    collection_id,
                    index.key,
                    index.kind.value,
                    list(index.attributes),
                    [order.value for order in index.orders] if index.orders else None,
                )
            except RemoteOperationError as e:
                if e.is_already_exists():
                    # created concurrently by another run
                    logger.warning(
                        f"Index {index.key} already exists, skipping",
                        extra={"table": collection_id},
                    )
                    continue
                raise e.add_context(index=index.key)
            logger.info(
                f"Created {index.kind.value} index {index.key} on "
                f"{', '.join(index.attributes)}",
                extra={"table": collection_id},
            )
            created.append(index.key)
        return created

    def list_indexes(self, collection_id: str) -> List[RemoteIndex]:
        return self.store.list_indexes(self.database_id, collection_id)

    def drop_index(self, collection_id: str, key: str) -> None:
        self.store.delete_index(self.database_id, collection_id, key)
        logger.info(f"Deleted index {key}", extra={"table": collection_id})
