"""Provisioning waiter.

The store provisions field storage asynchronously: a field created a moment
ago may still be ``pending``, and an index referencing it would fail
non-deterministically. The waiter polls the collection until every named
field reports ``available``.
"""

import logging
from typing import Iterable, Optional

from schemasync.core.deadline import Deadline
from schemasync.core.exceptions import ProvisioningTimeoutError, RemoteOperationError
from schemasync.models.remote import FieldStatus, RemoteCollection
from schemasync.stores.base import SchemaStore

logger = logging.getLogger(__name__)


class ProvisioningWaiter:
    def __init__(
        self,
        store: SchemaStore,
        database_id: str,
        max_attempts: int = 30,
        delay: float = 1.0,
        deadline: Optional[Deadline] = None,
    ) -> None:
        """Initialize the waiter.

        Args:
            store: Store to poll.
            database_id: Database holding the collections.
            max_attempts: Number of polls before giving up.
            delay: Seconds to sleep between polls.
            deadline: Overall run deadline; interrupts sleeps when it expires.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.store = store
        self.database_id = database_id
        self.max_attempts = max_attempts
        self.delay = delay
        self.deadline = deadline or Deadline()

    def wait(
        self, collection_id: str, keys: Iterable[str]
    ) -> Optional[RemoteCollection]:
        """Poll until every key in ``keys`` is available.

        Returns:
            The last fetched collection, or None when ``keys`` is empty.

        Raises:
            ProvisioningTimeoutError: If keys are still pending after
                ``max_attempts`` polls.
            RunTimeoutError: If the run deadline expires while waiting.
            RemoteOperationError: If the store reports a key as failed.
        """
        wanted = list(dict.fromkeys(keys))
        if not wanted:
            return None

        pending = wanted
        for attempt in range(1, self.max_attempts + 1):
            self.deadline.check("field provisioning")

            collection = self._poll(collection_id, attempt)
            if collection is not None:
                pending = self._pending_keys(collection, wanted)
                if not pending:
                    logger.info(
                        f"Fields available after {attempt} poll(s): {', '.join(wanted)}",
                        extra={"table": collection_id},
                    )
                    return collection

            logger.debug(
                f"Waiting for fields ({attempt}/{self.max_attempts}): {', '.join(pending)}",
                extra={"table": collection_id},
            )
            if attempt < self.max_attempts:
                self.deadline.sleep(self.delay, "field provisioning")

        raise ProvisioningTimeoutError(
            f"Timeout waiting for attributes to become available in collection {collection_id}",
            collection=collection_id,
            pending=pending,
        )

    def _poll(self, collection_id: str, attempt: int) -> Optional[RemoteCollection]:
        try:
            return self.store.get_collection(self.database_id, collection_id)
        except RemoteOperationError as e:
            # the collection may not be readable yet; keep polling
            logger.debug(
                f"Poll {attempt} failed: {e}", extra={"table": collection_id}
            )
            return None

    def _pending_keys(self, collection: RemoteCollection, wanted: list[str]) -> list[str]:
        pending = []
        failed = []
        for key in wanted:
            remote = collection.get_field(key)
            if remote is None or remote.status == FieldStatus.PENDING:
                pending.append(key)
            elif remote.status == FieldStatus.FAILED:
                failed.append(key)
        if failed:
            raise RemoteOperationError(
                f"Store failed to provision fields: {', '.join(failed)}",
                code="field_provisioning_failed",
                context={"collection": collection.id, "failed": failed},
            )
        return pending
