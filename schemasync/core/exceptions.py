"""Exception hierarchy for the schemasync package."""

from typing import Any, Optional


class SchemaSyncError(Exception):
    """Base exception for all schemasync errors."""

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    def add_context(self, **values: Any) -> "SchemaSyncError":
        """Attach identity (table, field, ...) without overwriting existing keys."""
        for key, value in values.items():
            if value is not None:
                self.context.setdefault(key, value)
        return self


class ConfigError(SchemaSyncError):
    """Raised when a project file or configuration cannot be loaded."""

    pass


class ValidationError(SchemaSyncError):
    """Raised when a schema descriptor is malformed.

    Always raised before any remote I/O and never retried.
    """

    pass


class ImmutableDiffError(SchemaSyncError):
    """Raised when a declared field conflicts with an existing remote field
    in a property the store cannot alter in place (type, size, array flag,
    enum values)."""

    def __init__(
        self,
        message: str,
        table: str,
        field: str,
        changes: list[str],
    ):
        super().__init__(
            message, context={"table": table, "field": field, "changes": changes}
        )
        self.table = table
        self.field = field
        self.changes = changes


class ProvisioningTimeoutError(SchemaSyncError):
    """Raised when fields did not become available within the attempt budget."""

    def __init__(self, message: str, collection: str, pending: list[str]):
        super().__init__(
            message, context={"collection": collection, "pending": pending}
        )
        self.collection = collection
        self.pending = pending


class RunTimeoutError(SchemaSyncError):
    """Raised when the overall migration run deadline expires."""

    pass


class StoreError(SchemaSyncError):
    """Raised when a schema store cannot be resolved or constructed."""

    pass


# Error codes reported by the store when a create collides with an existing
# resource. Used before falling back to message matching.
ALREADY_EXISTS_CODES = frozenset(
    {
        "attribute_already_exists",
        "collection_already_exists",
        "database_already_exists",
        "index_already_exists",
    }
)


class RemoteOperationError(SchemaSyncError):
    """Wraps a remote store failure not otherwise classified."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        context: dict | None = None,
    ):
        super().__init__(message, context=context)
        self.code = code
        self.status_code = status_code

    def is_already_exists(self) -> bool:
        if self.code:
            return self.code in ALREADY_EXISTS_CODES
        return "already exists" in self.message.lower()
