"""Migration report collected during a run."""

import time
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class TableResult:
    """Changes applied to a single collection."""

    collection_id: str
    created_collection: bool = False
    created_fields: list[str] = field(default_factory=list)
    updated_fields: list[str] = field(default_factory=list)
    converged_fields: list[str] = field(default_factory=list)
    provisioned_fields: list[str] = field(default_factory=list)
    created_indexes: list[str] = field(default_factory=list)
    duration: float = 0.0

    @property
    def write_count(self) -> int:
        return (
            int(self.created_collection)
            + len(self.created_fields)
            + len(self.updated_fields)
            + len(self.created_indexes)
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "collection_id": self.collection_id,
            "created_collection": self.created_collection,
            "created_fields": list(self.created_fields),
            "updated_fields": list(self.updated_fields),
            "converged_fields": list(self.converged_fields),
            "provisioned_fields": list(self.provisioned_fields),
            "created_indexes": list(self.created_indexes),
            "duration": self.duration,
        }


@dataclass
class MigrationReport:
    """Collects per-table results and errors for one migration run."""

    database_id: str
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None
    execution_time: float = 0.0
    created_database: bool = False

    tables: list[TableResult] = field(default_factory=list)
    errors: int = 0
    error_details: list[dict[str, Any]] = field(default_factory=list)

    def record_table(self, result: TableResult) -> None:
        self.tables.append(result)

    def record_error(self, error: Exception, context: dict[str, Any] | None = None) -> None:
        """Record an error.

        Args:
            error: The exception that occurred
            context: Additional context about the error
        """
        self.errors += 1
        error_detail = {
            "error_type": type(error).__name__,
            "error_message": str(error),
        }
        if context:
            error_detail["context"] = context
        self.error_details.append(error_detail)

    def finish(self) -> None:
        self.end_time = time.time()
        self.execution_time = self.end_time - self.start_time

    @property
    def completed_tables(self) -> list[str]:
        return [result.collection_id for result in self.tables]

    @property
    def write_count(self) -> int:
        return int(self.created_database) + sum(t.write_count for t in self.tables)

    def get_table(self, collection_id: str) -> Optional[TableResult]:
        for result in self.tables:
            if result.collection_id == collection_id:
                return result
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "database_id": self.database_id,
            "created_database": self.created_database,
            "execution_time": self.execution_time,
            "tables": [t.to_dict() for t in self.tables],
            "write_count": self.write_count,
            "errors": self.errors,
            "error_details": self.error_details,
        }

    def get_summary(self) -> str:
        """Get human-readable summary of the run.

        Returns:
            Summary string
        """
        if not self.end_time:
            self.finish()

        summary_parts = [
            f"Database: {self.database_id}",
            f"Tables: {len(self.tables)}",
            f"Collections created: {sum(t.created_collection for t in self.tables)}",
            f"Fields created: {sum(len(t.created_fields) for t in self.tables)}",
            f"Fields updated: {sum(len(t.updated_fields) for t in self.tables)}",
            f"Indexes created: {sum(len(t.created_indexes) for t in self.tables)}",
            f"Time: {self.execution_time:.2f}s",
        ]

        if self.errors > 0:
            summary_parts.append(f"Errors: {self.errors}")

        return " | ".join(summary_parts)
