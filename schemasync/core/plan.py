"""Dry-run view of what a migration would change."""

from dataclasses import dataclass, field
from typing import Any

from schemasync.core.classifier import Classification, FieldDiff


@dataclass
class TablePlan:
    collection_id: str
    collection_missing: bool = False
    fields: list[FieldDiff] = field(default_factory=list)
    missing_indexes: list[str] = field(default_factory=list)

    @property
    def conflicts(self) -> list[FieldDiff]:
        return [
            diff
            for diff in self.fields
            if diff.classification == Classification.IMMUTABLE_DIFF
        ]

    @property
    def has_changes(self) -> bool:
        return (
            self.collection_missing
            or bool(self.missing_indexes)
            or any(d.classification != Classification.MATCHING for d in self.fields)
        )

    def describe(self) -> list[str]:
        status = "create" if self.collection_missing else "exists"
        lines = [f"{self.collection_id} ({status})"]
        for diff in self.fields:
            changes = f" [{', '.join(diff.changes)}]" if diff.changes else ""
            lines.append(f"  {diff.key}: {diff.classification.value}{changes}")
        for key in self.missing_indexes:
            lines.append(f"  index {key}: missing")
        return lines

    def to_dict(self) -> dict[str, Any]:
        return {
            "collection_id": self.collection_id,
            "collection_missing": self.collection_missing,
            "fields": {
                diff.key: {
                    "classification": diff.classification.value,
                    "changes": list(diff.changes),
                }
                for diff in self.fields
            },
            "missing_indexes": list(self.missing_indexes),
        }


@dataclass
class MigrationPlan:
    database_id: str
    database_missing: bool = False
    tables: list[TablePlan] = field(default_factory=list)

    @property
    def is_converged(self) -> bool:
        return not self.database_missing and not any(t.has_changes for t in self.tables)

    @property
    def conflicts(self) -> list[tuple[str, FieldDiff]]:
        return [(t.collection_id, diff) for t in self.tables for diff in t.conflicts]

    def describe(self) -> str:
        lines = [f"Database {self.database_id}: {'create' if self.database_missing else 'exists'}"]
        for table in self.tables:
            lines.extend(table.describe())
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "database_id": self.database_id,
            "database_missing": self.database_missing,
            "is_converged": self.is_converged,
            "tables": [t.to_dict() for t in self.tables],
        }
