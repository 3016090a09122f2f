"""Field classification: declared field vs. observed remote field.

Each declared field is classified as one of:

- MISSING: no remote field with the key exists; it must be created.
- MATCHING: the remote field already satisfies the declaration.
- MUTABLE_DIFF: only properties the store can change in place differ
  (required, numeric min/max, default); it must be updated.
- IMMUTABLE_DIFF: the store type, array flag, string size or enum value set
  differ. These cannot be altered without destroying data, so the
  reconciler refuses to touch the field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from schemasync.core.type_mapping import declared_size, to_store_type
from schemasync.models.remote import RemoteField, StoreType
from schemasync.models.schema import FieldSpec


class Classification(str, Enum):
    MISSING = "missing"
    MATCHING = "matching"
    MUTABLE_DIFF = "mutable_diff"
    IMMUTABLE_DIFF = "immutable_diff"


@dataclass
class FieldDiff:
    """Outcome of classifying one declared field."""

    key: str
    classification: Classification
    changes: List[str] = field(default_factory=list)
    remote: Optional[RemoteField] = None

    @property
    def needs_write(self) -> bool:
        return self.classification in (
            Classification.MISSING,
            Classification.MUTABLE_DIFF,
        )


def classify_field(
    key: str, declared: FieldSpec, remote: Optional[RemoteField]
) -> FieldDiff:
    """Classify a declared field against its remote counterpart (or absence)."""
    if remote is None:
        return FieldDiff(key=key, classification=Classification.MISSING)

    immutable = immutable_changes(declared, remote)
    if immutable:
        return FieldDiff(
            key=key,
            classification=Classification.IMMUTABLE_DIFF,
            changes=immutable,
            remote=remote,
        )

    mutable = mutable_changes(declared, remote)
    if mutable:
        return FieldDiff(
            key=key,
            classification=Classification.MUTABLE_DIFF,
            changes=mutable,
            remote=remote,
        )

    return FieldDiff(key=key, classification=Classification.MATCHING, remote=remote)


def immutable_changes(declared: FieldSpec, remote: RemoteField) -> list[str]:
    changes = []
    store_type = to_store_type(declared.type)
    if store_type != remote.store_type:
        changes.append("type")
        # size and enum comparisons are meaningless across types
        return changes

    if declared.array != remote.array:
        changes.append("array")

    if store_type == StoreType.STRING and declared_size(declared) != remote.size:
        changes.append("size")

    if store_type == StoreType.ENUM and set(declared.enum_values or []) != set(
        remote.enum_values or []
    ):
        changes.append("enum")

    return changes


def mutable_changes(declared: FieldSpec, remote: RemoteField) -> list[str]:
    changes = []
    if declared.required != remote.required:
        changes.append("required")

    # Stores report implicit bounds when none were given, so only declared
    # bounds are compared.
    if declared.is_numeric:
        if declared.min is not None and not _same_number(declared.min, remote.min):
            changes.append("min")
        if declared.max is not None and not _same_number(declared.max, remote.max):
            changes.append("max")

    if not _same_default(declared.effective_default, remote.default):
        changes.append("default")

    return changes


def _same_number(a: Any, b: Any) -> bool:
    if b is None:
        return False
    return float(a) == float(b)


def _same_default(declared: Any, remote: Any) -> bool:
    if declared is None or remote is None:
        return declared is None and remote is None
    if isinstance(declared, bool) or isinstance(remote, bool):
        return declared is remote
    if isinstance(declared, (int, float)) and isinstance(remote, (int, float)):
        return float(declared) == float(remote)
    return declared == remote
