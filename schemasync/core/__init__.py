"""Core module for schemasync package."""

from schemasync.core.exceptions import (
    ConfigError,
    ImmutableDiffError,
    ProvisioningTimeoutError,
    RemoteOperationError,
    RunTimeoutError,
    SchemaSyncError,
    StoreError,
    ValidationError,
)
from schemasync.core.classifier import Classification, FieldDiff, classify_field
from schemasync.core.engine import MigrationEngine, migrate
from schemasync.core.plan import MigrationPlan, TablePlan
from schemasync.core.report import MigrationReport, TableResult
from schemasync.core.validation import validate_descriptor

__all__ = [
    "SchemaSyncError",
    "ConfigError",
    "ValidationError",
    "ImmutableDiffError",
    "ProvisioningTimeoutError",
    "RunTimeoutError",
    "RemoteOperationError",
    "StoreError",
    "Classification",
    "FieldDiff",
    "classify_field",
    "MigrationEngine",
    "migrate",
    "MigrationPlan",
    "TablePlan",
    "MigrationReport",
    "TableResult",
    "validate_descriptor",
]
