"""Schema Sync - Declarative schema migrations for document stores.

Reconciles a declared set of collections, fields and indexes against a
remote document store, creating what is missing and updating what can be
changed in place without destroying data.
"""

__version__ = "0.1.0"

# Public API
from schemasync.api import (
    build_engine,
    export_rules,
    export_sql,
    export_text,
    from_yaml,
    migrate,
    plan,
    run_project,
)

# Exceptions
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
from schemasync.core.engine import MigrationEngine
from schemasync.core.plan import MigrationPlan
from schemasync.core.report import MigrationReport

# Models
from schemasync.models.project import Project
from schemasync.models.schema import FieldSpec, IndexSpec, SchemaDescriptor, TableSpec

__all__ = [
    # Version
    "__version__",
    # Public API
    "from_yaml",
    "migrate",
    "plan",
    "build_engine",
    "run_project",
    "export_sql",
    "export_rules",
    "export_text",
    # Core classes
    "MigrationEngine",
    "MigrationPlan",
    "MigrationReport",
    "Project",
    "SchemaDescriptor",
    "TableSpec",
    "FieldSpec",
    "IndexSpec",
    # Exceptions
    "SchemaSyncError",
    "ConfigError",
    "ValidationError",
    "ImmutableDiffError",
    "ProvisioningTimeoutError",
    "RunTimeoutError",
    "RemoteOperationError",
    "StoreError",
]
