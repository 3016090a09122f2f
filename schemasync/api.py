"""Public Python API for schemasync package.

This module provides the main entry points for loading projects, running
migrations and exporting schemas.
"""

from typing import Dict, Optional

from schemasync.core.engine import MigrationEngine
from schemasync.core.plan import MigrationPlan
from schemasync.core.report import MigrationReport
from schemasync.exporters import export_rules, export_sql, export_text
from schemasync.models.config import MigrationSettings
from schemasync.models.loader import load_project
from schemasync.models.project import Project
from schemasync.models.schema import SchemaDescriptor
from schemasync.stores.base import SchemaStore
from schemasync.stores.registry import get_store


def from_yaml(path: str, cli_vars: Optional[Dict[str, str]] = None) -> Project:
    """Load a project from a YAML file, applying template rendering.

    Args:
        path: Path to project YAML file
        cli_vars: Values for ``{{ var('NAME') }}`` templates

    Returns:
        Validated Project instance

    Raises:
        ConfigError: If the file is missing, the YAML is invalid, a template
            variable is undefined or validation fails

    Example:
        >>> project = from_yaml("examples/projects/blog.yaml")
        >>> print(project.name)
        blog
    """
    return load_project(path, cli_vars=cli_vars)


def migrate(
    descriptor: SchemaDescriptor,
    store: SchemaStore,
    database_id: str,
    settings: Optional[MigrationSettings] = None,
) -> MigrationReport:
    """Reconcile the remote schema with ``descriptor``.

    Tables are reconciled in order and the first failure aborts the run.
    Running it again against a converged store issues no writes.

    Raises:
        ValidationError: If the descriptor is malformed (no remote calls made)
        ImmutableDiffError: If a declared field conflicts with an existing one
        ProvisioningTimeoutError: If new fields are not provisioned in time
        RunTimeoutError: If the overall run deadline expires
        RemoteOperationError: If any other store call fails
    """
    engine = MigrationEngine(store, database_id, settings=settings)
    return engine.migrate(descriptor)


def plan(
    descriptor: SchemaDescriptor,
    store: SchemaStore,
    database_id: str,
    settings: Optional[MigrationSettings] = None,
) -> MigrationPlan:
    """Describe what ``migrate`` would change, without writing anything."""
    engine = MigrationEngine(store, database_id, settings=settings)
    return engine.plan(descriptor)


def build_engine(project: Project, store: Optional[SchemaStore] = None) -> MigrationEngine:
    """Create a MigrationEngine for ``project``, resolving its store by type."""
    return MigrationEngine(
        store or get_store(project.store),
        project.store.database_id,
        database_name=project.store.database_name,
        settings=project.migration,
    )


def run_project(project: Project, store: Optional[SchemaStore] = None) -> MigrationReport:
    """Migrate every table of ``project``.

    Example:
        >>> from schemasync import from_yaml, run_project
        >>> report = run_project(from_yaml("examples/projects/blog.yaml"))
        >>> print(report.get_summary())
    """
    return build_engine(project, store).migrate(project.descriptor)


__all__ = [
    "from_yaml",
    "migrate",
    "plan",
    "build_engine",
    "run_project",
    "export_sql",
    "export_rules",
    "export_text",
]
