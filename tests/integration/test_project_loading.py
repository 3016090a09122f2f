"""Loading project files and running them end to end."""

from pathlib import Path

import pytest

from schemasync import from_yaml
from schemasync.api import plan, run_project
from schemasync.models.schema import IndexKind, LogicalType
from schemasync.stores.memory.store import InMemorySchemaStore

EXAMPLE_PROJECT = Path(__file__).parents[2] / "examples" / "projects" / "blog.yaml"


@pytest.fixture
def appwrite_env(monkeypatch):
    monkeypatch.setenv("APPWRITE_ENDPOINT", "https://appwrite.example.com/v1")
    monkeypatch.setenv("APPWRITE_PROJECT", "blog-project")
    monkeypatch.setenv("APPWRITE_API_KEY", "secret-key")


def test_load_example_project(appwrite_env):
    project = from_yaml(str(EXAMPLE_PROJECT))

    assert project.name == "blog"
    assert project.store.type == "appwrite"
    assert project.store.endpoint == "https://appwrite.example.com/v1"
    assert project.store.api_key.get_secret_value() == "secret-key"
    assert [t.name for t in project.tables] == ["users", "posts"]

    role = project.tables[0].fields["role"]
    assert role.type == LogicalType.ENUM
    assert role.enum_values == ["reader", "author", "admin"]
    assert project.tables[1].indexes[0].kind == IndexKind.FULLTEXT


def test_example_project_against_memory_store(appwrite_env):
    project = from_yaml(str(EXAMPLE_PROJECT))
    project.migration.provisioning_delay = 0
    store = InMemorySchemaStore(provisioning_polls=1)

    report = run_project(project, store=store)

    assert report.created_database
    assert report.get_table("posts").created_indexes == ["idx_title", "idx_published_views"]
    assert plan(project.descriptor, store, project.store.database_id).is_converged
