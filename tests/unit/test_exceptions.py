"""Tests for the exception hierarchy."""

import pytest

from schemasync.core.exceptions import (
    ImmutableDiffError,
    ProvisioningTimeoutError,
    RemoteOperationError,
    RunTimeoutError,
    SchemaSyncError,
    ValidationError,
)


def test_str_includes_context():
    error = SchemaSyncError("Failed", context={"table": "users", "field": "email"})
    assert str(error) == "Failed (table=users, field=email)"
    assert str(SchemaSyncError("Plain")) == "Plain"


def test_add_context_keeps_existing_values():
    error = ImmutableDiffError("conflict", table="users", field="email", changes=["size"])
    error.add_context(table="other", completed_tables=["posts"], field=None)
    assert error.context["table"] == "users"
    assert error.context["completed_tables"] == ["posts"]


@pytest.mark.parametrize(
    "error_class",
    [ValidationError, ImmutableDiffError, ProvisioningTimeoutError, RunTimeoutError],
)
def test_distinct_kinds(error_class):
    assert issubclass(error_class, SchemaSyncError)
    assert not issubclass(error_class, RemoteOperationError)


class TestRemoteOperationError:
    def test_code_takes_precedence(self):
        error = RemoteOperationError("Document already exists", code="document_invalid")
        assert not error.is_already_exists()

    @pytest.mark.parametrize(
        "code",
        [
            "attribute_already_exists",
            "collection_already_exists",
            "database_already_exists",
            "index_already_exists",
        ],
    )
    def test_known_codes(self, code):
        assert RemoteOperationError("Conflict", code=code).is_already_exists()

    def test_message_fallback_without_code(self):
        assert RemoteOperationError("Attribute already exists").is_already_exists()
        assert not RemoteOperationError("Server error").is_already_exists()
