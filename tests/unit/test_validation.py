"""
Unit tests for non-null payload validation.

Tests cover:
- Required field presence
- Declaration order of reported fields
- Field exclusion
- Inherited non-null fields
"""

import pytest

from gqlstore.errors import ErrorKind, MissingValueError
from gqlstore.schema.sdl import load_schema
from gqlstore.schema.validation import ensure_non_nulls


@pytest.fixture
def schema():
    """Schema with a mix of nullable and non-null fields."""
    return load_schema(
        """
        type T {
            req: String!
            notReq: String
            alsoReq: String!
        }

        interface Named {
            id: ID!
            name: String!
        }

        type Pet implements Named {
            age: Int!
        }
        """
    )


class TestEnsureNonNulls:
    """Tests for ensure_non_nulls."""

    def test_all_present(self, schema):
        """All fields present passes."""
        ensure_non_nulls(schema, "T", {"req": "here", "notReq": "here", "alsoReq": "here"})

    def test_only_non_null(self, schema):
        """Nullable fields may be omitted."""
        ensure_non_nulls(schema, "T", {"req": "here", "alsoReq": "here"})

    def test_missing_non_null(self, schema):
        """Missing non-null field fails naming the field."""
        with pytest.raises(
            MissingValueError,
            match="^type T requires a value for field alsoReq, but no value present$",
        ):
            ensure_non_nulls(schema, "T", {"req": "here", "notReq": "here"})

    def test_missing_all_non_null_reports_first(self, schema):
        """Only the first missing field, in declaration order, is reported."""
        with pytest.raises(MissingValueError) as exc_info:
            ensure_non_nulls(schema, "T", {"notReq": "here"})

        assert str(exc_info.value) == (
            "type T requires a value for field req, but no value present"
        )
        assert exc_info.value.type_name == "T"
        assert exc_info.value.field_name == "req"
        assert exc_info.value.kind == ErrorKind.MISSING_FIELD

    def test_with_exclusion(self, schema):
        """The excluded field is never reported."""
        ensure_non_nulls(schema, "T", {"req": "here", "notReq": "here"}, "alsoReq")

    def test_exclusion_does_not_hide_other_fields(self, schema):
        """Excluding one field still reports others."""
        with pytest.raises(MissingValueError, match="field req,"):
            ensure_non_nulls(schema, "T", {}, "alsoReq")

    def test_null_value_counts_as_missing(self, schema):
        """A key present with None is missing."""
        with pytest.raises(MissingValueError, match="field alsoReq,"):
            ensure_non_nulls(schema, "T", {"req": "here", "alsoReq": None})

    def test_falsy_values_are_present(self, schema):
        """Empty strings and zero are values."""
        ensure_non_nulls(schema, "T", {"req": "", "alsoReq": 0})

    def test_inherited_fields_checked_first(self, schema):
        """Interface fields are checked before the type's own fields."""
        with pytest.raises(MissingValueError, match="type Pet requires a value for field name,"):
            ensure_non_nulls(schema, "Pet", {}, "id")

    def test_unknown_type_raises(self, schema):
        """Unknown type names raise KeyError."""
        with pytest.raises(KeyError):
            ensure_non_nulls(schema, "Nope", {})
