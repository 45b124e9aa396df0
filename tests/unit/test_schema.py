"""Unit tests for schema descriptors."""

from __future__ import annotations

from typing import ClassVar

import pytest

from recordproto import (
    DuplicateFieldIndex,
    DuplicateFieldName,
    FieldIndex,
    InvalidIndex,
    Record,
    SchemaDescriptor,
    SchemaError,
    define,
)


class PlainUser(Record):
    """Sequential indices, not registered."""

    id: int | None = None
    name: str | None = None
    email: str | None = None


class IndexedSession(Record):
    """Explicit indices with a gap."""

    token: str | None = FieldIndex(1)
    user_id: int | None = FieldIndex(3)


class TestDefine:
    """Test define()."""

    def test_sequential_indices_follow_declaration_order(self) -> None:
        """Test sequential policy assigns 1..N."""
        descriptor = define("schema.test.user", ["id", "name", "email"])

        assert descriptor.fields == ("id", "name", "email")
        assert dict(descriptor.field_indices) == {"id": 1, "name": 2, "email": 3}
        assert dict(descriptor.index_fields) == {1: "id", 2: "name", 3: "email"}
        assert descriptor.max_index == 3
        assert descriptor.policy == "sequential"

    def test_explicit_indices(self) -> None:
        """Test explicit policy keeps supplied indices."""
        descriptor = define(
            "schema.test.session", [("token", 1), ("user_id", 3)], index_policy="explicit"
        )

        assert descriptor.field_index("user_id") == 3
        assert descriptor.index_field(3) == "user_id"
        assert descriptor.index_field(2) is None
        assert descriptor.max_index == 3

    def test_lookups_return_none_when_missing(self) -> None:
        """Test field_index/index_field do not raise."""
        descriptor = define("schema.test.lookup", ["a"])

        assert descriptor.field_index("missing") is None
        assert descriptor.index_field(99) is None

    def test_empty_schema(self) -> None:
        """Test a schema without fields."""
        descriptor = define("schema.test.empty", [])

        assert descriptor.fields == ()
        assert descriptor.max_index == 0

    def test_duplicate_field_name(self) -> None:
        """Test duplicate names are rejected."""
        with pytest.raises(DuplicateFieldName, match="'id' is already defined"):
            define("schema.test.dup", ["id", "name", "id"])

    def test_duplicate_field_index(self) -> None:
        """Test duplicate explicit indices are rejected."""
        with pytest.raises(DuplicateFieldIndex, match="index 1"):
            define("schema.test.dup", [("a", 1), ("b", 1)], index_policy="explicit")

    @pytest.mark.parametrize("index", [0, -1, "1", 1.5, True, None])
    def test_invalid_explicit_index(self, index: object) -> None:
        """Test non-positive and non-integer indices are rejected."""
        with pytest.raises(InvalidIndex, match="positive integer index"):
            define("schema.test.bad", [("a", index)], index_policy="explicit")

    @pytest.mark.parametrize("name", ["", None, 42])
    def test_invalid_schema_name(self, name: object) -> None:
        """Test schema names must be non-empty strings."""
        with pytest.raises(SchemaError, match="non-empty string"):
            define(name, ["a"])  # type: ignore[arg-type]

    @pytest.mark.parametrize("entry", [("a", 1, 2), ("a",), "a", 1])
    def test_explicit_entry_not_a_pair(self, entry: object) -> None:
        """Test explicit fields must be (field, index) pairs."""
        with pytest.raises(SchemaError, match="pairs"):
            define("schema.test.pairs", [entry], index_policy="explicit")  # type: ignore[list-item]

    def test_unknown_policy(self) -> None:
        """Test unknown index policies are rejected."""
        with pytest.raises(SchemaError, match="unknown index policy"):
            define("schema.test.policy", ["a"], index_policy="random")  # type: ignore[arg-type]

    def test_descriptor_is_immutable(self) -> None:
        """Test descriptors cannot be mutated."""
        descriptor = define("schema.test.frozen", ["a"])

        with pytest.raises(AttributeError):
            descriptor.name = "other"  # type: ignore[misc]
        with pytest.raises(TypeError):
            descriptor.field_indices["b"] = 2  # type: ignore[index]

    def test_equal_content_is_equal(self) -> None:
        """Test sequential and explicit declarations of the same layout compare equal."""
        sequential = define("schema.test.eq", ["a", "b"])
        explicit = define("schema.test.eq", [("a", 1), ("b", 2)], index_policy="explicit")

        assert sequential == explicit
        assert hash(sequential) == hash(explicit)
        assert sequential != define("schema.test.eq", ["b", "a"])


class TestFromModel:
    """Test SchemaDescriptor.from_model()."""

    def test_sequential_from_fields(self) -> None:
        """Test model fields map to sequential indices."""
        descriptor = SchemaDescriptor.from_model(PlainUser, "schema.test.plain")

        assert descriptor.name == "schema.test.plain"
        assert dict(descriptor.field_indices) == {"id": 1, "name": 2, "email": 3}

    def test_explicit_from_field_index(self) -> None:
        """Test FieldIndex() metadata selects explicit indices."""
        descriptor = SchemaDescriptor.from_model(IndexedSession, "schema.test.indexed")

        assert descriptor.policy == "explicit"
        assert dict(descriptor.field_indices) == {"token": 1, "user_id": 3}

    def test_field_index_keeps_default(self) -> None:
        """Test FieldIndex() fields default to None."""
        session = IndexedSession()

        assert session.token is None
        assert session.user_id is None

    def test_requires_name(self) -> None:
        """Test a name is needed when the class has no proto_schema."""
        with pytest.raises(SchemaError, match="has no proto_schema"):
            SchemaDescriptor.from_model(PlainUser)

    def test_mixed_indices_rejected(self) -> None:
        """Test mixing FieldIndex() and plain fields fails."""

        class Mixed(Record):
            a: int | None = FieldIndex(1)
            b: int | None = None

        with pytest.raises(InvalidIndex, match="'b'"):
            SchemaDescriptor.from_model(Mixed, "schema.test.mixed")

    def test_invalid_field_index_fails_at_class_creation(self) -> None:
        """Test a registered record with a bad index fails when declared."""
        with pytest.raises(InvalidIndex):

            class BadIndex(Record):
                proto_schema: ClassVar[str] = "schema.test.bad_index"

                a: int | None = FieldIndex(0)

    def test_duplicate_field_index_fails_at_class_creation(self) -> None:
        """Test a registered record with a duplicate index fails when declared."""
        with pytest.raises(DuplicateFieldIndex):

            class DupIndex(Record):
                proto_schema: ClassVar[str] = "schema.test.dup_index"

                a: int | None = FieldIndex(1)
                b: int | None = FieldIndex(1)
