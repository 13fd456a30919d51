"""
Tests for parse_schema.schema.models module.
"""

import pytest
from pydantic import ValidationError

from parse_schema.schema.models import (
    ClassSchema,
    FieldSchema,
    strip_default_fields,
)


class TestFieldSchema:
    """Test FieldSchema parsing and serialization."""

    def test_scalar_field(self):
        """Test a plain field keeps only what was given."""
        field = FieldSchema.model_validate({"type": "String"})

        assert field.type == "String"
        assert field.target_class is None
        assert field.required is None
        assert field.to_document() == {"type": "String"}

    def test_pointer_field(self):
        """Test targetClass is read from its wire name."""
        field = FieldSchema.model_validate({"type": "Pointer", "targetClass": "_User"})

        assert field.is_relational
        assert field.target_class == "_User"
        assert field.to_document() == {"type": "Pointer", "targetClass": "_User"}

    def test_relational_field_needs_target(self):
        """Test Pointer and Relation fields without targetClass are rejected."""
        with pytest.raises(ValidationError):
            FieldSchema.model_validate({"type": "Relation"})

    def test_unknown_attributes_are_kept(self):
        """Test extra attributes survive a round trip through the model."""
        field = FieldSchema.model_validate(
            {"type": "Number", "required": False, "defaultValue": 3}
        )

        assert field.options == {"defaultValue": 3}
        assert field.to_document() == {
            "type": "Number",
            "required": False,
            "defaultValue": 3,
        }

    def test_field_is_frozen(self):
        """Test fields cannot be mutated in place."""
        field = FieldSchema.model_validate({"type": "String"})

        with pytest.raises(ValidationError):
            field.type = "Number"


class TestClassSchema:
    """Test ClassSchema parsing and serialization."""

    def test_to_document(self, post_document):
        """Test the document matches what was loaded."""
        schema = ClassSchema.model_validate(post_document)

        assert schema.class_name == "Post"
        assert schema.to_document() == post_document

    def test_absent_permissions_are_omitted(self):
        """Test an absent permissions block stays absent."""
        schema = ClassSchema.model_validate({"className": "Post", "fields": {}})

        assert schema.class_level_permissions is None
        assert "classLevelPermissions" not in schema.to_document()

    def test_empty_permissions_are_kept(self):
        """Test an empty permissions block is distinct from an absent one."""
        schema = ClassSchema.model_validate(
            {"className": "Post", "classLevelPermissions": {}}
        )

        assert schema.class_level_permissions == {}
        assert schema.to_document()["classLevelPermissions"] == {}

    def test_class_name_required(self):
        """Test an empty class name is rejected."""
        with pytest.raises(ValidationError):
            ClassSchema.model_validate({"className": "", "fields": {}})

    def test_without_fields_returns_copy(self, post_document):
        """Test removing fields returns a copy and leaves the source alone."""
        schema = ClassSchema.model_validate(post_document)
        trimmed = schema.without_fields(["author"])

        assert list(trimmed.fields) == ["title"]
        assert list(schema.fields) == ["title", "author"]


class TestHelpers:
    """Test module-level helpers."""

    def test_strip_default_fields(self):
        """Test server-managed columns are dropped."""
        schema = ClassSchema.model_validate({
            "className": "Post",
            "fields": {
                "objectId": {"type": "String"},
                "createdAt": {"type": "Date"},
                "updatedAt": {"type": "Date"},
                "ACL": {"type": "ACL"},
                "title": {"type": "String"},
            },
        })

        [stripped] = strip_default_fields([schema])

        assert list(stripped.fields) == ["title"]

