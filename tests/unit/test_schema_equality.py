"""
Tests for parse_schema.schema.equality module.
"""

import pytest

from parse_schema.schema.equality import classes_equal, deep_equals
from parse_schema.schema.models import ClassSchema


class TestDeepEquals:
    """Test deep structural equality."""

    @pytest.mark.parametrize("left,right", [
        (None, None),
        ({}, {}),
        ([], []),
        ("a", "a"),
        (1, 1.0),
        ({"a": [1, {"b": True}]}, {"a": [1, {"b": True}]}),
        ({"x": 1, "y": 2}, {"y": 2, "x": 1}),
    ])
    def test_equal_values(self, left, right):
        """Test values that must compare equal."""
        assert deep_equals(left, right)

    @pytest.mark.parametrize("left,right", [
        (None, {}),
        ({}, None),
        (None, False),
        ({"a": 1}, {"a": 1, "b": 2}),
        ([1, 2], [2, 1]),
        ([1], [1, 1]),
        (True, 1),
        (False, 0),
        ("1", 1),
        ({"a": []}, {"a": {}}),
        ({"a": None}, {"a": {}}),
    ])
    def test_unequal_values(self, left, right):
        """Test values that must compare unequal."""
        assert not deep_equals(left, right)
        assert not deep_equals(right, left)

    def test_nested_permissions(self):
        """Test a realistic permissions block."""
        clp = {
            "find": {"*": True, "role:admin": True},
            "protectedFields": {"*": ["email"]},
        }
        same = {
            "protectedFields": {"*": ["email"]},
            "find": {"role:admin": True, "*": True},
        }
        changed = {
            "find": {"*": True, "role:admin": True},
            "protectedFields": {"*": []},
        }

        assert deep_equals(clp, same)
        assert not deep_equals(clp, changed)


class TestClassesEqual:
    """Test whole-class comparison."""

    def test_identical_classes(self, post_document):
        """Test two loads of one document are equal."""
        assert classes_equal(
            ClassSchema.model_validate(post_document),
            ClassSchema.model_validate(post_document),
        )

    def test_required_flag_differs(self):
        """Test a change in a field attribute makes classes unequal."""
        local = ClassSchema.model_validate({
            "className": "Post",
            "fields": {"title": {"type": "String", "required": True}},
        })
        remote = ClassSchema.model_validate({
            "className": "Post",
            "fields": {"title": {"type": "String", "required": False}},
        })

        assert not classes_equal(local, remote)

    def test_absent_and_empty_permissions_differ(self):
        """Test an absent permissions block does not equal an empty one."""
        local = ClassSchema.model_validate({"className": "Post"})
        remote = ClassSchema.model_validate(
            {"className": "Post", "classLevelPermissions": {}}
        )

        assert not classes_equal(local, remote)
