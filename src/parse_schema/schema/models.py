"""
Pydantic models for Parse class schemas.

A schema set is a plain ``List[ClassSchema]``. Models are frozen; every
transform returns new values instead of mutating the loaded ones.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


RELATIONAL_TYPES = frozenset({"Pointer", "Relation"})

# Columns every Parse class carries; the server owns them.
DEFAULT_FIELDS = ("objectId", "createdAt", "updatedAt", "ACL")

_FIELD_KEYS = {"type", "targetClass", "target_class", "required", "options"}


class FieldSchema(BaseModel):
    """Schema for a single field of a class.

    Attributes other than ``type``, ``targetClass`` and ``required``
    (``defaultValue`` and whatever the server adds later) are kept verbatim
    in ``options``.

    Example:
        >>> field = FieldSchema.model_validate({"type": "Pointer", "targetClass": "_User"})
        >>> field.to_document()
        {'type': 'Pointer', 'targetClass': '_User'}
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: str = Field(..., min_length=1)
    target_class: Optional[str] = Field(None, alias="targetClass")
    required: Optional[bool] = None
    options: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def collect_options(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        options = dict(data.get("options") or {})
        options.update({k: v for k, v in data.items() if k not in _FIELD_KEYS})
        known = {k: v for k, v in data.items() if k in _FIELD_KEYS}
        known["options"] = options
        return known

    @model_validator(mode="after")
    def check_target_class(self) -> "FieldSchema":
        if self.type in RELATIONAL_TYPES and not self.target_class:
            raise ValueError(f"{self.type} fields need a targetClass")
        return self

    @property
    def is_relational(self) -> bool:
        """Whether this field references another class."""
        return self.type in RELATIONAL_TYPES

    def to_document(self) -> Dict[str, Any]:
        """Wire representation, omitting absent attributes."""
        document: Dict[str, Any] = {"type": self.type}
        if self.target_class is not None:
            document["targetClass"] = self.target_class
        if self.required is not None:
            document["required"] = self.required
        document.update(self.options)
        return document


class ClassSchema(BaseModel):
    """Schema for a Parse class.

    Example:
        >>> schema = ClassSchema(className="Post", fields={"title": {"type": "String"}})
        >>> schema.to_document()
        {'className': 'Post', 'fields': {'title': {'type': 'String'}}}
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    class_name: str = Field(..., alias="className", min_length=1)
    fields: Dict[str, FieldSchema] = Field(default_factory=dict)
    class_level_permissions: Optional[Any] = Field(None, alias="classLevelPermissions")
    indexes: Optional[Any] = None

    def to_document(self) -> Dict[str, Any]:
        """Wire representation, omitting absent attributes."""
        document: Dict[str, Any] = {
            "className": self.class_name,
            "fields": {name: f.to_document() for name, f in self.fields.items()},
        }
        if self.class_level_permissions is not None:
            document["classLevelPermissions"] = self.class_level_permissions
        if self.indexes is not None:
            document["indexes"] = self.indexes
        return document

    def without_fields(self, names) -> "ClassSchema":
        """Copy of this class minus the named fields."""
        return self.model_copy(
            update={
                "fields": {n: f for n, f in self.fields.items() if n not in names}
            }
        )


def strip_default_fields(schemas: List[ClassSchema]) -> List[ClassSchema]:
    """Drop the server-managed default columns from every class."""
    return [schema.without_fields(DEFAULT_FIELDS) for schema in schemas]
