"""
Schema operations planned by the reconciler.

Each ``SchemaOperation`` maps to exactly one administrative request.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class OperationType(str, Enum):
    """Types of schema operations."""

    CREATE_CLASS = "create_class"
    UPDATE_CLASS = "update_class"
    DELETE_CLASS = "delete_class"


DELETE_OP = {"__op": "Delete"}


@dataclass
class SchemaOperation:
    """Represents a single create/update/delete request."""

    operation_type: OperationType
    class_name: str
    description: str
    fields: Dict[str, Any] = field(default_factory=dict)
    class_level_permissions: Optional[Any] = None
    document: Optional[Dict[str, Any]] = None

    # Execution results
    executed: bool = False
    execution_time_ms: Optional[float] = None
    error: Optional[str] = None

    @property
    def is_destructive(self) -> bool:
        """Whether this operation drops a class or fields."""
        if self.operation_type == OperationType.DELETE_CLASS:
            return True
        return any(value == DELETE_OP for value in self.fields.values())

    @property
    def deleted_fields(self) -> List[str]:
        """Names of fields this operation drops."""
        return [name for name, value in self.fields.items() if value == DELETE_OP]

    @property
    def written_fields(self) -> List[str]:
        """Names of fields this operation creates."""
        return [name for name, value in self.fields.items() if value != DELETE_OP]

    def payload(self) -> Dict[str, Any]:
        """Request body for this operation."""
        if self.operation_type == OperationType.CREATE_CLASS:
            return dict(self.document or {"className": self.class_name})
        if self.operation_type == OperationType.DELETE_CLASS:
            return {}

        body: Dict[str, Any] = {"className": self.class_name, "fields": self.fields}
        if self.class_level_permissions is not None:
            body["classLevelPermissions"] = self.class_level_permissions
        return body

    @classmethod
    def create(cls, document: Dict[str, Any]) -> "SchemaOperation":
        return cls(
            operation_type=OperationType.CREATE_CLASS,
            class_name=document["className"],
            description=f"Create class {document['className']}",
            document=document,
        )

    @classmethod
    def delete_fields(
        cls,
        class_name: str,
        names: List[str],
        class_level_permissions: Optional[Any],
    ) -> "SchemaOperation":
        description = f"Update class {class_name}: delete fields {', '.join(names)}"
        if not names:
            description = f"Update class {class_name}: class-level permissions"
        return cls(
            operation_type=OperationType.UPDATE_CLASS,
            class_name=class_name,
            description=description,
            fields={name: dict(DELETE_OP) for name in names},
            class_level_permissions=class_level_permissions,
        )

    @classmethod
    def write_fields(
        cls,
        class_name: str,
        fields: Dict[str, Dict[str, Any]],
        class_level_permissions: Optional[Any],
    ) -> "SchemaOperation":
        description = f"Update class {class_name}: create fields {', '.join(fields)}"
        if not fields:
            description = f"Update class {class_name}: class-level permissions"
        return cls(
            operation_type=OperationType.UPDATE_CLASS,
            class_name=class_name,
            description=description,
            fields=fields,
            class_level_permissions=class_level_permissions,
        )

    @classmethod
    def drop(cls, class_name: str) -> "SchemaOperation":
        return cls(
            operation_type=OperationType.DELETE_CLASS,
            class_name=class_name,
            description=f"Delete class {class_name}",
        )


@dataclass
class ReconciliationPlan:
    """Ordered operations plus the destructive actions that were skipped."""

    operations: List[SchemaOperation] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.operations
