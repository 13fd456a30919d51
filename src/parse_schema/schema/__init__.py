"""
Schema management package for parse-schema.

This package provides:
- Class and field schema models
- Deep equality for schema documents
- Prefix namespacing of class names
- Schema reconciliation core logic
- Local schema loading and export
"""

from .models import ClassSchema, FieldSchema, strip_default_fields
from .equality import deep_equals, classes_equal
from .prefix import PREFIX_PLACEHOLDER, add_prefix, filter_prefixed, remove_prefix
from .operations import SchemaOperation, OperationType, ReconciliationPlan
from .reconciler import (
    SchemaReconciler,
    ReconciliationResult,
    ReconciliationStatus,
    plan_converge,
    plan_prune,
)
from .loader import load_local_schema
from .exporter import export_schema

__all__ = [
    "ClassSchema",
    "FieldSchema",
    "strip_default_fields",
    "deep_equals",
    "classes_equal",
    "PREFIX_PLACEHOLDER",
    "add_prefix",
    "filter_prefixed",
    "remove_prefix",
    "SchemaOperation",
    "OperationType",
    "ReconciliationPlan",
    "SchemaReconciler",
    "ReconciliationResult",
    "ReconciliationStatus",
    "plan_converge",
    "plan_prune",
    "load_local_schema",
    "export_schema",
]
