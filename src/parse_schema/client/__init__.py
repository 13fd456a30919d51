"""
Schema clients for parse-schema.

This package provides the abstract ``SchemaClient`` interface and its
Parse Server REST implementation.
"""

from .base import SchemaClient
from .parse_client import ParseSchemaClient

__all__ = [
    "SchemaClient",
    "ParseSchemaClient",
]
