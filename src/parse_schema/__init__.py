"""
parse-schema: Declarative schema management for Parse Server.

parse-schema keeps the class schema of a Parse Server in sync with a set of
local schema files, with optional class name prefixes so several schema
sets can share one server.
"""

__version__ = "0.1.0"

from .config import ParseServerConfig, ReconcileOptions, TypeScriptOptions, load_config
from .exceptions import (
    ParseSchemaError,
    ConfigurationError,
    LocalSchemaError,
    RemoteError,
    RemoteUnreachableError,
    RemoteRejectedError,
    UnsupportedFieldTypeError,
)
from .sync import SchemaSyncService

__all__ = [
    "__version__",
    "ParseServerConfig",
    "ReconcileOptions",
    "TypeScriptOptions",
    "load_config",
    "ParseSchemaError",
    "ConfigurationError",
    "LocalSchemaError",
    "RemoteError",
    "RemoteUnreachableError",
    "RemoteRejectedError",
    "UnsupportedFieldTypeError",
    "SchemaSyncService",
]
