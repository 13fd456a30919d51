"""
Schema sync service for parse-schema.

This module implements the top-level operations: converge the server to
the local schema (``up``), drop the local classes from the server
(``delete``), export the server schema (``down``) and render TypeScript
definitions (``typescript``).
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .client.base import SchemaClient
from .client.parse_client import ParseSchemaClient
from .codegen.typescript import write_typescript
from .config import ParseServerConfig, ReconcileOptions, TypeScriptOptions
from .schema.exporter import export_schema
from .schema.loader import DEFAULT_SCHEMA_PATH, load_local_schema
from .schema.models import strip_default_fields
from .schema.prefix import remove_prefix
from .schema.reconciler import ReconciliationResult, SchemaReconciler

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class SchemaSyncService:
    """
    Service running schema operations against one Parse Server.

    The local schema is always loaded and validated before the server is
    contacted, so a broken local description never causes a request.
    """

    def __init__(self, config: ParseServerConfig, client: Optional[SchemaClient] = None):
        self.config = config
        self._client = client

    @property
    def client(self) -> SchemaClient:
        if self._client is None:
            self._client = ParseSchemaClient(self.config)
        return self._client

    async def up(
        self,
        schema_path: Optional[PathLike] = None,
        options: Optional[ReconcileOptions] = None,
    ) -> ReconciliationResult:
        """
        Converge the server schema to the local schema.

        Args:
            schema_path: Local schema directory or document
            options: Prefix, deletion flags and dry-run switch

        Returns:
            ReconciliationResult with the operations issued
        """
        options = options or ReconcileOptions()
        local = strip_default_fields(load_local_schema(schema_path))
        remote = strip_default_fields(await self.client.fetch_schemas())

        logger.info(
            f"Converging {len(local)} local classes against "
            f"{len(remote)} remote classes"
            + (f" (prefix '{options.prefix}')" if options.prefix else "")
        )

        return await SchemaReconciler(self.client).converge(local, remote, options)

    async def delete(
        self,
        schema_path: Optional[PathLike] = None,
        options: Optional[ReconcileOptions] = None,
    ) -> ReconciliationResult:
        """Delete every server class that the local schema names."""
        options = options or ReconcileOptions()
        local = load_local_schema(schema_path)
        remote = await self.client.fetch_schemas()

        return await SchemaReconciler(self.client).prune(local, remote, options)

    async def down(
        self,
        schema_path: Optional[PathLike] = None,
        prefix: Optional[str] = None,
    ) -> List[Path]:
        """
        Export the server schema to local documents.

        Returns:
            The files written
        """
        remote = strip_default_fields(await self.client.fetch_schemas())
        schemas = remove_prefix(remote, prefix)
        return export_schema(schemas, schema_path or DEFAULT_SCHEMA_PATH)

    async def typescript(
        self,
        path: Optional[PathLike] = None,
        options: Optional[TypeScriptOptions] = None,
    ) -> List[Path]:
        """Render TypeScript definitions for the server schema."""
        remote = await self.client.fetch_schemas()
        return write_typescript(remote, path, options)

    async def check(self) -> Dict[str, Any]:
        """Check that the server is reachable."""
        return await self.client.health_check()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
