"""
Parse Server schema client implementation.

Talks to the ``/schemas`` administrative endpoints of the Parse Server REST
API with the master key.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp
from pydantic import ValidationError

from .base import SchemaClient
from ..config import ParseServerConfig
from ..exceptions import (
    RemoteError,
    RemoteRejectedError,
    RemoteUnauthorizedError,
    RemoteUnreachableError,
)
from ..schema.models import ClassSchema

logger = logging.getLogger(__name__)


class ParseSchemaClient(SchemaClient):
    """
    Schema client for the Parse Server REST API.

    Requests are issued one at a time and are never retried: a failed
    request raises and leaves the decision to the caller.
    """

    def __init__(self, config: ParseServerConfig, timeout: Optional[float] = None):
        """Initialize Parse client."""
        super().__init__(config)

        self.base_url = config.public_server_url
        self.timeout = timeout

        # Session for connection reuse
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            kwargs: Dict[str, Any] = {
                "headers": {
                    **self.config.headers(),
                    "User-Agent": "parse-schema/1.0",
                }
            }
            if self.timeout:
                kwargs["timeout"] = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(**kwargs)
        return self._session

    def _class_url(self, class_name: str) -> str:
        return f"{self.config.schemas_url}/{class_name}"

    async def fetch_schemas(self) -> List[ClassSchema]:
        """Fetch every class schema from ``GET /schemas``."""
        data = await self._request("GET", self.config.schemas_url)

        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            raise RemoteError(
                "Unexpected response from schemas endpoint",
                details={"url": self.config.schemas_url},
            )

        try:
            schemas = [ClassSchema.model_validate(item) for item in data["results"]]
        except ValidationError as e:
            raise RemoteError("Invalid class schema returned by server", cause=e) from e

        logger.debug(f"Fetched {len(schemas)} class schemas from {self.base_url}")
        return schemas

    async def create_class(self, document: Dict[str, Any]) -> None:
        class_name = document["className"]
        await self._request(
            "POST", self._class_url(class_name), payload=document, class_name=class_name
        )

    async def update_class(
        self,
        class_name: str,
        fields: Dict[str, Any],
        class_level_permissions: Optional[Any] = None,
    ) -> None:
        body: Dict[str, Any] = {"className": class_name, "fields": fields}
        if class_level_permissions is not None:
            body["classLevelPermissions"] = class_level_permissions
        await self._request(
            "PUT", self._class_url(class_name), payload=body, class_name=class_name
        )

    async def delete_class(self, class_name: str) -> None:
        await self._request("DELETE", self._class_url(class_name), class_name=class_name)

    async def health_check(self) -> Dict[str, Any]:
        """Check the health of the Parse Server."""
        start_time = asyncio.get_event_loop().time()

        try:
            data = await self._request("GET", f"{self.base_url}/health")
            response_time = (asyncio.get_event_loop().time() - start_time) * 1000

            server_status = data.get("status") if isinstance(data, dict) else None
            return {
                "status": "healthy" if server_status == "ok" else "unhealthy",
                "server_status": server_status,
                "url": self.base_url,
                "api_accessible": True,
                "response_time_ms": round(response_time, 2),
            }

        except RemoteError as e:
            response_time = (asyncio.get_event_loop().time() - start_time) * 1000

            return {
                "status": "unhealthy",
                "url": self.base_url,
                "error": str(e),
                "api_accessible": False,
                "response_time_ms": round(response_time, 2),
            }

    async def _request(
        self,
        method: str,
        url: str,
        payload: Optional[Dict[str, Any]] = None,
        class_name: Optional[str] = None,
    ) -> Any:
        session = await self._get_session()

        try:
            async with session.request(method, url, json=payload) as response:
                if response.status in (401, 403):
                    data = await self._read_body(response)
                    raise RemoteUnauthorizedError(
                        f"Authentication failed: {_error_message(data, response.status)}",
                        status_code=response.status,
                    )

                data = await self._read_body(response)

                if response.status >= 400:
                    code = data.get("code") if isinstance(data, dict) else None
                    raise RemoteRejectedError(
                        f"{method} {url} rejected: {_error_message(data, response.status)}",
                        status_code=response.status,
                        code=code,
                        payload=data,
                        class_name=class_name,
                    )

                return data

        except aiohttp.ClientError as e:
            raise RemoteUnreachableError(
                f"Network error during {method} {url}", cause=e
            ) from e
        except asyncio.TimeoutError as e:
            raise RemoteUnreachableError(
                f"Timeout during {method} {url}", cause=e
            ) from e

    @staticmethod
    async def _read_body(response: aiohttp.ClientResponse) -> Any:
        try:
            return await response.json(content_type=None)
        except ValueError:
            return await response.text()

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None


def _error_message(data: Any, status: int) -> str:
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    if isinstance(data, str) and data.strip():
        return data.strip()
    return f"HTTP {status}"
