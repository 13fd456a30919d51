"""
Abstract base class for schema clients.

This module provides the interface the reconciler uses to read and mutate
the remote schema.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..config import ParseServerConfig
from ..schema.models import ClassSchema


logger = logging.getLogger(__name__)


class SchemaClient(ABC):
    """
    Abstract base class for all schema clients.

    Every mutating method issues exactly one request and raises on failure;
    implementations never retry.
    """

    def __init__(self, config: ParseServerConfig):
        self.config = config
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    async def fetch_schemas(self) -> List[ClassSchema]:
        """
        Fetch every class schema held by the server.

        Raises:
            RemoteUnreachableError: On network or credential failure
        """
        pass

    @abstractmethod
    async def create_class(self, document: Dict[str, Any]) -> None:
        """
        Create a class from its full document.

        Raises:
            RemoteRejectedError: If the server refuses the class
        """
        pass

    @abstractmethod
    async def update_class(
        self,
        class_name: str,
        fields: Dict[str, Any],
        class_level_permissions: Optional[Any] = None,
    ) -> None:
        """
        Create or delete fields of an existing class.

        Raises:
            RemoteRejectedError: If the server refuses the change
        """
        pass

    @abstractmethod
    async def delete_class(self, class_name: str) -> None:
        """
        Drop a class.

        Raises:
            RemoteRejectedError: If the server refuses to drop the class
        """
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """
        Check the health of the server.

        Returns:
            Dictionary with health status information
        """
        pass

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """
        Close the client and clean up resources.

        This method can be overridden by clients that hold sessions.
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(url={self.config.public_server_url})"
