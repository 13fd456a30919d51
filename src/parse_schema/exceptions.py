"""
Exception classes for parse-schema.
"""

from typing import Any, Dict, Optional


class ParseSchemaError(Exception):
    """Base exception for all parse-schema errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        result = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            result += f" [{details_str}]"
        if self.cause:
            result += f" (caused by: {self.cause})"
        return result


class ConfigurationError(ParseSchemaError):
    """Raised when the connection configuration is missing or invalid."""

    pass


class LocalSchemaError(ParseSchemaError):
    """Raised when the local schema description cannot be used."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        details = {"path": path} if path else None
        super().__init__(message, details, cause)
        self.path = path


class LocalSchemaNotFoundError(LocalSchemaError):
    """Raised when the local schema path does not exist."""

    pass


class LocalSchemaParseError(LocalSchemaError):
    """Raised when a local schema document is malformed."""

    pass


class RemoteError(ParseSchemaError):
    """Raised when there's an error talking to the Parse Server."""

    pass


class RemoteUnreachableError(RemoteError):
    """Raised on network failures while fetching or mutating the remote schema."""

    pass


class RemoteUnauthorizedError(RemoteUnreachableError):
    """Raised when the server rejects the application id or master key."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        details = {"status_code": status_code} if status_code else None
        super().__init__(message, details)
        self.status_code = status_code


class RemoteRejectedError(RemoteError):
    """Raised when the server refuses a single create/update/delete request."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[int] = None,
        payload: Optional[Any] = None,
        class_name: Optional[str] = None,
    ) -> None:
        details = {}
        if class_name:
            details["class_name"] = class_name
        if status_code:
            details["status_code"] = status_code
        if code is not None:
            details["code"] = code

        super().__init__(message, details)
        self.status_code = status_code
        self.code = code
        self.payload = payload
        self.class_name = class_name


class UnsupportedFieldTypeError(ParseSchemaError):
    """Raised when the type generator meets a field type it cannot express."""

    def __init__(self, field_type: str, class_name: Optional[str] = None) -> None:
        message = f"Parse type '{field_type}' not implemented for TypeScript conversion"
        if class_name:
            message += f" (class {class_name})"
        super().__init__(message)
        self.field_type = field_type
        self.class_name = class_name
