"""Custom exception classes for the application."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions should inherit from this class.
    Follows RFC 7807 Problem Details for HTTP APIs.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        instance: URI reference that identifies the specific occurrence of the problem.
        extra: Additional context-specific information about the error.

    Example:
            raise AppException(
            status_code=404,
            detail="Resource not found",
            type="resource-not-found",
            extra={"key": "/acl/ip/pool/10.0.0.1"}
        )
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            status_code: HTTP status code.
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        """Get default title for HTTP status code.

        Args:
            status_code: HTTP status code.

        Returns:
            Human-readable title for the status code.
        """
        titles = {
            400: "Bad Request",
            404: "Not Found",
            409: "Conflict",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
            502: "Bad Gateway",
            503: "Service Unavailable",
            504: "Gateway Timeout",
        }
        return titles.get(status_code, "Error")


class NotFoundException(AppException):
    """Exception raised when a resource is not found.

    Example:
            raise NotFoundException(
            detail="No ACL policy for host 10.0.0.7",
            type="acl-host-not-found",
            extra={"ip": "10.0.0.7"}
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "not-found",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize not found exception.

        Args:
            detail: Human-readable error message.
            type: Error type identifier.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        super().__init__(
            status_code=404,
            detail=detail,
            type=type,
            title="Not Found",
            instance=instance,
            extra=extra,
        )


class ValidationException(AppException):
    """Exception raised for validation errors."""

    def __init__(
        self,
        detail: str,
        type: str = "validation-error",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation exception.

        Args:
            detail: Human-readable error message.
            type: Error type identifier.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        super().__init__(
            status_code=422,
            detail=detail,
            type=type,
            title="Validation Error",
            instance=instance,
            extra=extra,
        )


class InvalidRangeError(ValidationException):
    """Raised when a CIDR block or host address cannot be parsed.

    Always raised before the store is touched, so a request failing with
    this error has made no writes.
    """

    def __init__(
        self,
        value: str,
        reason: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        detail = f"Invalid address range '{value}'"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(
            detail=detail,
            type="invalid-range",
            extra={"value": value, **(extra or {})},
        )
        self.value = value


# ──────────────────────────────────────────────────────────────
# Key-value store errors
# ──────────────────────────────────────────────────────────────


class StoreError(AppException):
    """Base class for failures of the key-value store.

    Fan-out loops catch this class to isolate per-key failures.
    """

    def __init__(
        self,
        detail: str,
        status_code: int = 503,
        type: str = "store-error",
        title: str | None = None,
        key: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        context = dict(extra or {})
        if key is not None:
            context["key"] = key
        super().__init__(
            status_code=status_code,
            detail=detail,
            type=type,
            title=title,
            extra=context,
        )
        self.key = key


class StoreUnavailableError(StoreError):
    """The store could not be reached or answered with an error."""

    def __init__(
        self,
        detail: str = "Key-value store is unavailable",
        key: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            detail=detail,
            status_code=503,
            type="store-unavailable",
            title="Service Unavailable",
            key=key,
            extra=extra,
        )


class StoreTimeoutError(StoreError):
    """The store did not answer within the timeout of the call."""

    def __init__(
        self,
        operation: str,
        timeout: float,
        key: str | None = None,
    ) -> None:
        super().__init__(
            detail=f"Key-value store {operation} timed out after {timeout:g}s",
            status_code=504,
            type="store-timeout",
            title="Gateway Timeout",
            key=key,
            extra={"operation": operation, "timeout": timeout},
        )
        self.operation = operation
        self.timeout = timeout


class DeserializationError(StoreError):
    """A stored value does not match the expected shape.

    Listings treat such entries as absent; they never fail a request.
    """

    def __init__(self, key: str, reason: str | None = None) -> None:
        detail = f"Malformed value stored at '{key}'"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(
            detail=detail,
            status_code=500,
            type="deserialization-error",
            title="Internal Server Error",
            key=key,
        )
