"""Torn Sentinel Error Handling Module

This module defines the error handling system for Torn Sentinel, providing
structured error classes with context information.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Scoped Failures: fetch-level errors describe one request, never a whole merge
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]

# Default keys to mask in safe_dict for PII protection
SAFE_DICT_MASK_KEYS: tuple[str, ...] = ("user_id",)


class ErrorCode(str, Enum):
    """Error codes for Torn Sentinel.

    This enum serves as the single source of truth for all error codes
    used throughout the package.
    """

    # Credential Errors
    CREDENTIAL_MISSING = "CREDENTIAL_MISSING"

    # Transport Errors
    NETWORK_ERROR = "NETWORK_ERROR"
    API_TIMEOUT = "API_TIMEOUT"
    API_HTTP_STATUS = "API_HTTP_STATUS"
    API_INVALID_JSON = "API_INVALID_JSON"

    # Upstream Application Errors (error object embedded in a 200 response)
    UPSTREAM_APPLICATION_ERROR = "UPSTREAM_APPLICATION_ERROR"
    UPSTREAM_CREDENTIAL_REJECTED = "UPSTREAM_CREDENTIAL_REJECTED"
    UPSTREAM_RATE_LIMITED = "UPSTREAM_RATE_LIMITED"

    # Normalization Errors
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    UNSUPPORTED_SCHEMA = "UNSUPPORTED_SCHEMA"

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNKNOWN_RESOURCE = "UNKNOWN_RESOURCE"

    # Configuration Errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Collaborator Errors
    SNAPSHOT_SYNC_FAILED = "SNAPSHOT_SYNC_FAILED"

    # Application Errors
    APPLICATION_ERROR = "APPLICATION_ERROR"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        elif val is None:
            continue
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContextModel:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data to ensure safe serialization and keep credentials and
    raw payloads out of logs. ``None`` values are dropped.

    Attributes:
        operation: Optional operation name that caused the error
        resource: Optional logical resource the error is scoped to
        user_id: Optional player ID (masked in logs)
        additional_data: Optional dict with primitive values only
    """

    operation: str | None = None
    resource: str | None = None
    user_id: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            # Frozen dataclass: internal field update goes through object.__setattr__
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self, *, mask_keys: tuple[str, ...] | None = None) -> dict[str, Any]:
        """Export context as dict with PII masking.

        Args:
            mask_keys: Fields to exclude from output. Defaults to SAFE_DICT_MASK_KEYS.

        Returns:
            Dictionary with masked sensitive fields and guaranteed additional_data key.

        Example:
            >>> context = ErrorContextModel(user_id="12345", operation="fetch")
            >>> context.safe_dict()
            {'operation': 'fetch', 'additional_data': {}}
        """
        if mask_keys is None:
            mask_keys = SAFE_DICT_MASK_KEYS

        data: dict[str, Any] = {}
        if self.operation is not None and "operation" not in mask_keys:
            data["operation"] = self.operation
        if self.resource is not None and "resource" not in mask_keys:
            data["resource"] = self.resource
        if self.user_id is not None and "user_id" not in mask_keys:
            data["user_id"] = self.user_id

        if self.additional_data is not None and "additional_data" not in mask_keys:
            data["additional_data"] = self.additional_data
        else:
            data["additional_data"] = {}

        return data


ErrorContext = ErrorContextModel


class TornSentinelError(Exception):
    """Base exception class for all Torn Sentinel errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize TornSentinelError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging with PII masking.

        Returns:
            Dictionary representation of the error with code, message,
            masked context, and original_error (if present)
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(TornSentinelError):
    """Domain-specific errors.

    These errors occur when data does not satisfy the rules of the
    canonical model, e.g. an upstream payload missing a required field.
    """


class InfrastructureError(TornSentinelError):
    """Infrastructure-related errors.

    These errors occur when interacting with external systems such as the
    Torn API or the backend-as-a-service store.
    """


class ApplicationError(TornSentinelError):
    """Application-level errors.

    These errors signal invalid caller usage or configuration, e.g. asking
    an orchestrator for an undefined resource key.
    """


class CredentialMissingError(ApplicationError):
    """No API credential is available.

    Orchestrators treat this as "every requested resource is absent" and
    never attempt a network call.
    """


class TransportError(InfrastructureError):
    """A single request failed before a usable payload was received.

    Covers timeouts, connection failures, non-2xx HTTP statuses and bodies
    that are not valid JSON objects.
    """


class UpstreamApplicationError(InfrastructureError):
    """The upstream answered successfully but embedded an ``error`` object.

    This indicates a caller-side problem (bad credential, invalid
    selections) rather than a network problem.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        upstream_code: int,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        self.upstream_code = upstream_code
        super().__init__(code, message, context, original_error)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["upstream_code"] = self.upstream_code
        return data


class MalformedResponseError(DomainError):
    """A normalizer could not find the fields it requires in a payload."""


def create_validation_error(
    message: str,
    operation: str | None = None,
    field: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a validation error with context."""
    context = ErrorContext(
        operation=operation,
        additional_data={"field": field} if field else None,
    )
    return ApplicationError(
        ErrorCode.VALIDATION_ERROR,
        message,
        context,
        original_error,
    )


def create_malformed_response_error(
    resource: str,
    field: str,
    schema: str,
    original_error: Exception | None = None,
) -> MalformedResponseError:
    """Create a malformed-response error for a missing or invalid field."""
    context = ErrorContext(
        operation="normalize",
        resource=resource,
        additional_data={"field": field, "schema": schema},
    )
    return MalformedResponseError(
        ErrorCode.MISSING_REQUIRED_FIELD,
        f"Payload for {resource} ({schema}) is missing or has invalid field '{field}'",
        context,
        original_error,
    )


def create_config_error(
    message: str,
    config_key: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a configuration error with context."""
    context = ErrorContext(
        operation=operation,
        additional_data={"config_key": config_key} if config_key else None,
    )
    return ApplicationError(
        ErrorCode.CONFIGURATION_ERROR,
        message,
        context,
        original_error,
    )
