"""ReelVault error hierarchy.

Every error raised by the package derives from :class:`ReelVaultError` and
carries an :class:`ErrorCode`, a human-readable message, an
:class:`ErrorContext` and, when it wraps a lower-level failure, the original
exception.

- :class:`DomainError`: malformed identifiers, undeclared entity fields,
  searches that cannot be narrowed to one title.
- :class:`InfrastructureError`: cache directory, codec and network failures.
- :class:`ApplicationError`: configuration problems.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Values allowed in ErrorContext.additional_data
PrimitiveContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Machine-readable error codes, also printed by the CLI."""

    # Cache directory
    DIRECTORY_CREATION_FAILED = "DIRECTORY_CREATION_FAILED"
    PERMISSION_DENIED = "PERMISSION_DENIED"

    # Network
    NETWORK_ERROR = "NETWORK_ERROR"
    API_REQUEST_FAILED = "API_REQUEST_FAILED"

    # Input validation
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
    INVALID_CATEGORY = "INVALID_CATEGORY"
    UNKNOWN_FIELD = "UNKNOWN_FIELD"

    # Title page extraction
    PARSING_ERROR = "PARSING_ERROR"

    # Narrowing
    NO_SEARCH_RESULTS = "NO_SEARCH_RESULTS"
    MULTIPLE_SEARCH_RESULTS = "MULTIPLE_SEARCH_RESULTS"

    # Cache entries
    CACHE_ERROR = "CACHE_ERROR"
    CACHE_READ_FAILED = "CACHE_READ_FAILED"
    CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
    CACHE_PRUNE_FAILED = "CACHE_PRUNE_FAILED"
    COMPRESSION_FAILED = "COMPRESSION_FAILED"

    CONFIG_ERROR = "CONFIG_ERROR"
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"


def _to_primitive(key: str, value: Any) -> PrimitiveContextValue:
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(
        f"ErrorContext.additional_data['{key}'] must be a str, int, float, bool, "
        f"Path, Enum or Decimal, got {type(value).__name__}",
    )


@dataclass(frozen=True)
class ErrorContext:
    """Where an error happened.

    ``additional_data`` is restricted to primitive values so that every
    context can be written to a JSON log line as is. Paths, enums and
    decimals are converted on construction.

    Attributes:
        file_path: Cache file or configuration file involved, if any
        operation: Name of the failing operation (``cache_add``, ``narrow``...)
        additional_data: Extra primitive details (query, key, status code...)
    """

    file_path: str | None = None
    operation: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        if self.additional_data is None:
            return
        if not isinstance(self.additional_data, dict):
            raise TypeError(f"additional_data must be a dict, got {type(self.additional_data).__name__}")
        coerced = {key: _to_primitive(key, value) for key, value in self.additional_data.items()}
        object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self) -> dict[str, Any]:
        """Log-friendly dict; ``additional_data`` is always present."""
        data: dict[str, Any] = {}
        if self.file_path is not None:
            data["file_path"] = self.file_path
        if self.operation is not None:
            data["operation"] = self.operation
        data["additional_data"] = dict(self.additional_data or {})
        return data


class ReelVaultError(Exception):
    """Base exception class for all ReelVault errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize ReelVaultError.

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

        formatted_message = f"{code.value}: {message}"
        super().__init__(formatted_message)

    def to_dict(self) -> dict[str, Any]:
        """Code, message, context and the wrapped error as a plain dict."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(ReelVaultError):
    """Domain-specific errors.

    These errors occur when business rules are violated: malformed
    identifiers, undeclared entity fields, unresolvable searches.
    """


class InfrastructureError(ReelVaultError):
    """Infrastructure-related errors.

    These errors occur when interacting with external systems
    like the file system or the network.
    """


class ApplicationError(ReelVaultError):
    """Application-level errors (configuration, command handling)."""


class NetworkError(InfrastructureError):
    """Transport failure reported by the fetch collaborator."""


class BadInputError(DomainError):
    """Programmer-error class: invalid identifier shape, invalid category."""


class InvalidArgumentError(DomainError, TypeError):
    """A value of an unsupported type was handed to a constructor."""


class UnknownFieldError(DomainError, AttributeError):
    """Read or write of a field the entity variant does not declare."""

    def __init__(
        self,
        entity: str,
        field: str,
        *,
        operation: str = "set",
    ) -> None:
        self.entity = entity
        self.field = field
        context = ErrorContext(
            operation=f"entity_{operation}",
            additional_data={"entity": entity, "field": field},
        )
        super().__init__(
            ErrorCode.UNKNOWN_FIELD,
            f"{entity}: property '{field}' does not exist",
            context,
        )


class NoSearchResultsError(DomainError):
    """No candidate survived the search or the narrowing filters."""

    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__(
            ErrorCode.NO_SEARCH_RESULTS,
            f"No search results found for keyword: '{query}'",
            ErrorContext(operation="narrow", additional_data={"query": query}),
        )


class MultipleSearchResultsError(DomainError):
    """More than one candidate survived narrowing.

    Attributes:
        query: The free-text query that was narrowed
        candidates: "title (year)" labels of the competing candidates
    """

    def __init__(self, query: str, candidates: list[str]) -> None:
        self.query = query
        self.candidates = candidates
        joined = ", ".join(candidates)
        super().__init__(
            ErrorCode.MULTIPLE_SEARCH_RESULTS,
            f"Multiple search results found for keyword: '{query}'. Results: {joined}",
            ErrorContext(
                operation="narrow",
                additional_data={"query": query, "candidate_count": len(candidates)},
            ),
        )


# Convenience functions for common error scenarios
def create_bad_input_error(
    message: str,
    code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    value: str | None = None,
    operation: str | None = None,
) -> BadInputError:
    """Create a bad input error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"value": value} if value is not None else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return BadInputError(code, message, context)


def create_cache_error(
    message: str,
    code: ErrorCode = ErrorCode.CACHE_ERROR,
    file_path: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> InfrastructureError:
    """Create a cache error with context."""
    context = ErrorContext(
        file_path=file_path,
        operation=operation,
    )
    return InfrastructureError(
        code,
        message,
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
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return ApplicationError(
        ErrorCode.CONFIG_ERROR,
        message,
        context,
        original_error,
    )
