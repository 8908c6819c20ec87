"""Custom exception hierarchy for the shot-roster engine.

Every error the engine raises inherits from RosterEngineError, so the
surrounding request layer can translate engine failures into responses at a
single boundary while still branching on the specific subclass (NotFound
becomes a 404, invalid template keys and malformed arguments become a 422).

Example:
    >>> from shot_roster.core.exceptions import NotFoundError
    >>> raise NotFoundError("fight", "0b6c...")
"""

from __future__ import annotations

from typing import Any


class RosterEngineError(Exception):
    """Base exception for all shot-roster errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = dict(details or {})
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception.

        Returns:
            String representation suitable for debugging.
        """
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Lookup Exceptions
# =============================================================================


class NotFoundError(RosterEngineError):
    """Raised when a fight, party or slot cannot be found.

    A slot that exists but belongs to a different party than the one named
    in the request raises this same error, with the same message, so the
    caller cannot tell the two cases apart.
    """

    def __init__(
        self,
        resource: str,
        resource_id: str | None = None,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize not-found error with resource context.

        Args:
            resource: Kind of resource that was looked up ("fight", "party", "slot").
            resource_id: Identifier that was requested.
            details: Optional dictionary containing additional error context.
        """
        combined_details = dict(details or {})
        if resource_id is not None:
            combined_details["id"] = resource_id
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource.capitalize()} not found", details=combined_details)


class InvalidTemplateKeyError(RosterEngineError):
    """Raised when a party template key is not in the catalog."""

    def __init__(
        self,
        template_key: Any,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid template error.

        Args:
            template_key: The key that was requested.
            details: Optional dictionary containing additional error context.
        """
        combined_details = dict(details or {})
        combined_details["template_key"] = template_key
        self.template_key = template_key
        super().__init__("Unknown party template", details=combined_details)


# =============================================================================
# Argument & Validation Exceptions
# =============================================================================


class InvalidArgumentError(RosterEngineError):
    """Raised when a caller passes a malformed argument.

    This covers unrecognized participant kinds, desired-id lists that are not
    lists of identifiers, slot fields that violate the slot invariants, and
    reorder requests naming the same slot twice.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize argument error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the argument or field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = dict(details or {})
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        self.field_name = field_name
        super().__init__(message, details=combined_details)


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class PersistenceError(RosterEngineError):
    """Raised when the database rejects a statement inside a transaction.

    The transaction has already been rolled back when this is raised; the
    original sqlite3 error is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize persistence error with operation context.

        Args:
            message: Human-readable error description.
            operation: Name of the operation that was running.
            details: Optional dictionary containing additional error context.
        """
        combined_details = dict(details or {})
        if operation:
            combined_details["operation"] = operation
        super().__init__(message, details=combined_details)


class ConfigurationError(RosterEngineError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = dict(details or {})
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


__all__ = [
    "RosterEngineError",
    "NotFoundError",
    "InvalidTemplateKeyError",
    "InvalidArgumentError",
    "PersistenceError",
    "ConfigurationError",
]
