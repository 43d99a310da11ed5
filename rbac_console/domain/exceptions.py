"""Domain exceptions for the console.

Defines domain-level exceptions that represent business rule violations
and store failures. These exceptions are independent of infrastructure
concerns. Presentation layer maps them to HTTP responses in exception handlers.

Taxonomy:
    ResourceNotFoundException: referenced id does not exist; never retried.
    ConflictException (and subclasses): duplicate key, self-parenting,
        delete blocked by children; never retried.
    TransientStoreException: relational store, policy store or session cache
        unavailable or timed out; safe to retry at the caller's discretion.
    PolicyDivergenceError: relational commit succeeded but the policy store
        step did not; logged and left for the reconciliation sweep.
"""

from typing import Any


class ConsoleException(Exception):
    """Base exception for all console errors.

    All custom exceptions inherit from this class to allow consistent
    error handling and logging. Presentation layer maps these to HTTP
    responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error envelope used by API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(ConsoleException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(ConsoleException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(ConsoleException):
    """Raised when the caller's roles hold no grant for the requested operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource (e.g. 'role', 'authorization').
            action: Optional action that was attempted (e.g. 'create', 'update').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(ConsoleException):
    """Raised when a referenced domain, role, user, menu or endpoint does not exist."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'role', 'menu').
            resource_id: The ID (or comma-joined IDs) that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ConflictException(ConsoleException):
    """Raised when a write violates a uniqueness or structural rule."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "CONFLICT", details)


class SelfParentingException(ConflictException):
    """Raised when a role or menu names itself as parent."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"A {resource_type} cannot be its own parent",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class HasChildrenException(ConflictException):
    """Raised when deleting a tree node that still has children."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"Cannot delete {resource_type} with children; delete children first",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class TransientStoreException(ConsoleException):
    """Raised when a backing store is unavailable or a call exceeded its timeout."""

    def __init__(self, store: str, reason: str) -> None:
        """Initialize with store name and reason.

        Args:
            store: 'database', 'policy_store' or 'session_cache'.
            reason: Underlying error text.
        """
        super().__init__(
            f"{store} unavailable: {reason}",
            "TRANSIENT_STORE_ERROR",
            {"store": store, "reason": reason},
        )


class PolicyDivergenceError(ConsoleException):
    """Relational state committed but the matching policy-store step failed.

    Never surfaced to API callers; the reconciliation sweep repairs it.
    """

    def __init__(self, scope: dict[str, Any], step: str, reason: str) -> None:
        super().__init__(
            f"Policy store diverged from relational state during {step}",
            "POLICY_DIVERGENCE",
            {"scope": scope, "step": step, "reason": reason},
        )
