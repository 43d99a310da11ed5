"""Tests for domain exceptions (error_code, message, details) and their HTTP status."""

from rbac_console.core.exception_handlers import status_for
from rbac_console.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ConflictException,
    ConsoleException,
    HasChildrenException,
    PolicyDivergenceError,
    ResourceNotFoundException,
    SelfParentingException,
    TransientStoreException,
    ValidationException,
)


def test_console_exception_default_error_code() -> None:
    """Base ConsoleException uses class name as error_code when not provided."""
    exc = ConsoleException("Something failed")
    assert exc.error_code == "ConsoleException"
    assert exc.details == {}
    assert exc.to_dict() == {
        "error": "ConsoleException",
        "message": "Something failed",
        "details": {},
    }


def test_resource_not_found_exception() -> None:
    exc = ResourceNotFoundException("role", "r-1")
    assert exc.message == "role not found: r-1"
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "role", "resource_id": "r-1"}
    assert status_for(exc) == 404


def test_self_parenting_is_a_conflict() -> None:
    exc = SelfParentingException("menu", "7")
    assert isinstance(exc, ConflictException)
    assert exc.error_code == "CONFLICT"
    assert exc.details == {"resource_type": "menu", "resource_id": "7"}
    assert status_for(exc) == 409


def test_has_children_is_a_conflict() -> None:
    exc = HasChildrenException("menu", "3")
    assert isinstance(exc, ConflictException)
    assert status_for(exc) == 409


def test_transient_store_exception_maps_to_503() -> None:
    exc = TransientStoreException("session_cache", "connection refused")
    assert exc.message == "session_cache unavailable: connection refused"
    assert exc.details == {"store": "session_cache", "reason": "connection refused"}
    assert status_for(exc) == 503


def test_authorization_exception_with_resource_and_action() -> None:
    exc = AuthorizationException(resource="role", action="delete")
    assert exc.message == "Permission denied: delete on role"
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.details == {"resource": "role", "action": "delete"}
    assert status_for(exc) == 403


def test_authorization_exception_default_message() -> None:
    exc = AuthorizationException()
    assert exc.message == "Permission denied"
    assert exc.details == {}


def test_authentication_exception_maps_to_401() -> None:
    exc = AuthenticationException()
    assert exc.message == "Authentication failed"
    assert status_for(exc) == 401


def test_validation_exception_field() -> None:
    assert ValidationException("bad", field="code").details == {"field": "code"}
    assert status_for(ValidationException("bad")) == 400


def test_policy_divergence_error_carries_scope_and_step() -> None:
    exc = PolicyDivergenceError({"role": "R1", "domain": "built-in"}, "sync_permissions", "timeout")
    assert exc.error_code == "POLICY_DIVERGENCE"
    assert exc.details["scope"] == {"role": "R1", "domain": "built-in"}
    assert exc.details["step"] == "sync_permissions"
