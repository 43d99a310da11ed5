"""Tests for bearer tokens (python-jose) and password hashing (bcrypt)."""

from datetime import timedelta

import pytest

from rbac_console.domain.exceptions import AuthenticationException
from rbac_console.infrastructure.security import BcryptPasswordHasher, JwtTokenService


def test_issued_token_resolves_to_identity() -> None:
    tokens = JwtTokenService()
    user = tokens.resolve(tokens.issue_for("u1", "alice", "built-in"))
    assert (user.user_id, user.username, user.domain) == ("u1", "alice", "built-in")


def test_expired_token_is_rejected() -> None:
    tokens = JwtTokenService()
    token = tokens.create_access_token(
        {"sub": "u1", "username": "alice", "domain": "built-in"},
        expires_delta=timedelta(seconds=-5),
    )
    with pytest.raises(AuthenticationException):
        tokens.verify_token(token)


def test_token_missing_domain_claim_is_rejected() -> None:
    tokens = JwtTokenService()
    token = tokens.create_access_token({"sub": "u1", "username": "alice"})
    with pytest.raises(AuthenticationException, match="domain"):
        tokens.verify_token(token)


def test_garbage_token_is_rejected() -> None:
    with pytest.raises(AuthenticationException):
        JwtTokenService().verify_token("not-a-jwt")


def test_password_hash_roundtrip() -> None:
    hasher = BcryptPasswordHasher(rounds=4)
    hashed = hasher.hash("correct horse")
    assert hashed != "correct horse"
    assert hasher.verify("correct horse", hashed)
    assert not hasher.verify("wrong horse", hashed)


def test_long_passwords_are_not_truncated() -> None:
    """Inputs differing only after byte 72 must not verify against each other."""
    hasher = BcryptPasswordHasher(rounds=4)
    base = "x" * 80
    assert not hasher.verify(base + "b", hasher.hash(base + "a"))


def test_malformed_hash_never_matches() -> None:
    assert BcryptPasswordHasher(rounds=4).verify("pw", "not-a-bcrypt-hash") is False
