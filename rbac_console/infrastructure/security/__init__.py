"""Security: bearer tokens and password hashing."""

from rbac_console.infrastructure.security.jwt import JwtTokenService
from rbac_console.infrastructure.security.password import BcryptPasswordHasher

__all__ = ["BcryptPasswordHasher", "JwtTokenService"]
