"""Bearer token issue and verification (python-jose).

Tokens carry sub (user id), username and domain. The token lifetime is
also the TTL of the user's Session Authority Cache entry.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from rbac_console.application.dtos.user import AuthenticatedUser
from rbac_console.core.config import Settings, get_settings
from rbac_console.domain.exceptions import AuthenticationException

REQUIRED_CLAIMS = ("sub", "username", "domain")


class JwtTokenService:
    """ITokenService over HS256 (by default) JWTs signed with settings.secret_key."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @property
    def ttl_seconds(self) -> int:
        return self.settings.access_token_ttl_seconds

    def create_access_token(
        self,
        data: dict[str, Any],
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a signed token with the given claims and an exp claim."""
        to_encode = data.copy()
        expire = datetime.now(UTC) + (
            expires_delta
            if expires_delta is not None
            else timedelta(seconds=self.ttl_seconds)
        )
        to_encode["exp"] = expire
        encoded = jwt.encode(
            to_encode,
            self.settings.secret_key.get_secret_value(),
            algorithm=self.settings.algorithm,
        )
        return cast(str, encoded)

    def issue_for(self, user_id: str, username: str, domain: str) -> str:
        return self.create_access_token({"sub": user_id, "username": username, "domain": domain})

    def verify_token(self, token: str) -> dict[str, Any]:
        """Verify and decode a token. Returns the payload.

        Raises:
            AuthenticationException: Invalid, expired, or missing required claims.
        """
        try:
            payload = jwt.decode(
                token,
                self.settings.secret_key.get_secret_value(),
                algorithms=[self.settings.algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except JWTError as e:
            raise AuthenticationException(f"Invalid token: {e!s}") from e
        missing = [c for c in REQUIRED_CLAIMS if not payload.get(c)]
        if missing:
            raise AuthenticationException(f"Token missing required claims: {', '.join(missing)}")
        return payload

    def resolve(self, token: str) -> AuthenticatedUser:
        """Return the (user_id, username, domain) identity carried by a verified token."""
        payload = self.verify_token(token)
        return AuthenticatedUser(
            user_id=payload["sub"], username=payload["username"], domain=payload["domain"]
        )
