"""Application interfaces (ports): policy store, session cache and security protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from rbac_console.infrastructure or rbac_console.api.
"""

from rbac_console.application.interfaces.services import (
    IPasswordHasher,
    IPolicyStore,
    ISessionAuthorityCache,
    ITokenService,
)

__all__ = [
    "IPasswordHasher",
    "IPolicyStore",
    "ISessionAuthorityCache",
    "ITokenService",
]
