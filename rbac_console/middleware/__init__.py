"""HTTP middleware: request timeout and request ID.

Applied in main app; order matters (first added = innermost).
"""

from rbac_console.middleware.request_id import RequestIDMiddleware
from rbac_console.middleware.timeout import TimeoutMiddleware

__all__ = ["RequestIDMiddleware", "TimeoutMiddleware"]
