"""rbac-console: domain-scoped RBAC authorization core for a multi-tenant admin console."""

__version__ = "1.0.0"
