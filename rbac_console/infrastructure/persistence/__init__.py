"""Persistence: async engine, unit of work, ORM models and repositories."""

from rbac_console.infrastructure.persistence.database import (
    Base,
    dispose_engine,
    get_engine,
    get_session_factory,
    read_session,
    unit_of_work,
)
from rbac_console.infrastructure.persistence.unit_of_work import (
    Repositories,
    UnitOfWorkFactory,
)

__all__ = [
    "Base",
    "Repositories",
    "UnitOfWorkFactory",
    "dispose_engine",
    "get_engine",
    "get_session_factory",
    "read_session",
    "unit_of_work",
]
