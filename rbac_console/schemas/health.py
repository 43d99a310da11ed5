"""Health API schemas."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
    policy_store: bool
    session_cache: bool
