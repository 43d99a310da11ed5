"""Health check endpoint. No auth; used for liveness probes."""

from fastapi import APIRouter, Request

from rbac_console.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """Return ok plus whether the policy store and session cache are up."""
    cache = getattr(request.app.state, "session_cache", None)
    return HealthResponse(
        policy_store=getattr(request.app.state, "policy_store", None) is not None,
        session_cache=cache is not None and cache.is_available(),
    )
