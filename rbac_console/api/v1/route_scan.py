"""Route table scan: one EndpointDescriptor per (method, path) guarded by require_permission."""

from __future__ import annotations

import hashlib
from collections.abc import Iterator

from fastapi import FastAPI
from fastapi.dependencies.models import Dependant
from fastapi.routing import APIRoute

from rbac_console.api.v1.dependencies.auth import PERMISSION_ATTR
from rbac_console.application.dtos.endpoint import EndpointDescriptor


def endpoint_id(method: str, path: str) -> str:
    """Deterministic catalog id: stable across restarts for the same method and path."""
    return hashlib.sha256(f"{method.upper()} {path}".encode()).hexdigest()[:32]


def _required_permissions(dependant: Dependant) -> Iterator[tuple[str, str]]:
    for sub in dependant.dependencies:
        permission = getattr(sub.call, PERMISSION_ATTR, None)
        if permission is not None:
            yield permission
        yield from _required_permissions(sub)


def _summary(route: APIRoute) -> str | None:
    if route.summary:
        return route.summary
    doc = (route.endpoint.__doc__ or "").strip()
    return doc.splitlines()[0] if doc else None


def collect_endpoints(app: FastAPI) -> list[EndpointDescriptor]:
    """Return a descriptor for every guarded route method; unguarded routes are skipped."""
    descriptors: dict[str, EndpointDescriptor] = {}
    for route in app.routes:
        if not isinstance(route, APIRoute):
            continue
        permissions = list(_required_permissions(route.dependant))
        if not permissions:
            continue
        resource, action = permissions[0]
        controller = str(route.tags[0]) if route.tags else route.endpoint.__module__
        for method in sorted(route.methods or ()):
            eid = endpoint_id(method, route.path)
            descriptors[eid] = EndpointDescriptor(
                id=eid,
                path=route.path,
                method=method,
                action=action,
                resource=resource,
                controller=controller,
                summary=_summary(route),
            )
    return [descriptors[k] for k in sorted(descriptors)]
