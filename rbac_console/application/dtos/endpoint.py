"""DTOs for the endpoint catalog."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EndpointDescriptor:
    """One scanned route: the unit of the permission catalog."""

    id: str
    path: str
    method: str
    action: str
    resource: str
    controller: str
    summary: str | None = None
