"""Domain API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from rbac_console.domain.enums import Status


class DomainCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_.-]+$")
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=500)


class DomainUpdate(DomainCreate):
    status: Status | None = None


class DomainResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    name: str
    description: str | None
    status: str
