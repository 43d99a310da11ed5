"""Role API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from rbac_console.domain.enums import Status


class RoleCreate(BaseModel):
    """Request body for creating a role. id is optional (client-chosen)."""

    id: str | None = Field(default=None, min_length=1, max_length=64)
    code: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    pid: str = Field(default="0", min_length=1)
    description: str | None = Field(default=None, max_length=500)
    status: Status = Status.ENABLED


class RoleUpdate(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    pid: str = Field(default="0", min_length=1)
    description: str | None = Field(default=None, max_length=500)
    status: Status | None = None


class RoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    name: str
    pid: str
    status: str
    description: str | None
