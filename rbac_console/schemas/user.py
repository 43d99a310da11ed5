"""User API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from rbac_console.domain.enums import Status


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=6, max_length=128)
    domain: str = Field(..., min_length=1, max_length=64)
    nick_name: str = Field(..., min_length=1, max_length=64)
    avatar: str | None = None
    email: str | None = Field(default=None, max_length=255)
    phone_number: str | None = Field(default=None, max_length=32)
    status: Status = Status.ENABLED


class UserUpdate(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    nick_name: str = Field(..., min_length=1, max_length=64)
    avatar: str | None = None
    email: str | None = Field(default=None, max_length=255)
    phone_number: str | None = Field(default=None, max_length=32)
    status: Status | None = None


class UserResponse(BaseModel):
    """User response. The password hash is never returned."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    domain: str
    nick_name: str
    avatar: str | None
    email: str | None
    phone_number: str | None
    status: str
